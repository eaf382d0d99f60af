"""
Warranty Ledger Service.

Issues, inspects and claims digital warranty records on behalf of
product owners and keeps aggregate counters over every warranty ever
issued.

Key Features:
- Sequential, never-reused warranty ids
- Owner-only, one-way claiming gated on expiry
- Statistics committed atomically with every record change
- Mock (in-memory) and Redis storage substrates
"""

from services.warranty.registry import (
    WarrantyLedgerService,
    WarrantyRecord,
    WarrantyStatistics,
)

__all__ = [
    "WarrantyLedgerService",
    "WarrantyRecord",
    "WarrantyStatistics",
]
