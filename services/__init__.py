"""
Warranty Ledger Services
========================

Services:
- warranty: warranty issuance, inspection, claiming and statistics
"""

__all__ = [
    "warranty",
]
