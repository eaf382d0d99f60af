"""Warranty record lifecycle and statistics."""

from services.warranty.registry.errors import (
    InvalidWarrantyTerms,
    LedgerInconsistent,
    UnauthorizedClaimer,
    WarrantyAlreadyClaimed,
    WarrantyError,
    WarrantyExpired,
    WarrantyNotFound,
)
from services.warranty.registry.models import (
    WarrantyRecord,
    WarrantyStatistics,
)
from services.warranty.registry.service import (
    WarrantyLedgerService,
    get_warranty_service,
    reset_warranty_service,
    set_warranty_service,
)

__all__ = [
    "WarrantyLedgerService",
    "get_warranty_service",
    "set_warranty_service",
    "reset_warranty_service",
    "WarrantyRecord",
    "WarrantyStatistics",
    "WarrantyError",
    "WarrantyNotFound",
    "WarrantyAlreadyClaimed",
    "WarrantyExpired",
    "UnauthorizedClaimer",
    "InvalidWarrantyTerms",
    "LedgerInconsistent",
]
