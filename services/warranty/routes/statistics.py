"""
Warranty Statistics API Endpoints.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from services.warranty.registry.models import WarrantyStatistics
from services.warranty.registry.service import WarrantyLedgerService, get_warranty_service


router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get(
    "",
    response_model=WarrantyStatistics,
    summary="Get warranty statistics",
)
async def get_statistics(
    service: Annotated[WarrantyLedgerService, Depends(get_warranty_service)],
) -> WarrantyStatistics:
    """Get running totals over every warranty ever issued."""
    return await service.get_statistics()
