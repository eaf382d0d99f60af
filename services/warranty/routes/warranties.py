"""
Warranty API Endpoints.

Issue, inspect and claim warranties. Mutating endpoints act for the
identity proven by the caller's bearer token.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from pydantic import BaseModel, Field

from shared.auth import PrincipalAuthenticator, get_authenticator
from services.warranty.registry.models import U64_MAX, WarrantyRecord
from services.warranty.registry.service import WarrantyLedgerService, get_warranty_service


router = APIRouter(prefix="/warranties", tags=["warranties"])

ServiceDep = Annotated[WarrantyLedgerService, Depends(get_warranty_service)]
AuthDep = Annotated[PrincipalAuthenticator, Depends(get_authenticator)]
WarrantyId = Annotated[int, Path(ge=0, le=U64_MAX, description="Warranty id")]


class WarrantyIssueRequest(BaseModel):
    """Request to issue a new warranty."""

    owner: str = Field(..., min_length=1, description="Identity the warranty is issued to")
    product_name: str = Field(..., description="Product covered by the warranty")
    period_days: int = Field(..., ge=0, le=U64_MAX, description="Warranty length in days")


class WarrantyClaimRequest(BaseModel):
    """Request to claim a warranty."""

    claimer: str = Field(..., min_length=1, description="Identity claiming the warranty")


class WarrantyResponse(BaseModel):
    """Warranty record response."""

    id: int
    product_name: str
    owner: str
    issued_at: int
    expires_at: int
    active: bool
    expired: bool

    @classmethod
    def from_record(cls, record: WarrantyRecord, now: int) -> WarrantyResponse:
        """Create response from WarrantyRecord as seen at `now`."""
        return cls(
            id=record.id,
            product_name=record.product_name,
            owner=record.owner,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
            active=record.active,
            expired=not record.is_sentinel and record.is_expired(now),
        )


@router.post(
    "",
    response_model=WarrantyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a new warranty",
)
async def issue_warranty(
    request: WarrantyIssueRequest,
    service: ServiceDep,
    auth: AuthDep,
) -> WarrantyResponse:
    """
    Issue a new warranty to the caller.

    The owner must be the identity proven by the bearer token.
    """
    warranty_id = await service.issue_warranty(
        auth,
        owner=request.owner,
        product_name=request.product_name,
        period_days=request.period_days,
    )
    record = await service.check_warranty(warranty_id)

    return WarrantyResponse.from_record(record, service.clock.now())


@router.get(
    "/{warranty_id}",
    response_model=WarrantyResponse,
    summary="Get warranty by ID",
)
async def get_warranty(warranty_id: WarrantyId, service: ServiceDep) -> WarrantyResponse:
    """Get warranty record by ID."""
    record = await service.find_warranty(warranty_id)

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Warranty {warranty_id} not found",
        )

    return WarrantyResponse.from_record(record, service.clock.now())


@router.get(
    "/{warranty_id}/check",
    response_model=WarrantyResponse,
    summary="Check warranty status",
)
async def check_warranty(warranty_id: WarrantyId, service: ServiceDep) -> WarrantyResponse:
    """
    Check warranty status and validity.

    Unknown ids return the not-found record (`id` 0) rather than a 404.
    """
    record = await service.check_warranty(warranty_id)
    return WarrantyResponse.from_record(record, service.clock.now())


@router.post(
    "/{warranty_id}/claim",
    response_model=WarrantyResponse,
    summary="Claim a warranty",
)
async def claim_warranty(
    warranty_id: WarrantyId,
    request: WarrantyClaimRequest,
    service: ServiceDep,
    auth: AuthDep,
) -> WarrantyResponse:
    """
    Claim a warranty, marking it used.

    Only the owner may claim, only once, and only until it expires.
    """
    record = await service.claim_warranty(
        auth,
        warranty_id=warranty_id,
        claimer=request.claimer,
    )
    return WarrantyResponse.from_record(record, service.clock.now())
