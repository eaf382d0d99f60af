"""
Warranty Ledger Models.

Records and aggregate statistics as they are persisted, plus the fixed
storage layout they live under.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


U64_MAX = 2**64 - 1
SECONDS_PER_DAY = 86_400

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]

# Storage keys
COUNT_KEY = "W_COUNT"
STATS_KEY = "W_STATS"

# Sentinel returned by check_warranty for unknown ids
NOT_FOUND_PRODUCT = "Not_Found"
PLACEHOLDER_OWNER = "GAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAWHF"


def warranty_key(warranty_id: int) -> str:
    """Storage key of one warranty record."""
    return f"Warranty({warranty_id})"


class WarrantyRecord(BaseModel):
    """
    One issued warranty.

    Immutable apart from `active`, which only ever goes from True to False;
    `claimed()` returns that transition as a new record.
    """

    model_config = ConfigDict(frozen=True)

    id: U64 = Field(..., validation_alias=AliasChoices("id", "token_id"))
    product_name: str
    owner: str
    issued_at: U64 = Field(..., validation_alias=AliasChoices("issued_at", "issue_date"))
    expires_at: U64 = Field(..., validation_alias=AliasChoices("expires_at", "expiry_date"))
    active: bool = Field(..., validation_alias=AliasChoices("active", "is_active"))

    @model_validator(mode="after")
    def expiry_not_before_issue(self) -> WarrantyRecord:
        if self.expires_at < self.issued_at:
            raise ValueError("expires_at must not precede issued_at")
        return self

    @classmethod
    def not_found(cls) -> WarrantyRecord:
        """The sentinel record standing in for a missing warranty."""
        return cls(
            id=0,
            product_name=NOT_FOUND_PRODUCT,
            owner=PLACEHOLDER_OWNER,
            issued_at=0,
            expires_at=0,
            active=False,
        )

    @property
    def is_sentinel(self) -> bool:
        return self.id == 0

    def is_expired(self, now: int) -> bool:
        """Expiry is strict: a claim at exactly `expires_at` is still valid."""
        return now > self.expires_at

    def claimed(self) -> WarrantyRecord:
        return self.model_copy(update={"active": False})


class WarrantyStatistics(BaseModel):
    """
    Running totals over every warranty ever issued.

    `expired_count` is carried for layout compatibility; nothing moves a
    record into a counted expired state, so it stays zero and
    `total_issued == active_count + claimed_count` holds after every commit.
    """

    model_config = ConfigDict(frozen=True)

    total_issued: U64 = 0
    active_count: U64 = Field(
        default=0, validation_alias=AliasChoices("active_count", "active_warranties")
    )
    expired_count: U64 = Field(
        default=0, validation_alias=AliasChoices("expired_count", "expired_warranties")
    )
    claimed_count: U64 = Field(
        default=0, validation_alias=AliasChoices("claimed_count", "claimed_warranties")
    )

    @property
    def is_consistent(self) -> bool:
        return self.total_issued == self.active_count + self.claimed_count + self.expired_count

    def record_issue(self) -> WarrantyStatistics:
        if self.total_issued >= U64_MAX or self.active_count >= U64_MAX:
            raise OverflowError("warranty statistics counter overflow")
        return self.model_copy(
            update={
                "total_issued": self.total_issued + 1,
                "active_count": self.active_count + 1,
            }
        )

    def record_claim(self) -> WarrantyStatistics:
        if self.active_count == 0:
            raise OverflowError("active warranty count underflow")
        return self.model_copy(
            update={
                "active_count": self.active_count - 1,
                "claimed_count": self.claimed_count + 1,
            }
        )
