"""
Warranty Ledger Errors.

Every error aborts the whole invocation; nothing it staged is committed.
"""

from __future__ import annotations


class WarrantyError(Exception):
    """Base class for warranty operation failures."""

    code = "warranty_error"

    def __init__(self, message: str, warranty_id: int | None = None) -> None:
        super().__init__(message)
        self.warranty_id = warranty_id


class WarrantyNotFound(WarrantyError):
    code = "not_found"

    def __init__(self, warranty_id: int) -> None:
        super().__init__("Warranty not found!", warranty_id)


class WarrantyAlreadyClaimed(WarrantyError):
    code = "already_claimed"

    def __init__(self, warranty_id: int) -> None:
        super().__init__("Warranty already claimed!", warranty_id)


class WarrantyExpired(WarrantyError):
    code = "expired"

    def __init__(self, warranty_id: int) -> None:
        super().__init__("Warranty expired!", warranty_id)


class UnauthorizedClaimer(WarrantyError):
    """The claimer is not the warranty's owner."""

    code = "unauthorized"

    def __init__(self, warranty_id: int) -> None:
        super().__init__("Unauthorized: You are not the warranty owner!", warranty_id)


class InvalidWarrantyTerms(WarrantyError):
    """Issue arguments fall outside the unsigned 64-bit domain."""

    code = "invalid_terms"


class LedgerInconsistent(WarrantyError):
    """Stored state cannot be decoded or would break a counter invariant."""

    code = "ledger_inconsistent"
