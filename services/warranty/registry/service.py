"""
Warranty Ledger Service.

Issues, inspects and claims warranty records and keeps the aggregate
statistics in step with them. Every mutating operation reads, computes
and writes the counter/record/statistics triple inside one storage
transaction under the service lock, so a rejected call leaves all three
exactly as they were.
"""

from __future__ import annotations

import asyncio
from typing import Any, NoReturn, Protocol

from pydantic import ValidationError

from shared.config import settings
from shared.ledger import (
    Authenticator,
    Clock,
    EventSink,
    LedgerEvent,
    LedgerStorage,
    LoggingEventSink,
    SystemClock,
    get_ledger_storage,
)
from shared.logging import get_logger
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
    COUNT_KEY,
    SECONDS_PER_DAY,
    STATS_KEY,
    U64_MAX,
    WarrantyRecord,
    WarrantyStatistics,
    warranty_key,
)


logger = get_logger(__name__)


class _Reader(Protocol):
    """Anything that can read a key: the storage itself or an open transaction."""

    async def get(self, key: str) -> Any | None:
        ...


class WarrantyLedgerService:
    """
    Warranty record lifecycle and statistics maintenance.

    Operations:
    - issue_warranty: create an active record for an authenticated owner
    - check_warranty: read a record, or the sentinel when it does not exist
    - find_warranty: read a record, or None when it does not exist
    - claim_warranty: owner-only, one-way deactivation before expiry
    - get_statistics: running totals
    """

    def __init__(
        self,
        storage: LedgerStorage,
        clock: Clock | None = None,
        events: EventSink | None = None,
        ttl_threshold: int | None = None,
        ttl_extend_to: int | None = None,
    ) -> None:
        self.storage = storage
        self.clock = clock or SystemClock()
        self.events = events or LoggingEventSink()
        self.ttl_threshold = (
            settings.ledger.ttl_threshold if ttl_threshold is None else ttl_threshold
        )
        self.ttl_extend_to = (
            settings.ledger.ttl_extend_to if ttl_extend_to is None else ttl_extend_to
        )
        if self.ttl_threshold < 0 or self.ttl_extend_to < self.ttl_threshold:
            raise ValueError("ttl_extend_to must be >= ttl_threshold >= 0")
        self._lock = asyncio.Lock()

    async def issue_warranty(
        self,
        auth: Authenticator,
        owner: str,
        product_name: str,
        period_days: int,
    ) -> int:
        """
        Issue a new warranty to `owner`.

        Args:
            auth: Authenticator for this invocation; must prove `owner`.
            owner: Identity the warranty is issued to.
            product_name: Free-form product name.
            period_days: Warranty length in whole days.

        Returns:
            The new warranty id (the first one issued is 1).

        Raises:
            AuthenticationFailed: If the caller has not proven `owner`.
            InvalidWarrantyTerms: If the period or resulting ids/times leave
                the unsigned 64-bit range.
        """
        auth.require_auth(owner)

        if period_days < 0:
            raise InvalidWarrantyTerms("period_days must be non-negative")

        async with self._lock, self.storage.transaction() as tx:
            count = await self._read_count(tx)
            if count >= U64_MAX:
                raise InvalidWarrantyTerms("warranty id space exhausted")
            warranty_id = count + 1

            issued_at = self.clock.now()
            expires_at = issued_at + period_days * SECONDS_PER_DAY
            if expires_at > U64_MAX:
                raise InvalidWarrantyTerms("warranty period overflows expiry time")

            record = WarrantyRecord(
                id=warranty_id,
                product_name=product_name,
                owner=owner,
                issued_at=issued_at,
                expires_at=expires_at,
                active=True,
            )

            stats = await self._read_statistics(tx)
            try:
                stats = stats.record_issue()
            except OverflowError as e:
                raise InvalidWarrantyTerms(str(e)) from e

            tx.set(warranty_key(warranty_id), record.model_dump(mode="json"))
            tx.set(COUNT_KEY, warranty_id)
            tx.set(STATS_KEY, stats.model_dump(mode="json"))
            tx.extend_ttl(self.ttl_threshold, self.ttl_extend_to)

        logger.info(
            "warranty_issued",
            warranty_id=warranty_id,
            owner=owner,
            expires_at=expires_at,
        )
        self._publish(
            "warranty_issued",
            {
                "warranty_id": warranty_id,
                "owner": owner,
                "product_name": product_name,
                "expires_at": expires_at,
            },
        )

        return warranty_id

    async def check_warranty(self, warranty_id: int) -> WarrantyRecord:
        """
        Get a warranty, falling back to the sentinel record.

        Never raises for a missing id: the result has `id == 0` instead.
        """
        record = await self.find_warranty(warranty_id)
        if record is None:
            return WarrantyRecord.not_found()
        return record

    async def find_warranty(self, warranty_id: int) -> WarrantyRecord | None:
        """Get a warranty by id, or None if it was never issued."""
        return await self._read_record(self.storage, warranty_id)

    async def claim_warranty(
        self,
        auth: Authenticator,
        warranty_id: int,
        claimer: str,
    ) -> WarrantyRecord:
        """
        Claim (use up) a warranty.

        Checks run in a fixed order and the first failure aborts the call:
        not found, already claimed, expired, claimer is not the owner.

        Args:
            auth: Authenticator for this invocation; must prove `claimer`.
            warranty_id: Warranty to claim.
            claimer: Identity claiming it.

        Returns:
            The record after the claim (inactive).

        Raises:
            AuthenticationFailed: If the caller has not proven `claimer`.
            WarrantyNotFound, WarrantyAlreadyClaimed, WarrantyExpired,
            UnauthorizedClaimer: In that order of precedence.
        """
        auth.require_auth(claimer)

        async with self._lock, self.storage.transaction() as tx:
            record = await self._read_record(tx, warranty_id)

            if record is None:
                self._reject(WarrantyNotFound(warranty_id))

            if not record.active:
                self._reject(WarrantyAlreadyClaimed(warranty_id))

            if record.is_expired(self.clock.now()):
                self._reject(WarrantyExpired(warranty_id))

            if record.owner != claimer:
                self._reject(UnauthorizedClaimer(warranty_id))

            claimed = record.claimed()

            stats = await self._read_statistics(tx)
            try:
                stats = stats.record_claim()
            except OverflowError as e:
                raise LedgerInconsistent(str(e), warranty_id) from e

            tx.set(warranty_key(warranty_id), claimed.model_dump(mode="json"))
            tx.set(STATS_KEY, stats.model_dump(mode="json"))
            tx.extend_ttl(self.ttl_threshold, self.ttl_extend_to)

        logger.info("warranty_claimed", warranty_id=warranty_id, claimer=claimer)
        self._publish(
            "warranty_claimed",
            {"warranty_id": warranty_id, "claimer": claimer},
        )

        return claimed

    async def get_statistics(self) -> WarrantyStatistics:
        """Running totals; all zeros before the first issue."""
        return await self._read_statistics(self.storage)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _read_count(self, reader: _Reader) -> int:
        raw = await reader.get(COUNT_KEY)
        if raw is None:
            return 0
        if not isinstance(raw, int) or isinstance(raw, bool) or raw < 0:
            raise LedgerInconsistent(f"Corrupt warranty counter: {raw!r}")
        return raw

    async def _read_record(self, reader: _Reader, warranty_id: int) -> WarrantyRecord | None:
        # id 0 is the sentinel and is never allocated
        if warranty_id <= 0 or warranty_id > U64_MAX:
            return None

        raw = await reader.get(warranty_key(warranty_id))
        if raw is None:
            return None

        try:
            return WarrantyRecord.model_validate(raw)
        except ValidationError as e:
            raise LedgerInconsistent(
                f"Corrupt warranty record {warranty_id}", warranty_id
            ) from e

    async def _read_statistics(self, reader: _Reader) -> WarrantyStatistics:
        raw = await reader.get(STATS_KEY)
        if raw is None:
            return WarrantyStatistics()

        try:
            return WarrantyStatistics.model_validate(raw)
        except ValidationError as e:
            raise LedgerInconsistent("Corrupt warranty statistics") from e

    def _reject(self, error: WarrantyError) -> NoReturn:
        logger.warning(
            "warranty_claim_rejected",
            warranty_id=error.warranty_id,
            code=error.code,
            reason=str(error),
        )
        raise error

    def _publish(self, topic: str, data: dict[str, Any]) -> None:
        try:
            self.events.publish(LedgerEvent(topic=topic, data=data))
        except Exception as e:
            logger.warning(
                "ledger_event_publish_failed",
                topic=topic,
                error=str(e),
                error_type=type(e).__name__,
            )


# Global service instance
_service: WarrantyLedgerService | None = None


def get_warranty_service() -> WarrantyLedgerService:
    """
    Get the configured warranty ledger service.

    Returns:
        WarrantyLedgerService on the configured storage substrate
    """
    global _service

    if _service is None:
        _service = WarrantyLedgerService(storage=get_ledger_storage())
        logger.info(
            "warranty_service_initialized",
            mode=_service.storage.mode.value,
            ttl_threshold=_service.ttl_threshold,
            ttl_extend_to=_service.ttl_extend_to,
        )

    return _service


def set_warranty_service(service: WarrantyLedgerService) -> None:
    """
    Set a custom warranty ledger service.

    Args:
        service: WarrantyLedgerService instance
    """
    global _service
    _service = service


def reset_warranty_service() -> None:
    """Reset the service to be re-initialized."""
    global _service
    _service = None
