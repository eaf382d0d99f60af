"""
Ledger Event Sinks
==================

Version: 0.1.0
"""

from shared.ledger.client import EventSink, LedgerEvent
from shared.logging import get_logger

logger = get_logger(__name__)


class LoggingEventSink(EventSink):
    """Writes each event as a structured log entry."""

    def publish(self, event: LedgerEvent) -> None:
        logger.info(event.topic, **event.data)
