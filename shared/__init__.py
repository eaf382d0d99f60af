"""
Warranty Ledger Shared Library
==============================

Common utilities, configurations, and abstractions shared by the
warranty ledger service.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - auth: JWT authentication and ledger principal bridging
    - ledger: Host environment interface (storage, clock, auth, events)
    - database: Redis client
    - models: Shared Pydantic response models

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Warranty Ledger Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
