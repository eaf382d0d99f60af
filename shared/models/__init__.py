"""
Shared Models
=============

Pydantic response models shared by the warranty ledger HTTP surface.
"""

from shared.models.common import (
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
]
