"""Warranty ledger API routes."""

from services.warranty.routes.warranties import router as warranties_router
from services.warranty.routes.statistics import router as statistics_router

__all__ = [
    "warranties_router",
    "statistics_router",
]
