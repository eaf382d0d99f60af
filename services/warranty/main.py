"""
Warranty Ledger Service - Main Application
==========================================

FastAPI application exposing warranty issue, check, claim and
statistics as remotely callable entry points.

Version: 0.1.0
"""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from shared import __version__
from shared.config import settings, LedgerMode
from shared.database.redis import RedisClient
from shared.ledger import AuthenticationFailed, LedgerError
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse

from services.warranty.registry.errors import (
    InvalidWarrantyTerms,
    LedgerInconsistent,
    UnauthorizedClaimer,
    WarrantyAlreadyClaimed,
    WarrantyError,
    WarrantyExpired,
    WarrantyNotFound,
)
from services.warranty.registry.service import get_warranty_service
from services.warranty.routes import statistics_router, warranties_router

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="warranty-ledger",
)

logger = get_logger(__name__)


ERROR_STATUS: dict[type[WarrantyError], int] = {
    WarrantyNotFound: status.HTTP_404_NOT_FOUND,
    WarrantyAlreadyClaimed: status.HTTP_409_CONFLICT,
    WarrantyExpired: status.HTTP_410_GONE,
    UnauthorizedClaimer: status.HTTP_403_FORBIDDEN,
    InvalidWarrantyTerms: 422,
    LedgerInconsistent: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "warranty_ledger_starting",
        environment=settings.environment.value,
        ledger_mode=settings.ledger.mode.value,
        port=settings.ports.warranty_ledger,
    )

    try:
        if settings.ledger.mode == LedgerMode.REDIS:
            RedisClient.get_client()
            logger.info("redis_connected")

        get_warranty_service()

    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    logger.info("warranty_ledger_shutting_down")
    if settings.ledger.mode == LedgerMode.REDIS:
        await RedisClient.close()


# Create FastAPI application
app = FastAPI(
    title="Warranty Ledger Service",
    description="Digital warranty issuance, inspection and claiming",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_tags=[
        {"name": "warranties", "description": "Issue, check and claim warranties"},
        {"name": "statistics", "description": "Aggregate warranty counters"},
        {"name": "health", "description": "Service health checks"},
    ],
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag every log line of one request with a request id."""
    clear_context()
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    bind_context(request_id=request_id, method=request.method, path=request.url.path)

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and its ledger storage.
    """
    service = get_warranty_service()
    components = {"ledger": await service.storage.health_check()}

    health = HealthResponse(
        service="warranty-ledger",
        version=__version__,
        components=components,
    )
    if not health.is_healthy:
        health.status = "degraded"

    return health


@app.get("/", tags=["health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Warranty Ledger Service",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(warranties_router, prefix="/api/v1")
app.include_router(statistics_router, prefix="/api/v1")


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(WarrantyError)
async def warranty_error_handler(request: Request, exc: WarrantyError) -> JSONResponse:
    """Translate aborted warranty operations."""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)

    logger.warning(
        "warranty_operation_failed",
        code=exc.code,
        warranty_id=exc.warranty_id,
        status_code=status_code,
        path=request.url.path,
    )
    body = ErrorResponse(
        error=str(exc),
        error_code=exc.code,
        details={"warranty_id": exc.warranty_id} if exc.warranty_id is not None else None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(AuthenticationFailed)
async def authentication_failed_handler(
    request: Request, exc: AuthenticationFailed
) -> JSONResponse:
    """The caller acted for an identity it has not proven."""
    logger.warning(
        "authentication_failed",
        identity=exc.identity,
        path=request.url.path,
    )
    body = ErrorResponse(
        error=str(exc),
        error_code="authentication_failed",
        details={"identity": exc.identity},
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=body.model_dump(mode="json"),
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Storage substrate unavailable; nothing was committed."""
    logger.error("ledger_unavailable", error=str(exc), path=request.url.path)
    body = ErrorResponse(error=str(exc), error_code="ledger_unavailable")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(mode="json"),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.warranty.main:app",
        host="0.0.0.0",
        port=settings.ports.warranty_ledger,
        reload=settings.debug,
    )
