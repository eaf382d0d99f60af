"""
Test Configuration
==================

Pytest fixtures for warranty ledger tests.
"""

import os
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["LEDGER_MODE"] = "mock"

from shared.ledger import ManualClock, MockAuthenticator, MockEventSink, MockLedgerStorage  # noqa: E402
from services.warranty.registry.service import (  # noqa: E402
    WarrantyLedgerService,
    reset_warranty_service,
    set_warranty_service,
)


OWNER_A = "GOWNERAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"
OWNER_B = "GOWNERBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBB"
GENESIS_TIME = 1_700_000_000


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def clock() -> ManualClock:
    """Ledger clock frozen at a fixed point in time."""
    return ManualClock(GENESIS_TIME)


@pytest.fixture
def storage() -> MockLedgerStorage:
    """Fresh in-memory ledger storage."""
    return MockLedgerStorage()


@pytest.fixture
def events() -> MockEventSink:
    """Recording event sink."""
    return MockEventSink()


@pytest.fixture
def auth() -> MockAuthenticator:
    """Authenticator accepting every identity."""
    return MockAuthenticator()


@pytest.fixture
def service(
    storage: MockLedgerStorage,
    clock: ManualClock,
    events: MockEventSink,
) -> WarrantyLedgerService:
    """Warranty ledger service on mock collaborators."""
    return WarrantyLedgerService(
        storage=storage,
        clock=clock,
        events=events,
        ttl_threshold=5000,
        ttl_extend_to=5000,
    )


@pytest_asyncio.fixture
async def warranty_client(
    service: WarrantyLedgerService,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Warranty Ledger Service."""
    from services.warranty.main import app

    set_warranty_service(service)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    reset_warranty_service()


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Build bearer headers proving control of an identity."""
    from shared.auth import create_access_token

    def _headers(identity: str) -> dict[str, str]:
        token = create_access_token({"sub": identity})
        return {"Authorization": f"Bearer {token}"}

    return _headers
