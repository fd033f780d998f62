"""Fixtures for API integration tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from payroll_core.api.app import create_app
from payroll_core.calculators.rates import RATES_2024
from payroll_core.disbursement.stub import StubPaymentGateway


@pytest.fixture
def api_gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest_asyncio.fixture
async def client(api_gateway: StubPaymentGateway) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app(gateway=api_gateway, rate_set=RATES_2024)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
