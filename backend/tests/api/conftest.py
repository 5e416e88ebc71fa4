"""API test fixtures — httpx client bound to the ASGI app, no network."""

import pytest
from httpx import ASGITransport, AsyncClient

from clusterlint.main import app


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def unraised_client():
    """Client that returns the 500 response instead of re-raising the app's exception."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False), base_url="http://test",
    ) as c:
        yield c
