"""Stable shared fixtures for tests.

Design goal: avoid async fixture loop injection and keep test boundaries explicit.
"""
import asyncio
import os

import pytest
from httpx import ASGITransport, AsyncClient

# Must be set before importing app modules.
os.environ["APP_ENV"] = "test"
os.environ["APP_AUTH_BEARER_TOKENS"] = "test_token"

from api.main import app

AUTH_HEADERS = {"Authorization": "Bearer test_token"}


@pytest.fixture
def asgi_app():
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def call_api(asgi_app):
    def _call(method, url, **kwargs):
        async def _run():
            transport = ASGITransport(app=asgi_app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                return await client.request(method, url, **kwargs)

        return asyncio.run(_run())

    return _call
