"""Root conftest - shared fixtures for router, store and HTTP client.

Invariants:
    - Every test gets a fresh Router and MemoryRecordStore
    - Settings are built explicitly (no .env, no lru_cache leakage between tests)
    - HTTP tests go through httpx.AsyncClient over ASGITransport (no sockets)
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from lazyrest.api.router import Router
from lazyrest.config import Settings
from lazyrest.core.context import RequestContext
from lazyrest.schemas.record import Record
from lazyrest.services.memory_store import MemoryRecordStore

os.environ.setdefault("LAZYREST_LOG_FORMAT", "text")


def _make_request(path="/", query_string=b"", receive=None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": [],
        "query_string": query_string,
    }
    if receive is None:
        return Request(scope)
    return Request(scope, receive)


@pytest.fixture
def make_request():
    """Factory for bare starlette Requests (unit tests, no server)."""
    return _make_request


@pytest.fixture
def ctx():
    return RequestContext(_make_request())


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def router(settings):
    return Router(settings)


@pytest.fixture
def client_for():
    """Factory: AsyncClient bound to any ASGI app."""
    def _make(app) -> AsyncClient:
        return AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        )
    return _make


@pytest.fixture
async def client(router, store, client_for):
    """HTTP client against a router with the store mounted at /test."""
    router.add_service("test", store, payload_type=Record)
    async with client_for(router) as c:
        yield c
