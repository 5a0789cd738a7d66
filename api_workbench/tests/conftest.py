"""
Shared fixtures: an execution engine wired to an in-memory transport, and
API clients backed by a throwaway SQLite database.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from api_workbench.config import Settings
from api_workbench.main import create_app
from api_workbench.services.http_executor import HttpExecutor, RequestEngine, create_http_client


@pytest.fixture
def sent_requests() -> list[httpx.Request]:
    """Every request that reached the mock transport."""
    return []


@pytest.fixture
def make_client(sent_requests):
    """
    Factory for AsyncClients backed by httpx.MockTransport.

    `responder` receives the outgoing request and returns an httpx.Response
    (or raises a transport error). Defaults to a plain 200 "ok".
    """
    def _make(responder=None) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            if responder is None:
                return httpx.Response(200, text="ok")
            return responder(request)

        return create_http_client(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def make_engine(make_client):
    """Factory for RequestEngines backed by the mock transport."""
    def _make(responder=None) -> RequestEngine:
        return RequestEngine(HttpExecutor(make_client(responder)))

    return _make


@pytest.fixture
def make_api(tmp_path, make_client):
    """
    Factory for TestClients over a fresh SQLite file per call.

    Outbound requests go to the mock transport; rate limiting is off unless
    overridden. Clients are closed at teardown.
    """
    opened: list[TestClient] = []

    def _make(responder=None, **overrides) -> TestClient:
        overrides.setdefault("rate_limit", 0)
        settings = Settings(
            database_url=f"sqlite:///{tmp_path / f'test_{len(opened)}.db'}",
            **overrides,
        )
        client = TestClient(create_app(settings, http_client=make_client(responder)))
        client.__enter__()
        opened.append(client)
        return client

    yield _make

    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture
def api_client(make_api) -> TestClient:
    return make_api()
