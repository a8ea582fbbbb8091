"""
Shared fixtures.

No test talks to a real server: the API client runs on an
``httpx.MockTransport`` backed by ``FakeServer``, and session storage is the
in-memory backend unless a test opts into DuckDB.
"""

import json
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio

from famfin.shared.core.configuration import ApiConfig
from famfin.shared.core.event_bus import EventBus
from famfin.shared.domain.family.service import FamilyService
from famfin.shared.domain.session.store import SessionStore
from famfin.shared.domain.transactions.service import TransactionService
from famfin.shared.infrastructure.api.client import ApiClient
from famfin.shared.infrastructure.api.endpoints import AuthApi, FamilyApi, TransactionsApi
from famfin.shared.infrastructure.persistence.key_value import MemoryKeyValueStorage

BASE_URL = "http://famfin.test/api"

USER = {"_id": "u1", "name": "Ana", "email": "ana@example.com"}
TOKEN = "tok-123"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeServer:
    """Route table for ``httpx.MockTransport``.

    Unknown routes answer 404 with a JSON message, like the real API.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: object = None,
        handler: Optional[Handler] = None,
    ) -> None:
        if handler is None:
            def handler(request: httpx.Request, status=status, body=json) -> httpx.Response:
                return httpx.Response(status, json=body)
        self.routes[(method.upper(), "/api" + path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Route not found"})
        return handler(request)

    def last(self, method: str, path: str) -> httpx.Request:
        for request in reversed(self.requests):
            if request.method == method.upper() and request.url.path == "/api" + path:
                return request
        raise AssertionError(f"No {method} {path} request was sent")

    def calls(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests
            if r.method == method.upper() and r.url.path == "/api" + path
        )


def request_json(request: httpx.Request) -> object:
    return json.loads(request.content) if request.content else None


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(base_url=BASE_URL, timeout=5.0)


@pytest_asyncio.fixture
async def client(server, api_config):
    api_client = ApiClient(api_config, transport=httpx.MockTransport(server.handle))
    yield api_client
    await api_client.aclose()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture
def session(client, storage, bus) -> SessionStore:
    return SessionStore(AuthApi(client), storage, bus)


@pytest_asyncio.fixture
async def signed_in(client, bus) -> SessionStore:
    """A session restored from storage that already holds a token and user."""
    seeded = MemoryKeyValueStorage({"userToken": TOKEN, "userData": json.dumps(USER)})
    store = SessionStore(AuthApi(client), seeded, bus)
    await store.restore()
    await bus.wait_until_idle()
    return store


@pytest.fixture
def transactions(client, signed_in, bus) -> TransactionService:
    return TransactionService(TransactionsApi(client), signed_in, bus)


@pytest.fixture
def family(client, signed_in, bus) -> FamilyService:
    return FamilyService(FamilyApi(client), signed_in, bus)


@pytest.fixture
def recorder():
    """Async handler that records every payload it receives."""

    class Recorder:
        def __init__(self) -> None:
            self.payloads: List[dict] = []

        async def __call__(self, payload: dict) -> None:
            self.payloads.append(payload)

    return Recorder()
