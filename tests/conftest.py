"""Shared fixtures: a scripted fake backend and in-memory session storage."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from banana_client.client.state import AppState
from banana_client.shared.core.event_bus import EventBus
from banana_client.shared.domain import (
    AuthGateway,
    LeaderboardFetcher,
    LogoutCoordinator,
    SessionStore,
)
from banana_client.shared.infrastructure.http.api_client import BananaApiClient
from banana_client.shared.infrastructure.persistence.storage import MemoryStorage

BASE_URL = "http://banana.test"


class FakeBackend:
    """Answers requests from a per-route script and records what it saw."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        # When set, requests wait on it; lets tests hold a call in flight
        self.gate: Optional[asyncio.Event] = None
        # Per-path gates take precedence over the global one
        self.gates: Dict[str, asyncio.Event] = {}

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: Any = None,
        content: Optional[bytes] = None,
        error: Optional[type[httpx.TransportError]] = None,
    ) -> None:
        self.routes[(method, path)] = {
            "status": status,
            "body": body,
            "content": content,
            "error": error,
        }

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        gate = self.gates.get(request.url.path, self.gate)
        if gate is not None:
            await gate.wait()
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if route["error"] is not None:
            raise route["error"]("connection refused", request=request)
        if route["content"] is not None:
            return httpx.Response(route["status"], content=route["content"])
        if route["body"] is None:
            return httpx.Response(route["status"])
        return httpx.Response(route["status"], json=route["body"])

    def calls(self, path: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    @staticmethod
    def body_of(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api(backend: FakeBackend) -> BananaApiClient:
    return BananaApiClient(BASE_URL, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session_store(storage: MemoryStorage) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
def gateway(api: BananaApiClient, session_store: SessionStore) -> AuthGateway:
    return AuthGateway(api, session_store)


@pytest.fixture
def logout_coordinator(api: BananaApiClient, session_store: SessionStore) -> LogoutCoordinator:
    return LogoutCoordinator(api, session_store)


@pytest.fixture
def fetcher(api: BananaApiClient, session_store: SessionStore) -> LeaderboardFetcher:
    return LeaderboardFetcher(api, session_store)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def app_state(
    bus: EventBus,
    session_store: SessionStore,
    gateway: AuthGateway,
    logout_coordinator: LogoutCoordinator,
    fetcher: LeaderboardFetcher,
) -> AppState:
    return AppState(bus, session_store, gateway, logout_coordinator, fetcher)
