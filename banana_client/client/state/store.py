"""Global State Store - Service Locator Pattern.

Provides centralized access to the view state machine from any front-end
component. Implements the singleton pattern for consistent state access.
"""

from __future__ import annotations

from typing import Optional

from .app_state import AppState
from banana_client.shared.core.event_bus import EventBus
from banana_client.shared.domain.auth.gateway import AuthGateway
from banana_client.shared.domain.auth.logout import LogoutCoordinator
from banana_client.shared.domain.leaderboard.fetcher import LeaderboardFetcher
from banana_client.shared.domain.session.session_store import SessionStore
from banana_client.shared.infrastructure.http.api_client import BananaApiClient
from banana_client.shared.infrastructure.persistence.storage import KeyValueStorage


class Store:
    """Global state store for the client application.

    Usage:
        # During app initialization
        Store.initialize(event_bus, api, storage)

        # In any front-end component
        store = Store.get()
        await store.app.select_auth(AuthMode.LOGIN)
    """

    _instance: Optional['Store'] = None

    def __init__(self, event_bus: EventBus, api: BananaApiClient, storage: KeyValueStorage) -> None:
        """Wire the session services around one storage and one API client.

        Note: Do not call directly. Use Store.initialize() instead.
        """
        self.bus = event_bus
        self.api = api
        self.session = SessionStore(storage)
        self.app = AppState(
            event_bus,
            self.session,
            AuthGateway(api, self.session),
            LogoutCoordinator(api, self.session),
            LeaderboardFetcher(api, self.session),
        )

    @classmethod
    def initialize(cls, event_bus: EventBus, api: BananaApiClient, storage: KeyValueStorage) -> 'Store':
        """Initialize the global store instance.

        Raises:
            RuntimeError: If store is already initialized
        """
        if cls._instance is not None:
            raise RuntimeError("Store already initialized!")

        cls._instance = cls(event_bus, api, storage)
        return cls._instance

    @classmethod
    def get(cls) -> 'Store':
        """Get the global store instance.

        Raises:
            RuntimeError: If store has not been initialized
        """
        if cls._instance is None:
            raise RuntimeError("Store not initialized! Call Store.initialize() first.")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the store instance. Primarily used for testing."""
        cls._instance = None
