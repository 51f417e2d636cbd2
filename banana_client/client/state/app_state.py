"""View State Machine for the Banana client.

Sequences the screens (landing → auth → playing → leaderboard) from session
presence and user actions, and is the single owner of "is the user
authenticated enough to play".
"""

from __future__ import annotations

import logging
from typing import Optional

from banana_client.shared.core import events
from banana_client.shared.core.errors import (
    AuthRejected,
    BananaClientError,
    NetworkUnavailable,
    OperationInProgress,
    SessionExpired,
    ValidationError,
)
from banana_client.shared.core.event_bus import EventBus
from banana_client.shared.domain.auth.gateway import AuthGateway
from banana_client.shared.domain.auth.logout import LogoutCoordinator
from banana_client.shared.domain.leaderboard.fetcher import LeaderboardFetcher
from banana_client.shared.domain.session.models import (
    AuthSuccess,
    Leaderboard,
    LogoutMode,
    LogoutResult,
)
from banana_client.shared.domain.session.session_store import SessionStore

from .views import (
    AuthMode,
    AuthView,
    LandingView,
    LeaderboardView,
    PlayingView,
    ViewState,
)

logger = logging.getLogger(__name__)

# In-flight slots. Login, registration and logout all act on the one session.
SLOT_SESSION = "session"
SLOT_LEADERBOARD = "leaderboard"


class AppState:
    """State of the application shell.

    Every public action runs to completion, or to its network call, before
    the next one is processed. Actions never raise client errors: they are
    published as notifications on the EventBus and the method reports
    whether the transition happened.

    Duplicate submissions are rejected by the in-flight guard rather than by
    disabled UI controls, so scripted input gets the same protection.
    Results of calls that outlive a transition are discarded.
    """

    def __init__(
        self,
        event_bus: EventBus,
        session_store: SessionStore,
        auth_gateway: AuthGateway,
        logout_coordinator: LogoutCoordinator,
        leaderboard_fetcher: LeaderboardFetcher,
    ) -> None:
        self.bus = event_bus
        self.session_store = session_store
        self.auth_gateway = auth_gateway
        self.logout_coordinator = logout_coordinator
        self.leaderboard_fetcher = leaderboard_fetcher

        self.view: ViewState = LandingView()
        self.username: str = ""
        self.leaderboard: Optional[Leaderboard] = None

        # Bumped on every transition; completions from an older epoch are stale
        self._epoch = 0
        self._in_flight: set[str] = set()
        self._started = False

    # --- Queries ---

    @property
    def current_score(self) -> int:
        return self.view.score if isinstance(self.view, LeaderboardView) else 0

    @property
    def is_authenticated(self) -> bool:
        return self.session_store.get().has_credentials

    def is_busy(self, slot: str = SLOT_SESSION) -> bool:
        """Whether the action bound to ``slot`` should be shown as disabled."""
        return slot in self._in_flight

    # --- Startup ---

    async def initialize(self) -> ViewState:
        """Pick the first screen from the persisted session.

        A remembered username without credentials lands on Landing; it is
        kept only for greeting.
        """
        if self._started:
            return self.view

        session = self.session_store.get()
        self.username = session.username or ""
        self._started = True

        if session.has_credentials:
            logger.info(f"Restored session for '{self.username}'")
            await self._transition(PlayingView())
        else:
            await self._transition(LandingView())
        return self.view

    # --- Navigation ---

    async def select_auth(self, mode: AuthMode = AuthMode.LOGIN) -> bool:
        """Open the login or registration screen (or switch between them)."""
        if not isinstance(self.view, (LandingView, AuthView)):
            return self._reject("select_auth")
        await self._transition(AuthView(AuthMode(mode)))
        return True

    async def back(self) -> bool:
        """Leave the auth screen for the landing page."""
        if not isinstance(self.view, AuthView):
            return self._reject("back")
        await self._transition(LandingView())
        return True

    async def play_again(self) -> bool:
        if not isinstance(self.view, LeaderboardView):
            return self._reject("play_again")
        if not self.is_authenticated:
            await self._force_landing("Session expired. Please log in again.")
            return False
        await self._transition(PlayingView())
        return True

    # --- Authentication ---

    async def login(self, username: str, password: str) -> bool:
        if not isinstance(self.view, AuthView):
            return self._reject("login")
        if not await self._acquire(SLOT_SESSION, "login"):
            return False

        epoch = self._epoch
        try:
            success = await self.auth_gateway.login(username, password)
        except NetworkUnavailable as exc:
            await self._notify("Login Error", exc.message, "destructive")
            return False
        except (ValidationError, AuthRejected) as exc:
            title = "Missing fields" if isinstance(exc, ValidationError) else "Login failed"
            await self._notify(title, exc.message, "destructive")
            return False
        except BananaClientError as exc:
            await self._notify("Login Error", exc.message, "destructive")
            return False
        finally:
            self._in_flight.discard(SLOT_SESSION)

        return await self._enter_playing(
            success, epoch, "🎉 Welcome back!", f"Logged in as {success.username}"
        )

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> bool:
        if not isinstance(self.view, AuthView):
            return self._reject("register")
        if not await self._acquire(SLOT_SESSION, "register"):
            return False

        epoch = self._epoch
        try:
            success = await self.auth_gateway.register(username, email, password, confirm_password)
        except NetworkUnavailable as exc:
            await self._notify("Registration Error", exc.message, "destructive")
            return False
        except (ValidationError, AuthRejected) as exc:
            title = "Missing fields" if isinstance(exc, ValidationError) else "Registration failed"
            await self._notify(title, exc.message, "destructive")
            return False
        except BananaClientError as exc:
            await self._notify("Registration Error", exc.message, "destructive")
            return False
        finally:
            self._in_flight.discard(SLOT_SESSION)

        return await self._enter_playing(
            success, epoch, "🎉 Account created!", f"Welcome, {success.username}!"
        )

    async def _enter_playing(
        self,
        success: AuthSuccess,
        epoch: int,
        title: str,
        description: str,
    ) -> bool:
        if self._is_stale(epoch, "authentication result"):
            # The gateway already stored the credentials; the user left, so drop them
            self.session_store.clear()
            return False
        # Guard: only a session holding credentials may reach Playing
        if not self.is_authenticated:
            logger.error("Authentication succeeded but the session holds no credentials")
            return False

        self.username = success.username
        await self._notify(title, description, "success")
        await self._transition(PlayingView())
        return True

    async def logout(self, mode: LogoutMode = LogoutMode.STANDARD) -> Optional[LogoutResult]:
        """Log out from Playing or Leaderboard and return to Landing.

        The session is cleared even when the server call fails; such a
        failure is reported as a recoverable notification.
        """
        if not isinstance(self.view, (PlayingView, LeaderboardView)):
            self._reject("logout")
            return None
        if not await self._acquire(SLOT_SESSION, "logout"):
            return None

        epoch = self._epoch
        try:
            result = await self.logout_coordinator.logout(LogoutMode(mode))
        finally:
            self._in_flight.discard(SLOT_SESSION)

        await self.bus.publish(
            events.TOPIC_SESSION_CLEARED,
            events.create_session_cleared_event("logout"),
        )
        if not result.ok:
            await self._notify(
                "Logout incomplete",
                f"{result.message} You have been logged out on this device.",
                "destructive",
            )

        if epoch != self._epoch:
            # Another path already moved the view on
            return result

        self.username = ""
        self.leaderboard = None
        await self._transition(LandingView())
        return result

    # --- Activity & leaderboard ---

    async def complete_activity(self, score: int) -> bool:
        """End the activity with a final score and show the leaderboard."""
        if not isinstance(self.view, PlayingView):
            return self._reject("complete_activity")
        if score < 0:
            raise ValueError("score must be non-negative")

        await self._transition(LeaderboardView(score=int(score)))
        await self.load_leaderboard()
        return True

    async def load_leaderboard(self) -> Optional[Leaderboard]:
        """Fetch the leaderboard for the current Leaderboard screen.

        A 401, or a missing credential, clears the session and routes to
        Landing. Other failures leave the screen as is.
        """
        if not isinstance(self.view, LeaderboardView):
            self._reject("load_leaderboard")
            return None
        if not await self._acquire(SLOT_LEADERBOARD, "load_leaderboard"):
            return None

        epoch = self._epoch
        try:
            leaderboard = await self.leaderboard_fetcher.fetch()
        except (SessionExpired, ValidationError) as exc:
            if not self._is_stale(epoch, "leaderboard failure"):
                await self._force_landing(exc.message)
            return None
        except BananaClientError as exc:
            if not self._is_stale(epoch, "leaderboard failure"):
                await self._notify("API Error", exc.message, "destructive")
            return None
        finally:
            self._in_flight.discard(SLOT_LEADERBOARD)

        if self._is_stale(epoch, "leaderboard"):
            return None

        self.leaderboard = leaderboard
        await self.bus.publish(
            events.TOPIC_LEADERBOARD_LOADED,
            events.create_leaderboard_loaded_event(
                [entry.model_dump() for entry in leaderboard.entries],
                leaderboard.rank_of(self.username),
            ),
        )
        return leaderboard

    # --- Internals ---

    async def _force_landing(self, message: str) -> None:
        """Clear a dead session and send the user back to Landing."""
        logger.warning(f"Forcing session clear: {message}")
        self.session_store.clear()
        self.username = ""
        self.leaderboard = None
        await self.bus.publish(
            events.TOPIC_SESSION_CLEARED,
            events.create_session_cleared_event("expired"),
        )
        await self._notify("Session expired", message, "destructive")
        await self._transition(LandingView())

    async def _acquire(self, slot: str, action: str) -> bool:
        if slot in self._in_flight:
            exc = OperationInProgress(action)
            logger.info(exc.message)
            await self._notify(exc.title, exc.message, "info")
            return False
        self._in_flight.add(slot)
        return True

    def _is_stale(self, epoch: int, what: str) -> bool:
        if epoch == self._epoch:
            return False
        logger.info(f"Discarding {what}: view changed while in flight")
        return True

    def _reject(self, action: str) -> bool:
        logger.warning(f"Ignoring '{action}' in view '{self.view.name}'")
        return False

    async def _transition(self, view: ViewState) -> None:
        previous = self.view
        self.view = view
        self._epoch += 1
        logger.debug(f"View {previous.name} -> {view.name}")
        await self.bus.publish(
            events.TOPIC_VIEW_CHANGED,
            events.create_view_changed_event(
                view.name,
                previous.name,
                username=self.username,
                **view.details(),
            ),
        )

    async def _notify(self, title: str, description: str, variant: events.NotificationVariant) -> None:
        await self.bus.publish(
            events.TOPIC_NOTIFY,
            events.create_notify_event(title, description, variant),
        )
