"""View state machine: startup routing, transitions, guards and forced exits."""

import asyncio

import httpx
import pytest

from banana_client.client.state import (
    AuthMode,
    AuthView,
    LandingView,
    LeaderboardView,
    PlayingView,
)
from banana_client.shared.core import events
from banana_client.shared.domain.auth.gateway import LOGIN_PATH, REGISTER_PATH
from banana_client.shared.domain.leaderboard.fetcher import LEADERBOARD_PATH
from banana_client.shared.domain.session.models import LogoutMode

LOGIN_OK = {"access": "a1", "refresh": "r1", "username": "rex"}
SCORES = [{"username": "kong", "score": 40}, {"username": "rex", "score": 30}]


class Recorder:
    """Collects payloads published on a topic."""

    def __init__(self):
        self.payloads = []

    async def __call__(self, payload):
        self.payloads.append(payload)


@pytest.fixture
def notifications():
    return Recorder()


@pytest.fixture
def view_changes():
    return Recorder()


async def _subscribe(bus, notifications, view_changes):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    await bus.subscribe(events.TOPIC_VIEW_CHANGED, view_changes)


async def _login(app_state, backend):
    backend.on("POST", LOGIN_PATH, 200, LOGIN_OK)
    await app_state.initialize()
    await app_state.select_auth(AuthMode.LOGIN)
    assert await app_state.login("rex", "pw")


# --- Startup ---

@pytest.mark.asyncio
async def test_remembered_username_without_tokens_starts_on_landing(app_state, session_store):
    session_store.set_username("rex")

    view = await app_state.initialize()

    assert isinstance(view, LandingView)
    assert app_state.username == "rex"
    assert not app_state.is_authenticated


@pytest.mark.asyncio
async def test_stored_credentials_start_on_playing(app_state, session_store):
    session_store.set_session("a1", "r1", "rex")

    assert isinstance(await app_state.initialize(), PlayingView)


@pytest.mark.asyncio
async def test_empty_store_starts_on_landing(app_state):
    assert isinstance(await app_state.initialize(), LandingView)


@pytest.mark.asyncio
async def test_initialize_twice_keeps_current_view(app_state, session_store):
    await app_state.initialize()
    await app_state.select_auth(AuthMode.REGISTER)
    session_store.set_tokens("a1", "r1")

    assert isinstance(await app_state.initialize(), AuthView)


# --- Navigation ---

@pytest.mark.asyncio
async def test_select_auth_back_and_switch(app_state, bus, notifications, view_changes):
    await _subscribe(bus, notifications, view_changes)
    await app_state.initialize()

    assert await app_state.select_auth(AuthMode.REGISTER)
    assert app_state.view == AuthView(AuthMode.REGISTER)
    assert await app_state.select_auth("login")
    assert app_state.view == AuthView(AuthMode.LOGIN)
    assert await app_state.back()
    assert isinstance(app_state.view, LandingView)

    await bus.wait_until_idle()
    assert [p["view"] for p in view_changes.payloads] == ["landing", "auth", "auth", "landing"]
    assert view_changes.payloads[1]["mode"] == "register"


@pytest.mark.asyncio
async def test_events_outside_their_view_are_ignored(app_state, backend):
    await app_state.initialize()

    assert not await app_state.login("rex", "pw")
    assert not await app_state.complete_activity(10)
    assert not await app_state.play_again()
    assert await app_state.logout() is None
    assert not await app_state.back()
    assert isinstance(app_state.view, LandingView)
    assert backend.requests == []


# --- Login / register ---

@pytest.mark.asyncio
async def test_login_success_moves_to_playing(app_state, backend, session_store, bus, notifications):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)

    await _login(app_state, backend)

    session = session_store.get()
    assert (session.access, session.refresh, session.username) == ("a1", "r1", "rex")
    assert isinstance(app_state.view, PlayingView)
    assert app_state.username == "rex"
    await bus.wait_until_idle()
    assert notifications.payloads[-1]["variant"] == "success"
    assert notifications.payloads[-1]["description"] == "Logged in as rex"


@pytest.mark.asyncio
async def test_login_with_empty_password_stays_on_auth(app_state, backend, bus, notifications):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    await app_state.initialize()
    await app_state.select_auth(AuthMode.LOGIN)

    assert not await app_state.login("rex", "")

    assert isinstance(app_state.view, AuthView)
    assert backend.requests == []
    await bus.wait_until_idle()
    assert notifications.payloads[0]["title"] == "Missing fields"
    assert not app_state.is_busy()


@pytest.mark.asyncio
@pytest.mark.parametrize("route,title", [
    ({"status": 401, "body": {"detail": "No active account found"}}, "Login failed"),
    ({"error": httpx.ConnectError}, "Login Error"),
    ({"status": 200, "body": {"username": "rex"}}, "Login Error"),
])
async def test_login_failures_are_notified_not_raised(
    app_state, backend, session_store, bus, notifications, route, title
):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    backend.on("POST", LOGIN_PATH, **route)
    await app_state.initialize()
    await app_state.select_auth(AuthMode.LOGIN)

    assert not await app_state.login("rex", "pw")

    assert isinstance(app_state.view, AuthView)
    assert not session_store.get().has_credentials
    await bus.wait_until_idle()
    assert notifications.payloads[-1]["title"] == title
    assert notifications.payloads[-1]["variant"] == "destructive"


@pytest.mark.asyncio
async def test_register_success_moves_to_playing(app_state, backend, bus, notifications):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    backend.on("POST", REGISTER_PATH, 201, {"access": "a9", "refresh": "r9", "username": "kong"})
    await app_state.initialize()
    await app_state.select_auth(AuthMode.REGISTER)

    assert await app_state.register("kong", "k@example.com", "pw", "pw")

    assert isinstance(app_state.view, PlayingView)
    await bus.wait_until_idle()
    assert notifications.payloads[-1]["description"] == "Welcome, kong!"


@pytest.mark.asyncio
async def test_register_field_error_is_notified(app_state, backend, bus, notifications):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    backend.on("POST", REGISTER_PATH, 400, {"detail": {"username": ["A user with that username already exists."]}})
    await app_state.initialize()
    await app_state.select_auth(AuthMode.REGISTER)

    assert not await app_state.register("kong", "k@example.com", "pw", "pw")

    await bus.wait_until_idle()
    assert notifications.payloads[-1]["title"] == "Registration failed"
    assert notifications.payloads[-1]["description"] == "A user with that username already exists."


# --- In-flight guard ---

@pytest.fixture
def gate(backend):
    backend.gate = asyncio.Event()
    return backend.gate


@pytest.mark.asyncio
async def test_double_login_is_rejected_while_first_in_flight(app_state, backend, gate, bus, notifications):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    backend.on("POST", LOGIN_PATH, 200, LOGIN_OK)
    await app_state.initialize()
    await app_state.select_auth(AuthMode.LOGIN)

    first = asyncio.create_task(app_state.login("rex", "pw"))
    await asyncio.sleep(0)
    assert app_state.is_busy()

    assert not await app_state.login("rex", "pw")
    assert not await app_state.register("rex", "r@example.com", "pw", "pw")

    gate.set()
    assert await first
    assert len(backend.calls(LOGIN_PATH)) == 1
    assert backend.calls(REGISTER_PATH) == []
    assert not app_state.is_busy()
    await bus.wait_until_idle()
    assert any(p["title"] == "Please wait" for p in notifications.payloads)


@pytest.mark.asyncio
async def test_login_result_discarded_after_navigating_back(app_state, backend, gate, session_store):
    backend.on("POST", LOGIN_PATH, 200, LOGIN_OK)
    await app_state.initialize()
    await app_state.select_auth(AuthMode.LOGIN)

    pending = asyncio.create_task(app_state.login("rex", "pw"))
    await asyncio.sleep(0)
    await app_state.back()
    gate.set()

    assert not await pending
    assert isinstance(app_state.view, LandingView)
    assert not app_state.is_authenticated
    assert not session_store.get().has_credentials


# --- Activity & leaderboard ---

@pytest.mark.asyncio
async def test_activity_completion_shows_leaderboard(app_state, backend, bus):
    leaderboard_events = Recorder()
    await bus.subscribe(events.TOPIC_LEADERBOARD_LOADED, leaderboard_events)
    await _login(app_state, backend)
    backend.on("GET", LEADERBOARD_PATH, 200, SCORES)

    assert await app_state.complete_activity(30)

    assert app_state.view == LeaderboardView(score=30)
    assert app_state.current_score == 30
    assert app_state.leaderboard.rank_of("rex") == 2
    await bus.wait_until_idle()
    assert leaderboard_events.payloads[0]["rank"] == 2
    assert leaderboard_events.payloads[0]["entries"] == SCORES


@pytest.mark.asyncio
async def test_play_again_returns_to_playing(app_state, backend):
    await _login(app_state, backend)
    backend.on("GET", LEADERBOARD_PATH, 200, [])
    await app_state.complete_activity(5)

    assert await app_state.play_again()
    assert isinstance(app_state.view, PlayingView)


@pytest.mark.asyncio
async def test_leaderboard_401_clears_session_and_lands(app_state, backend, session_store, bus, notifications):
    cleared = Recorder()
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    await bus.subscribe(events.TOPIC_SESSION_CLEARED, cleared)
    await _login(app_state, backend)
    backend.on("GET", LEADERBOARD_PATH, 401, {"detail": "Token is invalid or expired"})

    await app_state.complete_activity(12)

    assert isinstance(app_state.view, LandingView)
    assert session_store.get().is_empty
    assert app_state.username == ""
    await bus.wait_until_idle()
    assert cleared.payloads == [{"reason": "expired"}]
    assert notifications.payloads[-1]["description"] == "Session expired. Please log in again."


@pytest.mark.asyncio
async def test_leaderboard_server_error_stays_on_leaderboard(app_state, backend, session_store, bus, notifications):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    await _login(app_state, backend)
    backend.on("GET", LEADERBOARD_PATH, 200, {"not": "a list"})

    await app_state.complete_activity(12)

    assert isinstance(app_state.view, LeaderboardView)
    assert session_store.get().has_credentials
    assert app_state.leaderboard is None
    await bus.wait_until_idle()
    assert notifications.payloads[-1]["title"] == "API Error"


@pytest.mark.asyncio
async def test_leaderboard_without_access_token_lands_without_request(app_state, backend, storage):
    storage.set("refreshToken", "r1")
    await app_state.initialize()
    assert isinstance(app_state.view, PlayingView)

    await app_state.complete_activity(3)

    assert isinstance(app_state.view, LandingView)
    assert backend.calls(LEADERBOARD_PATH) == []


@pytest.mark.asyncio
async def test_play_again_after_session_vanished_goes_to_landing(app_state, backend, session_store):
    await _login(app_state, backend)
    backend.on("GET", LEADERBOARD_PATH, 200, SCORES)
    await app_state.complete_activity(3)
    session_store.clear()

    assert not await app_state.play_again()
    assert isinstance(app_state.view, LandingView)


@pytest.mark.asyncio
async def test_negative_score_is_a_programming_error(app_state, backend):
    await _login(app_state, backend)

    with pytest.raises(ValueError):
        await app_state.complete_activity(-1)


# --- Logout ---

@pytest.mark.asyncio
async def test_logout_server_error_still_lands_and_reports(app_state, backend, session_store, bus, notifications):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    await _login(app_state, backend)
    backend.on("POST", LogoutMode.STANDARD.path, 500, {"detail": "Internal error"})

    result = await app_state.logout(LogoutMode.STANDARD)

    assert not result.ok
    assert session_store.get().is_empty
    assert isinstance(app_state.view, LandingView)
    await bus.wait_until_idle()
    assert notifications.payloads[-1]["title"] == "Logout incomplete"
    assert "Internal error" in notifications.payloads[-1]["description"]


@pytest.mark.asyncio
async def test_logout_all_from_leaderboard(app_state, backend, session_store):
    await _login(app_state, backend)
    backend.on("GET", LEADERBOARD_PATH, 200, SCORES)
    backend.on("POST", LogoutMode.ALL.path, 200)
    await app_state.complete_activity(3)

    result = await app_state.logout(LogoutMode.ALL)

    assert result.ok
    assert isinstance(app_state.view, LandingView)
    assert session_store.get().is_empty
    assert app_state.leaderboard is None


@pytest.mark.asyncio
async def test_double_logout_is_rejected_while_first_in_flight(app_state, backend, gate, session_store):
    backend.on("POST", LOGIN_PATH, 200, LOGIN_OK)
    backend.on("POST", LogoutMode.STANDARD.path, 200)
    await app_state.initialize()
    await app_state.select_auth(AuthMode.LOGIN)
    gate.set()
    await app_state.login("rex", "pw")
    gate.clear()

    first = asyncio.create_task(app_state.logout())
    await asyncio.sleep(0)
    assert await app_state.logout() is None

    gate.set()
    assert (await first).ok
    assert len(backend.calls(LogoutMode.STANDARD.path)) == 1
    assert session_store.get().is_empty


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, title",
    [(401, "Session expired"), (500, "API Error")],
)
async def test_leaderboard_failure_after_relogin_is_discarded(
    app_state, backend, session_store, bus, notifications, status, title
):
    await bus.subscribe(events.TOPIC_NOTIFY, notifications)
    await _login(app_state, backend)
    backend.on("GET", LEADERBOARD_PATH, status, {"detail": "Token is invalid or expired"})
    backend.on("POST", LogoutMode.STANDARD.path, 200)
    leaderboard_gate = backend.gates[LEADERBOARD_PATH] = asyncio.Event()

    finishing = asyncio.create_task(app_state.complete_activity(10))
    while not backend.calls(LEADERBOARD_PATH):
        await asyncio.sleep(0)
    assert isinstance(app_state.view, LeaderboardView)

    assert (await app_state.logout()).ok
    await app_state.select_auth(AuthMode.LOGIN)
    backend.on("POST", LOGIN_PATH, 200, {"access": "a2", "refresh": "r2", "username": "rex"})
    assert await app_state.login("rex", "pw")

    leaderboard_gate.set()
    await finishing

    assert isinstance(app_state.view, PlayingView)
    assert session_store.get().access == "a2"
    assert app_state.leaderboard is None
    await bus.wait_until_idle()
    assert all(p["title"] != title for p in notifications.payloads)
