"""Console rendering of core events."""

import pytest
from rich.console import Console

from banana_client.client.controllers import NotificationController
from banana_client.client.state import AuthMode
from banana_client.shared.domain.auth.gateway import LOGIN_PATH
from banana_client.shared.domain.leaderboard.fetcher import LEADERBOARD_PATH


@pytest.fixture
def console():
    return Console(record=True, width=100, color_system=None)


@pytest.mark.asyncio
async def test_renders_login_flow_and_leaderboard(app_state, backend, bus, console):
    controller = NotificationController(app_state, console)
    await controller.start()
    backend.on("POST", LOGIN_PATH, 200, {"access": "a1", "refresh": "r1", "username": "rex"})
    backend.on("GET", LEADERBOARD_PATH, 200, [
        {"username": "kong", "score": 40},
        {"username": "rex", "score": 30},
    ])

    await app_state.initialize()
    await app_state.select_auth(AuthMode.LOGIN)
    await app_state.login("rex", "pw")
    await app_state.complete_activity(30)
    await bus.wait_until_idle()

    output = console.export_text(clear=False)
    assert "Banana Game" in output
    assert "Logged in as rex" in output
    assert "Your Score: 30" in output
    assert "Top 10 Players" in output
    assert "You are ranked #2 on the leaderboard!" in output


@pytest.mark.asyncio
async def test_empty_leaderboard_and_stop(app_state, backend, bus, console, session_store):
    controller = NotificationController(app_state, console)
    await controller.start()
    session_store.set_session("a1", "r1", "rex")
    backend.on("GET", LEADERBOARD_PATH, 200, [])

    await app_state.initialize()
    await app_state.complete_activity(1)
    await bus.wait_until_idle()
    assert "No leaderboard data found." in console.export_text(clear=False)

    rendered = console.export_text(clear=False).count("Playing as rex")
    await controller.stop()
    await app_state.play_again()
    await bus.wait_until_idle()
    assert console.export_text(clear=False).count("Playing as rex") == rendered
