"""Controller that renders core events (toasts, screens, scores) to the console."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from banana_client.shared.core import events
from banana_client.shared.core.event_bus import EventPayload

if TYPE_CHECKING:
    from banana_client.client.state.app_state import AppState

logger = logging.getLogger(__name__)

VARIANT_STYLES = {
    "success": "bold green",
    "destructive": "bold red",
    "info": "bold yellow",
}

RANK_ICONS = {1: "🏆", 2: "🥈", 3: "🥉"}


class NotificationController:
    """Bridges EventBus topics to a rich console."""

    def __init__(self, app_state: AppState, console: Optional[Console] = None):
        self.app_state = app_state
        self.event_bus = app_state.bus
        self.console = console or Console()

    async def start(self) -> None:
        """Register event subscriptions."""
        await self.event_bus.subscribe(events.TOPIC_NOTIFY, self._on_notify)
        await self.event_bus.subscribe(events.TOPIC_VIEW_CHANGED, self._on_view_changed)
        await self.event_bus.subscribe(events.TOPIC_LEADERBOARD_LOADED, self._on_leaderboard_loaded)
        logger.info("NotificationController subscribed to notify/view/leaderboard topics")

    async def stop(self) -> None:
        await self.event_bus.unsubscribe(events.TOPIC_NOTIFY, self._on_notify)
        await self.event_bus.unsubscribe(events.TOPIC_VIEW_CHANGED, self._on_view_changed)
        await self.event_bus.unsubscribe(events.TOPIC_LEADERBOARD_LOADED, self._on_leaderboard_loaded)

    async def _on_notify(self, payload: EventPayload) -> None:
        style = VARIANT_STYLES.get(payload.get("variant", "info"), "bold")
        self.console.print(
            Panel(
                payload.get("description", ""),
                title=payload.get("title", ""),
                border_style=style,
                expand=False,
            )
        )

    async def _on_view_changed(self, payload: EventPayload) -> None:
        view = payload.get("view")
        username = payload.get("username") or "player"
        if view == "landing":
            self.console.rule("[bold yellow]🍌 Banana Game")
        elif view == "auth":
            self.console.rule(f"[bold]{payload.get('mode', 'login').title()}")
        elif view == "playing":
            self.console.rule(f"[bold green]Playing as {username}")
        elif view == "leaderboard":
            self.console.rule("[bold]Game Over!")
            self.console.print(f"Great job, [bold]{username}[/bold]! Your Score: {payload.get('score', 0)}")

    async def _on_leaderboard_loaded(self, payload: EventPayload) -> None:
        entries = payload.get("entries") or []
        if not entries:
            self.console.print("No leaderboard data found.")
            return

        table = Table(title="Top 10 Players")
        table.add_column("#", justify="right")
        table.add_column("Player")
        table.add_column("Score", justify="right")
        for index, entry in enumerate(entries[:10], start=1):
            style = "reverse" if entry.get("username") == self.app_state.username else None
            table.add_row(
                RANK_ICONS.get(index, str(index)),
                str(entry.get("username", "")),
                str(entry.get("score", 0)),
                style=style,
            )
        self.console.print(table)

        rank = payload.get("rank", 0)
        if rank:
            self.console.print(f"You are ranked #{rank} on the leaderboard!")
