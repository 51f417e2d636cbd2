"""Banana client - console entry point."""

from __future__ import annotations

import asyncio
import logging
import logging.handlers
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from banana_client.client.controllers import NotificationController
from banana_client.client.state import AuthMode, AuthView, LandingView, LeaderboardView, PlayingView, Store
from banana_client.shared.core.configuration import LoggingConfig, SystemConfig, ValidationLevel, get_config
from banana_client.shared.core.event_bus import EventBus
from banana_client.shared.core.service_registry import register_cleanup_handler, run_cleanup_handlers
from banana_client.shared.domain.session.models import LogoutMode
from banana_client.shared.infrastructure.http.api_client import BananaApiClient
from banana_client.shared.infrastructure.persistence import DuckDBStorage, KeyValueStorage, MemoryStorage

logger = logging.getLogger(__name__)

console = Console()


def configure_logging(config: LoggingConfig) -> None:
    """File handler at the configured level, console handler for warnings only."""
    log_file_path = Path(config.log_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(config.level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.console_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    # Suppress verbose third-party library logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info(f"Logging configured: file={log_file_path}, console={config.console_level}+")


def build_storage(config: SystemConfig) -> KeyValueStorage:
    if config.storage.backend == "memory":
        logger.warning("Using in-memory session storage; sessions will not survive a restart")
        return MemoryStorage()

    storage = DuckDBStorage(config.storage.db_path)
    register_cleanup_handler(storage.close)
    return storage


async def _ask(prompt: str, **kwargs) -> str:
    return await asyncio.to_thread(Prompt.ask, prompt, **kwargs)


async def run(store: Store) -> None:
    """Drive the view state machine from console input until the user quits."""
    app = store.app
    await app.initialize()

    while True:
        await store.bus.wait_until_idle()
        view = app.view

        if isinstance(view, LandingView):
            choice = await _ask("Choose", choices=["login", "register", "quit"], default="login")
            if choice == "quit":
                return
            await app.select_auth(AuthMode(choice))

        elif isinstance(view, AuthView):
            if view.mode is AuthMode.LOGIN:
                username = await _ask("Username", default=app.username or None)
                password = await _ask("Password", password=True)
                await app.login(username or "", password)
            else:
                username = await _ask("Choose a username")
                email = await _ask("Email")
                password = await _ask("Password", password=True)
                confirm = await _ask("Confirm Password", password=True)
                await app.register(username, email, password, confirm)
            if isinstance(app.view, AuthView):
                choice = await _ask("Next", choices=["retry", "switch", "back"], default="retry")
                if choice == "switch":
                    other = AuthMode.REGISTER if view.mode is AuthMode.LOGIN else AuthMode.LOGIN
                    await app.select_auth(other)
                elif choice == "back":
                    await app.back()

        elif isinstance(view, PlayingView):
            choice = await _ask("Action", choices=["finish", "logout", "logout-all"], default="finish")
            if choice == "finish":
                score = await asyncio.to_thread(IntPrompt.ask, "Final score", default=0)
                await app.complete_activity(max(score, 0))
            else:
                await app.logout(LogoutMode(choice))

        elif isinstance(view, LeaderboardView):
            choice = await _ask("Next", choices=["play", "logout", "quit"], default="play")
            if choice == "play":
                await app.play_again()
            elif choice == "logout":
                await app.logout(LogoutMode.STANDARD)
            else:
                return


async def main() -> None:
    load_dotenv()
    config = get_config(ValidationLevel.LENIENT)
    configure_logging(config.logging)

    event_bus = EventBus()
    storage = build_storage(config)

    async with BananaApiClient(config.api.base_url, timeout=config.api.timeout) as api:
        store = Store.initialize(event_bus, api, storage)
        controller = NotificationController(store.app, console)
        await controller.start()
        logger.info(f"Banana client started against {config.api.base_url}")
        try:
            await run(store)
        finally:
            await event_bus.wait_until_idle()
            await controller.stop()
            Store.reset()

    run_cleanup_handlers()


def cli() -> None:
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, EOFError):
        console.print("\nBye!")


if __name__ == "__main__":
    cli()
