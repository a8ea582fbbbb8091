"""famfin - Main application entry point."""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

import flet as ft
from famfin.client.state import Store
from famfin.client.ui.layouts.shell import build_shell
from famfin.shared.core.configuration import ValidationLevel, get_config
from famfin.shared.core.logging_setup import configure_logging

# Load environment variables from .env file in project root
PROJECT_ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

config = get_config(ValidationLevel.LENIENT)
configure_logging(config.logging, PROJECT_ROOT)

logger = logging.getLogger(__name__)


async def main(page: ft.Page) -> None:
    """Main Flet application entry point."""
    logger.info("Initializing famfin...")

    page.title = "Keuangan Keluarga"
    page.theme_mode = ft.ThemeMode.DARK if config.ui.theme_mode == "dark" else ft.ThemeMode.LIGHT

    store = await Store.create(config)

    async def _on_disconnect(e) -> None:
        logger.info("Client disconnected, shutting down store")
        await store.shutdown()

    page.on_disconnect = _on_disconnect

    # The shell mounts nothing until the session restore settles
    shell_view = await build_shell(page, store)
    page.views.append(shell_view)
    page.update()

    await store.start()
    logger.info("Application initialized successfully")


def run() -> None:
    if config.ui.web_mode:
        logger.info(f"Starting Flet app in WEB mode on port {config.ui.port}")
        ft.run(main, view=ft.AppView.WEB_BROWSER, port=config.ui.port, host="127.0.0.1")
    else:
        logger.info("Starting Flet app in DESKTOP mode")
        ft.run(main, view=ft.AppView.FLET_APP)


if __name__ == "__main__":
    run()
