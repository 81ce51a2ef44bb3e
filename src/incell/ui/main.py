"""NiceGUI page registration for browser and desktop sessions."""

from __future__ import annotations

from fastapi import FastAPI
from nicegui import app, ui

from incell.bridge import Bridge, NativeFileDialogs
from incell.settings import APP_TITLE, WINDOW_SIZE, AppSettings
from incell.utils.logging import get_logger

logger = get_logger(__name__)


def _register_pages(bridge: Bridge, settings: AppSettings) -> None:
    @ui.page("/")
    def index():
        from incell.ui.pages.parameters import parameters_page
        parameters_page(bridge, default_baud=settings.baud_rate)


def setup_ui(fastapi_app: FastAPI, bridge: Bridge, settings: AppSettings) -> None:
    """Mount the NiceGUI page on an existing FastAPI application."""
    _register_pages(bridge, settings)
    ui.run_with(
        fastapi_app,
        title=APP_TITLE,
        storage_secret=settings.storage_secret,
    )


def run_desktop(settings: AppSettings) -> None:
    """Run the UI in a native desktop window (pywebview).

    Closing the window shuts the server down, which closes any open
    serial connection.
    """
    from incell.api.app import register_routes

    bridge = Bridge(dialogs=NativeFileDialogs())
    app.state.bridge = bridge
    register_routes(app)
    _register_pages(bridge, settings)
    app.on_shutdown(bridge.shutdown)
    app.native.window_args["min_size"] = (800, 600)

    logger.info("incell_desktop_starting")
    ui.run(
        native=True,
        reload=False,
        title=APP_TITLE,
        window_size=WINDOW_SIZE,
        storage_secret=settings.storage_secret,
    )
