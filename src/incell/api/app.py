"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from incell import __version__
from incell.bridge import Bridge
from incell.settings import APP_TITLE, AppSettings
from incell.utils.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI) -> None:
    """Attach the serial and parameter routers to an application."""
    from incell.api.routes import parameters, serial

    app.include_router(serial.router)
    app.include_router(parameters.router)


def create_app(
    bridge: Bridge | None = None,
    enable_ui: bool = True,
    settings: AppSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        bridge: Bridge to serve; a fresh one is created when omitted.
        enable_ui: Whether to mount the NiceGUI page.
        settings: Runtime settings; read from the environment when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or AppSettings.from_env()
    bridge = bridge or Bridge()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("incell_api_starting")
        yield
        await bridge.shutdown()
        logger.info("incell_api_stopped")

    app = FastAPI(
        title=APP_TITLE,
        description="Serial parameter setting with spreadsheet import/export",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.bridge = bridge

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)

    if enable_ui:
        try:
            from incell.ui.main import setup_ui
            setup_ui(app, bridge, settings)
        except ImportError:
            logger.warning("nicegui_not_available", msg="Web UI disabled")

    return app
