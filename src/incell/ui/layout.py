"""Shared page layout with header and content area."""

from __future__ import annotations

from typing import Callable

from nicegui import ui

from incell.settings import APP_TITLE
from incell.ui.theme import COLORS, CSS


def page_layout(content_fn: Callable[[], None]) -> None:
    """Create the standard page layout with a header bar.

    Args:
        content_fn: Callable that builds the page content.
    """
    ui.add_css(CSS)
    ui.dark_mode(True)
    ui.colors(primary=COLORS['accent_cyan'], secondary=COLORS['accent_blue'])

    with ui.header(elevated=True).classes("q-pa-sm"):
        with ui.row().classes("w-full items-center no-wrap q-gutter-md"):
            ui.icon("tune").style(f"color: {COLORS['accent_cyan']}; font-size: 1.6rem;")
            ui.label(APP_TITLE).classes("text-h6 text-bold").style(
                f"color: {COLORS['accent_cyan']}; letter-spacing: 0.05em;"
            )

    with ui.column().classes("q-pa-md w-full").style(
        f"background-color: {COLORS['bg_primary']};"
    ):
        content_fn()
