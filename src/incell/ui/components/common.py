"""Shared UI helpers."""

from __future__ import annotations

from nicegui import ui

from incell.ui.theme import COLORS


def card_style() -> str:
    """Return the standard card style string."""
    return (
        f"background: {COLORS['bg_secondary']}; "
        f"border: 1px solid {COLORS['border']}"
    )


def card_header(title: str, icon: str) -> None:
    """Render a card section header with icon."""
    with ui.row().classes("items-center gap-2 mb-3"):
        ui.icon(icon).classes("text-lg").style(
            f"color: {COLORS['accent_cyan']}"
        )
        ui.label(title).classes("text-subtitle2").style(
            f"color: {COLORS['text_primary']}"
        )


def set_connected(label: ui.label, port: str | None, baud_rate: int | None) -> None:
    """Show a connected status on a label."""
    detail = f"{port} @ {baud_rate}" if baud_rate else (port or "")
    label.text = f"Connected: {detail}"
    label.style(f"color: {COLORS['accent_green']}")


def set_disconnected(label: ui.label) -> None:
    label.text = "Not connected"
    label.style(f"color: {COLORS['text_muted']}")


def notify_outcome(outcome, success_message: str) -> bool:
    """Show a toast for a bridge outcome; return True on success."""
    if getattr(outcome, "canceled", False):
        ui.notify("Canceled", type="info")
        return False
    if outcome.success:
        ui.notify(success_message, type="positive")
        return True
    ui.notify(f"Failed: {outcome.error}", type="negative")
    return False
