"""Native file pickers for import and export.

A dialog returning ``None`` means the operator canceled it.
"""

from __future__ import annotations

from typing import Protocol

from incell.exceptions import DialogUnavailableError

SPREADSHEET_FILE_TYPES: tuple[str, ...] = ("Excel Files (*.xlsx;*.xlsm)",)


class FileDialogs(Protocol):
    async def choose_open(self, file_types: tuple[str, ...]) -> str | None: ...

    async def choose_save(self, default_name: str, file_types: tuple[str, ...]) -> str | None: ...


def _first_path(result: object) -> str | None:
    """Normalize pywebview dialog results (str, sequence or None)."""
    if not result:
        return None
    if isinstance(result, str):
        return result
    return str(result[0])


class NativeFileDialogs:
    """Dialogs of the NiceGUI native (pywebview) desktop window."""

    async def choose_open(self, file_types: tuple[str, ...]) -> str | None:
        import webview
        from nicegui import app

        window = app.native.main_window
        if window is None:
            raise DialogUnavailableError()
        result = await window.create_file_dialog(
            webview.OPEN_DIALOG,
            allow_multiple=False,
            file_types=file_types,
        )
        return _first_path(result)

    async def choose_save(self, default_name: str, file_types: tuple[str, ...]) -> str | None:
        import webview
        from nicegui import app

        window = app.native.main_window
        if window is None:
            raise DialogUnavailableError()
        result = await window.create_file_dialog(
            webview.SAVE_DIALOG,
            save_filename=default_name,
            file_types=file_types,
        )
        return _first_path(result)


class UnavailableFileDialogs:
    """Used when serving to a browser with no desktop window."""

    async def choose_open(self, file_types: tuple[str, ...]) -> str | None:
        raise DialogUnavailableError()

    async def choose_save(self, default_name: str, file_types: tuple[str, ...]) -> str | None:
        raise DialogUnavailableError()
