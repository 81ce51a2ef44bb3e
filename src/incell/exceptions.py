"""Exception hierarchy for serial and spreadsheet operations."""

from __future__ import annotations


class IncellError(Exception):
    """Base exception for all incell errors."""


class NotConnectedError(IncellError):
    """No serial connection is open."""

    def __init__(self, message: str = "Serial port is not connected") -> None:
        super().__init__(message)


class ConnectionFailedError(IncellError):
    """Failed to open or configure the serial port."""


class SpreadsheetError(IncellError):
    """The spreadsheet could not be read or written."""


class DialogUnavailableError(IncellError):
    """No native file dialog is available in this session."""

    def __init__(
        self, message: str = "File dialogs are only available in the desktop window"
    ) -> None:
        super().__init__(message)


def error_message(exc: BaseException) -> str:
    """Return a human-readable message for an exception.

    Falls back to the exception class name when the exception carries no
    text (e.g. a bare ``OSError()``).
    """
    text = str(exc).strip()
    return text or type(exc).__name__
