"""Bridge between the UI/API surfaces and the host controller."""

from incell.bridge.dialogs import (
    SPREADSHEET_FILE_TYPES,
    FileDialogs,
    NativeFileDialogs,
    UnavailableFileDialogs,
)
from incell.bridge.outcomes import Canceled, ExportOutcome, ImportOutcome, Outcome, PortsOutcome
from incell.bridge.service import Bridge

__all__ = [
    "SPREADSHEET_FILE_TYPES",
    "Bridge",
    "Canceled",
    "ExportOutcome",
    "FileDialogs",
    "ImportOutcome",
    "NativeFileDialogs",
    "Outcome",
    "PortsOutcome",
    "UnavailableFileDialogs",
]
