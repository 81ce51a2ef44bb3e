"""Request/response operations exposed to the UI, API and CLI.

This is the only layer that flattens exceptions: every operation returns
an :class:`Outcome` (or :class:`Canceled` for dismissed file dialogs)
and never raises for errors coming from the serial driver, the
spreadsheet library or the file system.
"""

from __future__ import annotations

import asyncio
from typing import Mapping

from incell.bridge.dialogs import SPREADSHEET_FILE_TYPES, FileDialogs, UnavailableFileDialogs
from incell.bridge.outcomes import Canceled, ExportOutcome, ImportOutcome, Outcome, PortsOutcome
from incell.device.events import Subscription
from incell.device.manager import ConnectionManager
from incell.device.models import Parity, SerialSettings
from incell.exceptions import error_message
from incell.parameters.workbook import (
    ParameterValue,
    export_filename,
    read_parameters,
    write_parameters,
)
from incell.utils.logging import get_logger

logger = get_logger(__name__)


class Bridge:
    """Facade over the connection manager, file dialogs and workbook I/O."""

    def __init__(
        self,
        manager: ConnectionManager | None = None,
        dialogs: FileDialogs | None = None,
    ) -> None:
        self._manager = manager or ConnectionManager()
        self._dialogs = dialogs or UnavailableFileDialogs()

    @property
    def manager(self) -> ConnectionManager:
        return self._manager

    @property
    def dialogs(self) -> FileDialogs:
        return self._dialogs

    @dialogs.setter
    def dialogs(self, dialogs: FileDialogs) -> None:
        self._dialogs = dialogs

    def subscribe(self) -> Subscription:
        """Subscribe to status, data and error events."""
        return self._manager.events.subscribe()

    # --- serial ---

    async def list_ports(self) -> PortsOutcome | Outcome:
        try:
            ports = await self._manager.list_ports()
        except Exception as exc:
            logger.warning("list_ports_failed", error=error_message(exc))
            return Outcome.failed(exc)
        return PortsOutcome(ports=ports)

    async def connect(
        self,
        path: str,
        baud_rate: int | str,
        data_bits: int | str = 8,
        parity: Parity | str = "none",
        stop_bits: float | str = 1,
    ) -> Outcome:
        try:
            settings = SerialSettings(
                path=path,
                baud_rate=baud_rate,
                data_bits=data_bits,
                parity=parity,
                stop_bits=stop_bits,
            )
            await self._manager.connect(settings)
        except Exception as exc:
            logger.warning("connect_failed", port=path, error=error_message(exc))
            return Outcome.failed(exc)
        return Outcome()

    async def disconnect(self) -> Outcome:
        try:
            await self._manager.disconnect()
        except Exception as exc:
            logger.warning("disconnect_failed", error=error_message(exc))
            return Outcome.failed(exc)
        return Outcome()

    async def send(self, payload: str) -> Outcome:
        try:
            await self._manager.send(payload)
        except Exception as exc:
            logger.warning("send_failed", error=error_message(exc))
            return Outcome.failed(exc)
        return Outcome()

    # --- spreadsheet ---

    async def import_parameters(
        self, file_path: str | None = None
    ) -> ImportOutcome | Canceled | Outcome:
        """Read a parameter set, asking the operator for a file if none is given."""
        try:
            if file_path is None:
                file_path = await self._dialogs.choose_open(SPREADSHEET_FILE_TYPES)
                if not file_path:
                    logger.info("import_canceled")
                    return Canceled()
            parameters = await asyncio.to_thread(read_parameters, file_path)
        except Exception as exc:
            logger.warning("import_failed", file_path=file_path, error=error_message(exc))
            return Outcome.failed(exc)
        logger.info("parameters_imported", file_path=file_path, count=len(parameters))
        return ImportOutcome(parameters=parameters, file_path=str(file_path))

    async def export_parameters(
        self,
        parameters: Mapping[str, ParameterValue],
        model_name: str | None = None,
        file_path: str | None = None,
    ) -> ExportOutcome | Canceled | Outcome:
        """Write a parameter set, asking the operator where if no path is given."""
        try:
            if file_path is None:
                file_path = await self._dialogs.choose_save(
                    export_filename(model_name), SPREADSHEET_FILE_TYPES
                )
                if not file_path:
                    logger.info("export_canceled")
                    return Canceled()
            await asyncio.to_thread(write_parameters, file_path, dict(parameters))
        except Exception as exc:
            logger.warning("export_failed", file_path=file_path, error=error_message(exc))
            return Outcome.failed(exc)
        logger.info("parameters_exported", file_path=file_path)
        return ExportOutcome(file_path=str(file_path))

    async def shutdown(self) -> None:
        """Close any open connection (window close, process exit)."""
        try:
            await self._manager.close()
        except Exception:
            logger.warning("shutdown_close_failed", exc_info=True)
