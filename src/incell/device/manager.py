"""Owner of the process's single serial connection.

All mutating operations are serialized by one ``asyncio.Lock`` so rapid
double connects cannot interleave. Blocking pyserial calls run in worker
threads; callbacks from the reader thread are marshalled back onto the
event loop before they touch manager state or publish events.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from serial.tools.list_ports import comports

from incell.device.connection import ConnectionListener, SerialConnection
from incell.device.events import EventBus
from incell.device.models import (
    DataEvent,
    ErrorEvent,
    PortInfo,
    SerialSettings,
    StatusEvent,
)
from incell.exceptions import NotConnectedError
from incell.utils.logging import get_logger

logger = get_logger(__name__)

ConnectionFactory = Callable[[SerialSettings, ConnectionListener], SerialConnection]


def _port_info(port) -> PortInfo:
    """Convert a pyserial ListPortInfo to our model."""
    return PortInfo(
        device=port.device,
        description=getattr(port, "description", "") or "",
        hwid=getattr(port, "hwid", "") or "",
        manufacturer=getattr(port, "manufacturer", None),
        serial_number=getattr(port, "serial_number", None),
        vid=getattr(port, "vid", None),
        pid=getattr(port, "pid", None),
        location=getattr(port, "location", None),
        product=getattr(port, "product", None),
    )


class _LoopListener:
    """Forwards reader-thread callbacks to the manager on its event loop."""

    def __init__(
        self,
        manager: ConnectionManager,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._manager = manager
        self._loop = loop
        self.connection: SerialConnection | None = None

    def _call(self, fn: Callable, *args: object) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(fn, *args)

    def on_data(self, text: str) -> None:
        self._call(self._manager._handle_data, self.connection, text)

    def on_error(self, message: str) -> None:
        self._call(self._manager._handle_error, self.connection, message)

    def on_close(self) -> None:
        self._call(self._manager._handle_close, self.connection)


class ConnectionManager:
    """Holds at most one open serial connection.

    Usage:
        manager = ConnectionManager()
        with manager.events.subscribe() as sub:
            await manager.connect(SerialSettings(path="COM3", baud_rate=9600))
            await manager.send("PING\\r\\n")
            event = await sub.get()
        await manager.disconnect()
    """

    def __init__(
        self,
        events: EventBus | None = None,
        connection_factory: ConnectionFactory = SerialConnection,
    ) -> None:
        self._events = events or EventBus()
        self._factory = connection_factory
        self._connection: SerialConnection | None = None
        # Connection being opened; its callbacks are held until it is current
        self._pending: SerialConnection | None = None
        self._early: list[tuple[Callable, tuple]] = []
        self._close_tasks: set[asyncio.Future] = set()
        self._lock = asyncio.Lock()

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.is_open

    @property
    def settings(self) -> SerialSettings | None:
        if self._connection is None:
            return None
        return self._connection.settings

    async def list_ports(self) -> list[PortInfo]:
        """Enumerate serial devices on this machine."""
        ports = await asyncio.to_thread(comports)
        return [_port_info(p) for p in sorted(ports, key=lambda p: p.device)]

    async def connect(self, settings: SerialSettings) -> None:
        """Open a connection, closing any existing one first.

        Raises:
            ConnectionFailedError: If the port cannot be opened.
        """
        async with self._lock:
            if self._connection is not None:
                await self._close_current()

            listener = _LoopListener(self, asyncio.get_running_loop())
            connection = self._factory(settings, listener)
            listener.connection = connection

            logger.info("serial_connecting", port=settings.path, baud_rate=settings.baud_rate)
            self._pending = connection
            try:
                await asyncio.to_thread(connection.open)
            finally:
                self._pending = None
                early, self._early = self._early, []

            self._connection = connection
            logger.info("serial_connected", port=settings.path)
            self._events.publish(
                StatusEvent(
                    connected=True,
                    port=settings.path,
                    baud_rate=settings.baud_rate,
                )
            )
            # Replay what the reader delivered while the port was opening
            for handler, args in early:
                handler(*args)

    async def disconnect(self) -> None:
        """Close the open connection, if any."""
        async with self._lock:
            if self._connection is not None:
                await self._close_current()

    async def send(self, payload: str) -> None:
        """Write a payload and wait for it to drain.

        Raises:
            NotConnectedError: If no connection is open.
        """
        async with self._lock:
            connection = self._connection
            if connection is None or not connection.is_open:
                raise NotConnectedError()
            await asyncio.to_thread(connection.write, payload)

    async def close(self) -> None:
        """Shutdown hook: disconnect and wait for background closes."""
        await self.disconnect()
        if self._close_tasks:
            await asyncio.gather(*list(self._close_tasks), return_exceptions=True)

    async def _close_current(self) -> None:
        connection = self._connection
        self._connection = None
        port = connection.settings.path
        logger.info("serial_disconnecting", port=port)
        try:
            await asyncio.to_thread(connection.close)
        finally:
            self._events.publish(StatusEvent(connected=False, port=port))
            logger.info("serial_disconnected", port=port)

    # --- reader-thread callbacks, run on the event loop ---

    def _hold_early(self, handler: Callable, connection: SerialConnection | None, *args) -> bool:
        if connection is None or connection is not self._pending:
            return False
        self._early.append((handler, (connection, *args)))
        return True

    def _handle_data(self, connection: SerialConnection | None, text: str) -> None:
        if self._hold_early(self._handle_data, connection, text):
            return
        if connection is self._connection:
            self._events.publish(DataEvent(data=text))

    def _handle_error(self, connection: SerialConnection | None, message: str) -> None:
        if self._hold_early(self._handle_error, connection, message):
            return
        if connection is self._connection:
            logger.warning("serial_error", error=message)
            self._events.publish(ErrorEvent(message=message))

    def _handle_close(self, connection: SerialConnection | None) -> None:
        if self._hold_early(self._handle_close, connection):
            return
        if connection is None or connection is not self._connection:
            return
        # Port went away underneath us (unplugged, read error)
        port = connection.settings.path
        self._connection = None
        logger.info("serial_closed_externally", port=port)
        self._events.publish(StatusEvent(connected=False, port=port))

        # ReaderThread.close() joins the reader and waits on its write lock
        task = asyncio.ensure_future(asyncio.to_thread(connection.close))
        self._close_tasks.add(task)
        task.add_done_callback(lambda t: self._close_done(t, port))

    def _close_done(self, task: asyncio.Future, port: str) -> None:
        self._close_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("serial_close_error", port=port, error=str(exc))
