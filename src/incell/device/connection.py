"""Single serial connection backed by pyserial.

Incoming bytes are read on a ``serial.threaded.ReaderThread`` and handed
to a listener as decoded text. The listener callbacks run on the reader
thread; callers that need them on an event loop must marshal them.
"""

from __future__ import annotations

import codecs
from typing import Protocol

import serial
from serial.threaded import Protocol as SerialProtocol
from serial.threaded import ReaderThread

from incell.device.models import SerialSettings
from incell.exceptions import ConnectionFailedError
from incell.utils.logging import get_logger

logger = get_logger(__name__)

_PARITY_MAP: dict[str, str] = {
    "none": serial.PARITY_NONE,
    "even": serial.PARITY_EVEN,
    "odd": serial.PARITY_ODD,
    "mark": serial.PARITY_MARK,
    "space": serial.PARITY_SPACE,
}

_STOP_BITS_MAP: dict[float, float] = {
    1: serial.STOPBITS_ONE,
    1.5: serial.STOPBITS_ONE_POINT_FIVE,
    2: serial.STOPBITS_TWO,
}


class ConnectionListener(Protocol):
    """Receives events from a running connection."""

    def on_data(self, text: str) -> None: ...

    def on_error(self, message: str) -> None: ...

    def on_close(self) -> None: ...


def serial_kwargs(settings: SerialSettings) -> dict:
    """Translate settings into ``serial.Serial`` keyword arguments."""
    try:
        stopbits = _STOP_BITS_MAP[float(settings.stop_bits)]
    except KeyError:
        raise ConnectionFailedError(
            f"Unsupported stop bits: {settings.stop_bits}"
        ) from None
    return {
        "baudrate": int(settings.baud_rate),
        "bytesize": int(settings.data_bits),
        "parity": _PARITY_MAP[settings.parity],
        "stopbits": stopbits,
    }


class _ForwardingProtocol(SerialProtocol):
    """Decodes received bytes as UTF-8 and forwards them to a listener."""

    def __init__(self, listener: ConnectionListener) -> None:
        self._listener = listener
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def data_received(self, data: bytes) -> None:
        text = self._decoder.decode(data)
        if text:
            self._listener.on_data(text)

    def connection_lost(self, exc: BaseException | None) -> None:
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._listener.on_data(tail)
        if exc is not None:
            self._listener.on_error(str(exc) or type(exc).__name__)
        self._listener.on_close()


class SerialConnection:
    """An owned pyserial port plus its reader thread.

    Usage:
        conn = SerialConnection(SerialSettings(path="/dev/ttyUSB0"), listener)
        conn.open()
        conn.write("hello\\r\\n")
        conn.close()
    """

    def __init__(self, settings: SerialSettings, listener: ConnectionListener) -> None:
        self._settings = settings
        self._listener = listener
        self._serial: serial.SerialBase | None = None
        self._reader: ReaderThread | None = None

    @property
    def settings(self) -> SerialSettings:
        return self._settings

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self) -> None:
        """Open the port and start the reader thread. Blocking."""
        logger.info(
            "serial_opening",
            port=self._settings.path,
            baud_rate=self._settings.baud_rate,
        )
        try:
            port = serial.serial_for_url(
                self._settings.path,
                do_not_open=True,
                **serial_kwargs(self._settings),
            )
            port.open()
        except (serial.SerialException, ValueError, OSError) as exc:
            raise ConnectionFailedError(str(exc) or type(exc).__name__) from exc

        self._serial = port
        self._reader = ReaderThread(port, lambda: _ForwardingProtocol(self._listener))
        self._reader.start()
        logger.info("serial_opened", port=self._settings.path)

    def write(self, text: str) -> int:
        """Write text and wait until the transmit buffer has drained. Blocking."""
        if self._reader is None or not self.is_open:
            raise ConnectionFailedError("Serial port is closed")
        written = self._reader.write(text.encode("utf-8"))
        self._serial.flush()
        logger.debug("serial_written", port=self._settings.path, size=written)
        return written

    def close(self) -> None:
        """Stop the reader thread and close the port. Idempotent."""
        reader, port = self._reader, self._serial
        self._reader = None
        self._serial = None
        if reader is not None:
            logger.info("serial_closing", port=self._settings.path)
            reader.close()
        elif port is not None:
            port.close()
