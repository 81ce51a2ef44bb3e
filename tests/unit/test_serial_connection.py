"""Unit tests for SerialConnection and its reader protocol, with pyserial mocked."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import serial

from incell.device.connection import SerialConnection, _ForwardingProtocol, serial_kwargs
from incell.device.models import SerialSettings
from incell.exceptions import ConnectionFailedError


class RecordingListener:
    def __init__(self) -> None:
        self.data: list[str] = []
        self.errors: list[str] = []
        self.closed = 0

    def on_data(self, text: str) -> None:
        self.data.append(text)

    def on_error(self, message: str) -> None:
        self.errors.append(message)

    def on_close(self) -> None:
        self.closed += 1


class TestSerialKwargs:
    def test_defaults(self):
        kwargs = serial_kwargs(SerialSettings(path="COM3"))

        assert kwargs == {
            "baudrate": 115200,
            "bytesize": 8,
            "parity": serial.PARITY_NONE,
            "stopbits": serial.STOPBITS_ONE,
        }

    @pytest.mark.parametrize(
        "parity, expected",
        [
            ("even", serial.PARITY_EVEN),
            ("odd", serial.PARITY_ODD),
            ("mark", serial.PARITY_MARK),
            ("space", serial.PARITY_SPACE),
        ],
    )
    def test_parity(self, parity, expected):
        assert serial_kwargs(SerialSettings(path="COM3", parity=parity))["parity"] == expected

    def test_stop_bits(self):
        assert serial_kwargs(SerialSettings(path="COM3", stop_bits=1.5))["stopbits"] == 1.5
        assert serial_kwargs(SerialSettings(path="COM3", stop_bits=2))["stopbits"] == 2

    def test_unsupported_stop_bits(self):
        with pytest.raises(ConnectionFailedError, match="stop bits"):
            serial_kwargs(SerialSettings(path="COM3", stop_bits=3))


class TestForwardingProtocol:
    def test_decodes_utf8_split_across_reads(self):
        listener = RecordingListener()
        protocol = _ForwardingProtocol(listener)

        protocol.data_received(b"T=25\xc2")
        protocol.data_received(b"\xb0C\r\n")

        assert "".join(listener.data) == "T=25°C\r\n"

    def test_invalid_bytes_are_replaced(self):
        listener = RecordingListener()
        protocol = _ForwardingProtocol(listener)

        protocol.data_received(b"ok\xff")

        assert listener.data == ["ok�"]

    def test_clean_close(self):
        listener = RecordingListener()
        _ForwardingProtocol(listener).connection_lost(None)

        assert listener.errors == []
        assert listener.closed == 1

    def test_close_with_error_reports_it_first(self):
        listener = RecordingListener()
        protocol = _ForwardingProtocol(listener)
        protocol.data_received(b"\xe2\x82")

        protocol.connection_lost(serial.SerialException("device disconnected"))

        assert listener.data == ["�"]
        assert listener.errors == ["device disconnected"]
        assert listener.closed == 1


class TestSerialConnection:
    def test_open_configures_and_starts_reader(self):
        port = MagicMock()
        port.is_open = True
        with patch("incell.device.connection.serial.serial_for_url", return_value=port) as factory, \
             patch("incell.device.connection.ReaderThread") as reader_cls:
            conn = SerialConnection(
                SerialSettings(path="/dev/ttyUSB0", baud_rate=9600, parity="even"),
                RecordingListener(),
            )
            conn.open()

        factory.assert_called_once_with(
            "/dev/ttyUSB0",
            do_not_open=True,
            baudrate=9600,
            bytesize=8,
            parity=serial.PARITY_EVEN,
            stopbits=serial.STOPBITS_ONE,
        )
        port.open.assert_called_once()
        reader_cls.return_value.start.assert_called_once()
        assert conn.is_open

    def test_open_failure_is_wrapped(self):
        port = MagicMock()
        port.open.side_effect = serial.SerialException("could not open port /dev/ttyUSB9")
        with patch("incell.device.connection.serial.serial_for_url", return_value=port):
            conn = SerialConnection(SerialSettings(path="/dev/ttyUSB9"), RecordingListener())
            with pytest.raises(ConnectionFailedError, match="could not open port"):
                conn.open()

        assert not conn.is_open

    def test_write_encodes_and_flushes(self):
        port = MagicMock()
        port.is_open = True
        with patch("incell.device.connection.serial.serial_for_url", return_value=port), \
             patch("incell.device.connection.ReaderThread") as reader_cls:
            reader_cls.return_value.write.return_value = 7
            conn = SerialConnection(SerialSettings(path="COM3"), RecordingListener())
            conn.open()
            written = conn.write("VDD=3.3")

        reader_cls.return_value.write.assert_called_once_with(b"VDD=3.3")
        port.flush.assert_called_once()
        assert written == 7

    def test_write_when_closed(self):
        conn = SerialConnection(SerialSettings(path="COM3"), RecordingListener())

        with pytest.raises(ConnectionFailedError, match="closed"):
            conn.write("x")

    def test_close_stops_reader_once(self):
        port = MagicMock()
        port.is_open = True
        with patch("incell.device.connection.serial.serial_for_url", return_value=port), \
             patch("incell.device.connection.ReaderThread") as reader_cls:
            conn = SerialConnection(SerialSettings(path="COM3"), RecordingListener())
            conn.open()
            conn.close()
            conn.close()

        reader_cls.return_value.close.assert_called_once()
        assert not conn.is_open
