"""Pydantic models for serial settings, port listings and push events."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

Parity = Literal["none", "even", "odd", "mark", "space"]


class SerialSettings(BaseModel):
    """Line parameters for a serial connection."""

    path: str
    baud_rate: int = 115200
    data_bits: int = 8
    parity: Parity = "none"
    stop_bits: float = 1


class PortInfo(BaseModel):
    """A serial device reported by the platform enumeration."""

    device: str
    description: str = ""
    hwid: str = ""
    manufacturer: str | None = None
    serial_number: str | None = None
    vid: int | None = None
    pid: int | None = None
    location: str | None = None
    product: str | None = None


class StatusEvent(BaseModel):
    """Connection status change."""

    kind: Literal["status"] = "status"
    connected: bool
    port: str | None = None
    baud_rate: int | None = None


class DataEvent(BaseModel):
    """Text received from the device."""

    kind: Literal["data"] = "data"
    data: str


class ErrorEvent(BaseModel):
    """Error reported by the serial driver."""

    kind: Literal["error"] = "error"
    message: str


SerialEvent = Annotated[
    Union[StatusEvent, DataEvent, ErrorEvent],
    Field(discriminator="kind"),
]
