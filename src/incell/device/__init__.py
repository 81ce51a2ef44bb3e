"""Serial device connection layer using pyserial."""

from incell.device.connection import SerialConnection
from incell.device.events import EventBus, Subscription
from incell.device.manager import ConnectionManager
from incell.device.models import (
    DataEvent,
    ErrorEvent,
    PortInfo,
    SerialSettings,
    StatusEvent,
)

__all__ = [
    "ConnectionManager",
    "DataEvent",
    "ErrorEvent",
    "EventBus",
    "PortInfo",
    "SerialConnection",
    "SerialSettings",
    "StatusEvent",
    "Subscription",
]
