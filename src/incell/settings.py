"""Application settings resolved from environment variables."""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, field

APP_TITLE = "In Cell Parameter Setting"

BAUD_RATES: tuple[int, ...] = (
    9600, 19200, 38400, 57600, 115200, 230400, 460800, 921600,
)
DATA_BITS: tuple[int, ...] = (5, 6, 7, 8)
PARITIES: tuple[str, ...] = ("none", "even", "odd", "mark", "space")
STOP_BITS: tuple[float, ...] = (1, 1.5, 2)

WINDOW_SIZE = (1024, 800)


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class AppSettings:
    """Runtime settings for the server, desktop window and logging."""

    host: str = "127.0.0.1"
    port: int = 8080
    baud_rate: int = 115200
    log_level: str = "INFO"
    log_json: bool = False
    storage_secret: str = field(default_factory=lambda: secrets.token_hex(32), repr=False)

    @classmethod
    def from_env(cls) -> AppSettings:
        """Build settings from ``INCELL_*`` environment variables.

        Unset or malformed values fall back to the defaults.
        """
        return cls(
            host=os.environ.get("INCELL_HOST") or cls.host,
            port=_env_int("INCELL_PORT", cls.port),
            baud_rate=_env_int("INCELL_BAUD_RATE", cls.baud_rate),
            log_level=(os.environ.get("INCELL_LOG_LEVEL") or cls.log_level).upper(),
            log_json=_env_bool("INCELL_LOG_JSON", cls.log_json),
            storage_secret=os.environ.get("INCELL_STORAGE_SECRET") or secrets.token_hex(32),
        )
