"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import time
from typing import Callable

import pytest

from incell.bridge import Bridge
from incell.device.manager import ConnectionManager
from incell.exceptions import ConnectionFailedError


class FakeConnection:
    """Stands in for SerialConnection; records writes and open/close calls.

    ``on_open`` runs on the opening thread after the port is marked open,
    the way a reader thread can deliver bytes before ``open()`` returns.
    ``close_delay`` makes ``close()`` block like a reader thread join.
    """

    def __init__(
        self,
        settings,
        listener,
        fail_open: str | None = None,
        on_open: Callable[[FakeConnection], None] | None = None,
        close_delay: float = 0.0,
    ):
        self.settings = settings
        self.listener = listener
        self.is_open = False
        self.writes: list[str] = []
        self.open_calls = 0
        self.close_calls = 0
        self._fail_open = fail_open
        self._on_open = on_open
        self._close_delay = close_delay

    def open(self) -> None:
        self.open_calls += 1
        if self._fail_open:
            raise ConnectionFailedError(self._fail_open)
        self.is_open = True
        if self._on_open is not None:
            self._on_open(self)

    def write(self, text: str) -> int:
        self.writes.append(text)
        return len(text)

    def close(self) -> None:
        if self._close_delay:
            time.sleep(self._close_delay)
        self.close_calls += 1
        self.is_open = False


class FakeConnectionFactory:
    """Connection factory that keeps every connection it creates."""

    def __init__(self) -> None:
        self.created: list[FakeConnection] = []
        self.fail_open: str | None = None
        self.on_open: Callable[[FakeConnection], None] | None = None
        self.close_delay = 0.0

    def __call__(self, settings, listener) -> FakeConnection:
        conn = FakeConnection(
            settings,
            listener,
            fail_open=self.fail_open,
            on_open=self.on_open,
            close_delay=self.close_delay,
        )
        self.created.append(conn)
        return conn

    @property
    def open_connections(self) -> list[FakeConnection]:
        return [c for c in self.created if c.is_open]


class ScriptedDialogs:
    """File dialogs that return preset answers (None means canceled)."""

    def __init__(self, open_path: str | None = None, save_path: str | None = None):
        self.open_path = open_path
        self.save_path = save_path
        self.open_requests: list[tuple[str, ...]] = []
        self.save_requests: list[str] = []

    async def choose_open(self, file_types):
        self.open_requests.append(file_types)
        return self.open_path

    async def choose_save(self, default_name, file_types):
        self.save_requests.append(default_name)
        return self.save_path


@pytest.fixture()
def factory() -> FakeConnectionFactory:
    return FakeConnectionFactory()


@pytest.fixture()
def manager(factory: FakeConnectionFactory) -> ConnectionManager:
    return ConnectionManager(connection_factory=factory)


@pytest.fixture()
def dialogs() -> ScriptedDialogs:
    return ScriptedDialogs()


@pytest.fixture()
def bridge(manager: ConnectionManager, dialogs: ScriptedDialogs) -> Bridge:
    return Bridge(manager=manager, dialogs=dialogs)
