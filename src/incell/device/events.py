"""Fan-out event channel for connection status, data and errors.

Subscribers each get their own unbounded queue. Publishing never blocks
and there is no backpressure: a slow subscriber simply accumulates
events until it drains them or closes its subscription.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator

from incell.device.models import DataEvent, ErrorEvent, StatusEvent

Event = StatusEvent | DataEvent | ErrorEvent


class Subscription:
    """One subscriber's view of the event stream."""

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, event: Event) -> None:
        if not self._closed:
            self._queue.put_nowait(event)

    async def get(self) -> Event:
        """Wait for the next event."""
        return await self._queue.get()

    def drain(self) -> list[Event]:
        """Return every pending event without waiting."""
        events: list[Event] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return events

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus._remove(self)

    def __aiter__(self) -> AsyncIterator[Event]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Event]:
        while not self._closed:
            yield await self.get()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class EventBus:
    """Publishes events to every open subscription.

    Must be used from the event loop thread; producers on other threads
    go through ``loop.call_soon_threadsafe``.
    """

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self) -> Subscription:
        subscription = Subscription(self)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, event: Event) -> None:
        for subscription in list(self._subscriptions):
            subscription.put(event)

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass
