# curiosity/infra/realtime/hub.py
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"
ANY_EVENT = "*"
EVENT_TYPES = (INSERT, UPDATE, DELETE)


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event_type: str
    new: Optional[Dict[str, Any]] = None
    old: Optional[Dict[str, Any]] = None


ChangeCallback = Callable[[ChangeEvent], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class _Binding:
    table: str
    event: str
    callback: ChangeCallback


class Channel:
    """
    Named group of table listeners. Nothing is delivered until subscribe();
    unsubscribe() detaches the whole channel.
    """

    def __init__(self, hub: "RealtimeHub", name: str) -> None:
        self.name = name
        self._hub = hub
        self._bindings: List[_Binding] = []
        self._subscribed = False

    @property
    def is_subscribed(self) -> bool:
        return self._subscribed

    def on(self, table: str, callback: ChangeCallback, event: str = ANY_EVENT) -> "Channel":
        if event != ANY_EVENT and event not in EVENT_TYPES:
            raise ValueError(f"Unknown change event {event!r}")
        self._bindings.append(_Binding(table=table, event=event, callback=callback))
        return self

    def subscribe(self) -> "Channel":
        self._hub._attach(self)
        self._subscribed = True
        return self

    def unsubscribe(self) -> None:
        self._hub._detach(self)
        self._subscribed = False

    def _callbacks_for(self, change: ChangeEvent) -> List[ChangeCallback]:
        return [
            b.callback
            for b in self._bindings
            if b.table == change.table and b.event in (ANY_EVENT, change.event_type)
        ]


class RealtimeHub:
    """
    In-process change feed keyed by table name.

    The backend publishes after each mutation; callbacks run as tasks on the
    running loop so a mutation never waits for its listeners. Reconnects and
    backoff are the transport's business, not this layer's.
    """

    def __init__(self) -> None:
        self._channels: List[Channel] = []
        self._pending: Set[asyncio.Task] = set()

    def channel(self, name: str) -> Channel:
        return Channel(self, name)

    def remove_channel(self, channel: Channel) -> None:
        channel.unsubscribe()

    @property
    def channel_count(self) -> int:
        return len(self._channels)

    def publish(self, change: ChangeEvent) -> None:
        for channel in list(self._channels):
            for callback in channel._callbacks_for(change):
                self._schedule(channel.name, callback, change)

    async def drain(self) -> None:
        """Wait until every scheduled delivery (and any it triggers) has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _attach(self, channel: Channel) -> None:
        if channel not in self._channels:
            self._channels.append(channel)

    def _detach(self, channel: Channel) -> None:
        if channel in self._channels:
            self._channels.remove(channel)

    def _schedule(self, name: str, callback: ChangeCallback, change: ChangeEvent) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(name, callback, change))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, name: str, callback: ChangeCallback, change: ChangeEvent) -> None:
        try:
            result = callback(change)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.error("Realtime listener on channel %s failed (%s %s)", name, change.event_type, change.table, exc_info=True)
