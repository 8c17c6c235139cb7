from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

TASK_CREATED = "task-created"

Listener = Callable[[Any], None]


class NotificationBus:
    """
    In-process publish point shared by views.

    event name -> listeners, in registration order. Owned by the composition
    root and passed to whoever produces or consumes events. Nothing is queued:
    a listener only sees events published while it is registered.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.setdefault(event, [])
        if listener not in listeners:
            listeners.append(listener)

    def unsubscribe(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[event]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def notify(self, event: str, payload: Any) -> int:
        """Deliver synchronously; returns how many listeners were called."""
        delivered = 0
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(payload)
            except Exception:
                logger.error("Listener for %s failed", event, exc_info=True)
            delivered += 1
        return delivered
