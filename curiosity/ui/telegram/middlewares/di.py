from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject

from curiosity.container import build_services
from curiosity.domain.common.models import Session
from curiosity.domain.common.ports import Backend, Clock, IdGenerator
from curiosity.domain.events.bus import NotificationBus
from curiosity.infra.auth.static_session import StaticSessionProvider
from curiosity.infra.realtime.hub import RealtimeHub


def session_for(event: TelegramObject) -> Optional[Session]:
    user = None
    if isinstance(event, (Message, CallbackQuery)):
        user = event.from_user
    if user is None:
        return None
    return Session(user_id=f"tg:{user.id}")


class DIMiddleware(BaseMiddleware):
    """
    Inject dependencies to handlers via `data` dict.

    Services are built per update around the sender's session, so handlers
    never see another user's rows:
      async def handler(message: Message, services: Services, bus: NotificationBus, clock: Clock): ...
    """

    def __init__(
        self,
        backend: Backend,
        clock: Clock,
        ids: IdGenerator,
        hub: RealtimeHub,
        bus: NotificationBus,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self._ids = ids
        self._hub = hub
        self._bus = bus

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        sessions = StaticSessionProvider(session_for(event))
        # keep names stable across the project
        data["services"] = build_services(self._backend, sessions, self._clock, self._ids)
        data["clock"] = self._clock
        data["hub"] = self._hub
        data["bus"] = self._bus

        return await handler(event, data)
