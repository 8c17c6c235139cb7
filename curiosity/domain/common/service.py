# -*- coding: utf-8 -*-
"""Shared plumbing for entity services: session check, owner scoping, logging."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Dict, List, Mapping, Optional, TypeVar

from curiosity.domain.common.errors import BackendError, NotFoundError, UnauthenticatedError
from curiosity.domain.common.models import Session
from curiosity.domain.common.ports import Backend, Clock, Row, SessionProvider
from curiosity.domain.common.query import Query
from curiosity.domain.common.time import to_iso

logger = logging.getLogger(__name__)

T = TypeVar("T")


def sparse(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None so omitted fields stay untouched server-side."""
    return {k: v for k, v in values.items() if v is not None}


class EntityService:
    """
    Base for services that own one table.

    Every public operation resolves the session first; nothing reaches the
    backend without an owner id.
    """

    table: str = ""

    def __init__(self, backend: Backend, sessions: SessionProvider, clock: Clock) -> None:
        self._backend = backend
        self._sessions = sessions
        self._clock = clock

    async def _require_session(self, action: str) -> Session:
        session = await self._sessions.get_session()
        if session is None:
            raise UnauthenticatedError(f"User must be logged in to {action}")
        return session

    def _now_iso(self) -> str:
        return to_iso(self._clock.now())

    def _owned(self, session: Session, entity_id: Optional[str] = None, table: Optional[str] = None) -> Query:
        query = Query(table or self.table).eq("user_id", session.user_id)
        if entity_id is not None:
            query = query.eq("id", entity_id)
        return query

    async def _guard(self, action: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except NotFoundError as e:
            logger.debug("No rows %s (%s): %s", action, self.table, e)
            raise
        except BackendError as e:
            logger.error("Error %s (%s): %s", action, self.table, e)
            raise

    async def _insert_row(self, action: str, row: Mapping[str, Any]) -> Row:
        return await self._guard(action, self._backend.insert(self.table, row))

    async def _update_owned(self, action: str, session: Session, entity_id: str, values: Mapping[str, Any]) -> Row:
        payload = dict(values)
        payload["updated_at"] = self._now_iso()
        return await self._guard(
            action,
            self._backend.update_single(self._owned(session, entity_id), payload),
        )

    async def _delete_owned(self, action: str, session: Session, entity_id: str) -> int:
        return await self._guard(action, self._backend.delete(self._owned(session, entity_id)))

    async def _select(self, action: str, query: Query) -> List[Row]:
        return await self._guard(action, self._backend.select(query))

    async def _select_single(self, action: str, query: Query) -> Row:
        return await self._guard(action, self._backend.select_single(query))
