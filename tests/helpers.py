"""
Shared test wiring: temp DB with migrations, a settable clock and a session per fake user.
"""
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from curiosity.container import Services, build_services
from curiosity.domain.common.models import Session
from curiosity.domain.common.ports import Clock
from curiosity.domain.common.time import to_iso
from curiosity.infra.auth.static_session import StaticSessionProvider
from curiosity.infra.backend.sqlite_backend import SqliteBackend
from curiosity.infra.db.connection import Database
from curiosity.infra.db.schema_version import apply_migrations
from curiosity.infra.ids.uuid_gen import UuidGenerator
from curiosity.infra.realtime.hub import RealtimeHub

HELSINKI_SUMMER = timezone(timedelta(hours=3))


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now: Optional[datetime] = None) -> None:
        self._now = now or datetime(2024, 6, 10, 9, 0, tzinfo=HELSINKI_SUMMER)

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


@dataclass
class Stack:
    db: Database
    clock: FixedClock
    hub: RealtimeHub
    backend: SqliteBackend
    sessions: StaticSessionProvider
    services: Services

    def services_for(self, user_id: Optional[str], email: Optional[str] = None) -> Services:
        session = Session(user_id=user_id, email=email) if user_id else None
        return build_services(self.backend, StaticSessionProvider(session), self.clock, UuidGenerator())


def temp_db_path() -> str:
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    return path


async def run_with_stack(test_fn, user_id: Optional[str] = "user-1", email: Optional[str] = None) -> None:
    """Fresh migrated DB per test; test_fn(stack) runs against user_id's services."""
    path = temp_db_path()
    try:
        db = Database(path)
        clock = FixedClock()
        await apply_migrations(db, now_iso=to_iso(clock.now()))
        hub = RealtimeHub()
        ids = UuidGenerator()
        backend = SqliteBackend(db, clock, ids, hub=hub)
        sessions = StaticSessionProvider(Session(user_id=user_id, email=email) if user_id else None)
        stack = Stack(
            db=db,
            clock=clock,
            hub=hub,
            backend=backend,
            sessions=sessions,
            services=build_services(backend, sessions, clock, ids),
        )
        await test_fn(stack)
        await hub.drain()
    finally:
        for suffix in ("", "-wal", "-shm"):
            if os.path.exists(path + suffix):
                os.unlink(path + suffix)
