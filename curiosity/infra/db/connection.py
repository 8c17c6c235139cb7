# curiosity/infra/db/connection.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Sequence

import aiosqlite


class Database:
    """
    Async SQLite file handle for the backend and the migration runner.

    Every unit of work gets its own connection with aiosqlite.Row rows and
    foreign keys on; the journal is switched to WAL when the schema is applied.
    """

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Commits when the block exits cleanly, rolls back otherwise."""
        async with aiosqlite.connect(self._path) as conn:
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA foreign_keys=ON;")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def executescript(self, sql: str) -> None:
        async with self.connect() as conn:
            await conn.execute("PRAGMA journal_mode=WAL;")
            await conn.executescript(sql)

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        async with self.connect() as conn:
            await conn.execute(sql, params)

    async def fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[aiosqlite.Row]:
        async with self.connect() as conn:
            cur = await conn.execute(sql, params)
            return await cur.fetchone()

    async def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        async with self.connect() as conn:
            cur = await conn.execute(sql, params)
            return await cur.fetchall()
