# curiosity/infra/backend/sqlite_backend.py
from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import aiosqlite

from curiosity.domain.common.errors import BackendError, NotFoundError
from curiosity.domain.common.ports import Backend, Clock, IdGenerator, Row
from curiosity.domain.common.query import Query
from curiosity.domain.common.time import from_iso, to_iso, to_utc_iso
from curiosity.infra.db.connection import Database
from curiosity.infra.realtime.hub import DELETE, INSERT, UPDATE, ChangeEvent, RealtimeHub

logger = logging.getLogger(__name__)

TABLES = frozenset(
    {
        "tasks",
        "projects",
        "calendar_events",
        "user_activity",
        "focus_sessions",
        "focus_settings",
        "focus_streaks",
        "profiles",
        "mind_maps",
    }
)

# stored as JSON text, handed out as lists and dicts
JSON_COLUMNS: Dict[str, Tuple[str, ...]] = {"mind_maps": ("nodes", "edges")}

# filled in by the backend when the caller leaves them out
TIMESTAMP_DEFAULTS = ("created_at", "updated_at", "timestamp")

CONSTRAINT_VIOLATION = "constraint_violation"
STORAGE_ERROR = "sqlite_error"
UNDEFINED_TABLE = "undefined_table"
UNDEFINED_COLUMN = "undefined_column"
UNDEFINED_FUNCTION = "undefined_function"
MULTIPLE_ROWS = "multiple_rows"

_OPS = {"eq": "=", "gte": ">=", "lte": "<="}

_SCORES = ("focus_score", "energy_level", "productivity_score")
_COUNTERS = ("tasks_completed", "focus_minutes", "flow_state_minutes")

Procedure = Callable[[Mapping[str, Any]], Awaitable[List[Row]]]


@contextmanager
def _translated_errors() -> Iterator[None]:
    try:
        yield
    except aiosqlite.IntegrityError as e:
        raise BackendError(str(e), code=CONSTRAINT_VIOLATION) from e
    except aiosqlite.Error as e:
        raise BackendError(str(e), code=STORAGE_ERROR) from e


def _encoded(table: str, values: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(values)
    for name in JSON_COLUMNS.get(table, ()):
        if isinstance(out.get(name), (list, tuple, dict)):
            out[name] = json.dumps(out[name])
    return out


def _decoded(table: str, row: Any) -> Row:
    out = dict(row)
    for name in JSON_COLUMNS.get(table, ()):
        if isinstance(out.get(name), str):
            out[name] = json.loads(out[name])
    return out


def _summarize(day: date, samples: Sequence[Mapping[str, Any]]) -> Row:
    """Averages skip missing scores, sums skip missing counters; empty days are zero."""
    summary: Dict[str, Any] = {"date": day.isoformat()}
    for name in _SCORES:
        present = [s[name] for s in samples if s[name] is not None]
        summary[f"avg_{name}"] = sum(present) / len(present) if present else 0
    for name in _COUNTERS:
        summary[f"total_{name}"] = sum(s[name] for s in samples if s[name] is not None)
    return summary


class SqliteBackend(Backend):
    """
    Table backend over aiosqlite.

    Plays the hosted-backend role: generates ids and timestamps, enforces the
    schema, runs stored procedures and announces every mutation on the
    realtime hub. Table and column names are checked against the live schema
    before they are put into SQL.
    """

    def __init__(self, db: Database, clock: Clock, ids: IdGenerator, hub: Optional[RealtimeHub] = None) -> None:
        self._db = db
        self._clock = clock
        self._ids = ids
        self._hub = hub
        self._columns: Dict[str, Tuple[str, ...]] = {}
        self._procedures: Dict[str, Procedure] = {
            "get_user_daily_activity": self._daily_activity,
        }

    # --- reads ---

    async def select(self, query: Query) -> List[Row]:
        with _translated_errors():
            async with self._db.connect() as conn:
                columns = await self._table_columns(conn, query.table)
                where, params = self._where(query, columns)
                order, order_params = self._order(query, columns)
                cur = await conn.execute(f"SELECT * FROM {query.table}{where}{order};", [*params, *order_params])
                return [_decoded(query.table, r) for r in await cur.fetchall()]

    async def select_single(self, query: Query) -> Row:
        rows = await self.select(query)
        return self._exactly_one(query, rows)

    # --- writes ---

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        with _translated_errors():
            async with self._db.connect() as conn:
                columns = await self._table_columns(conn, table)
                values = self._with_defaults(columns, _encoded(table, row))
                self._check_columns(table, columns, values)
                names = list(values)
                await conn.execute(
                    f"INSERT INTO {table} ({', '.join(names)}) VALUES ({', '.join(['?'] * len(names))});",
                    [values[n] for n in names],
                )
                created = await self._fetch_by_ids(conn, table, [values["id"]])
        self._publish(table, INSERT, new=created[0])
        return created[0]

    async def update(self, query: Query, values: Mapping[str, Any]) -> List[Row]:
        return await self._update(query, values, single=False)

    async def update_single(self, query: Query, values: Mapping[str, Any]) -> Row:
        rows = await self._update(query, values, single=True)
        return rows[0]

    async def delete(self, query: Query) -> int:
        with _translated_errors():
            async with self._db.connect() as conn:
                columns = await self._table_columns(conn, query.table)
                ids = await self._matching_ids(conn, query, columns)
                old_rows = await self._fetch_by_ids(conn, query.table, ids)
                if ids:
                    await conn.execute(
                        f"DELETE FROM {query.table} WHERE id IN ({', '.join(['?'] * len(ids))});",
                        ids,
                    )
        for old in old_rows:
            self._publish(query.table, DELETE, old=old)
        return len(old_rows)

    async def upsert(self, table: str, row: Mapping[str, Any], on_conflict: str = "id") -> Row:
        with _translated_errors():
            async with self._db.connect() as conn:
                columns = await self._table_columns(conn, table)
                self._check_columns(table, columns, [on_conflict])
                if row.get(on_conflict) is None:
                    raise BackendError(f"upsert on {table} needs a value for {on_conflict}", code=CONSTRAINT_VIOLATION)
                cur = await conn.execute(f"SELECT * FROM {table} WHERE {on_conflict} = ?;", (row[on_conflict],))
                before = await cur.fetchone()

                values = self._with_defaults(columns, _encoded(table, row))
                self._check_columns(table, columns, values)
                names = list(values)
                updatable = [n for n in row if n not in (on_conflict, "id", "created_at")]
                if updatable:
                    conflict_sql = "DO UPDATE SET " + ", ".join(f"{n} = excluded.{n}" for n in updatable)
                else:
                    conflict_sql = "DO NOTHING"
                await conn.execute(
                    f"INSERT INTO {table} ({', '.join(names)}) VALUES ({', '.join(['?'] * len(names))}) "
                    f"ON CONFLICT({on_conflict}) {conflict_sql};",
                    [values[n] for n in names],
                )
                cur = await conn.execute(f"SELECT * FROM {table} WHERE {on_conflict} = ?;", (row[on_conflict],))
                after = _decoded(table, await cur.fetchone())
        if before is None:
            self._publish(table, INSERT, new=after)
        else:
            self._publish(table, UPDATE, new=after, old=_decoded(table, before))
        return after

    # --- procedures ---

    async def rpc(self, name: str, params: Mapping[str, Any]) -> List[Row]:
        procedure = self._procedures.get(name)
        if procedure is None:
            raise BackendError(f"function {name} does not exist", code=UNDEFINED_FUNCTION)
        with _translated_errors():
            return await procedure(params)

    async def _daily_activity(self, params: Mapping[str, Any]) -> List[Row]:
        """
        One row per calendar day in [start_date, end_date] (both given as ISO
        timestamps) with averaged scores and summed counters.

        Days are calendar days in the backend clock's timezone. Samples are
        stored in UTC, so each one is shifted into that zone before it is
        bucketed.
        """
        try:
            user_id = params["user_id"]
            start = from_iso(params["start_date"])
            end = from_iso(params["end_date"])
            if start.tzinfo is None or end.tzinfo is None:
                raise ValueError("start_date and end_date need an offset")
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise BackendError(f"invalid arguments for get_user_daily_activity: {e}", code=UNDEFINED_FUNCTION) from e

        tz = self._clock.now().tzinfo
        first_day = start.astimezone(tz).date()
        last_day = end.astimezone(tz).date()
        if last_day < first_day:
            return []
        lower = to_utc_iso(datetime.combine(first_day, time.min, tzinfo=tz))
        upper = to_utc_iso(datetime.combine(last_day + timedelta(days=1), time.min, tzinfo=tz))

        async with self._db.connect() as conn:
            cur = await conn.execute(
                f"SELECT timestamp, {', '.join(_SCORES + _COUNTERS)} FROM user_activity "
                "WHERE user_id = ? AND timestamp >= ? AND timestamp < ?;",
                (user_id, lower, upper),
            )
            rows = await cur.fetchall()

        buckets: Dict[date, List[Any]] = {}
        for r in rows:
            buckets.setdefault(from_iso(r["timestamp"]).astimezone(tz).date(), []).append(r)
        days = (first_day + timedelta(days=n) for n in range((last_day - first_day).days + 1))
        return [_summarize(day, buckets.get(day, [])) for day in days]

    # --- helpers ---

    async def _update(self, query: Query, values: Mapping[str, Any], single: bool) -> List[Row]:
        with _translated_errors():
            async with self._db.connect() as conn:
                columns = await self._table_columns(conn, query.table)
                self._check_columns(query.table, columns, values)
                ids = await self._matching_ids(conn, query, columns)
                if single:
                    self._exactly_one(query, ids)
                old_rows = await self._fetch_by_ids(conn, query.table, ids)
                if ids and values:
                    assignments = ", ".join(f"{c} = ?" for c in values)
                    await conn.execute(
                        f"UPDATE {query.table} SET {assignments} WHERE id IN ({', '.join(['?'] * len(ids))});",
                        [*_encoded(query.table, values).values(), *ids],
                    )
                rows = await self._fetch_by_ids(conn, query.table, ids)
        for old, new in zip(old_rows, rows):
            self._publish(query.table, UPDATE, new=new, old=old)
        return rows

    async def _table_columns(self, conn: aiosqlite.Connection, table: str) -> Tuple[str, ...]:
        if table not in TABLES:
            raise BackendError(f"relation {table!r} does not exist", code=UNDEFINED_TABLE)
        cached = self._columns.get(table)
        if cached is None:
            cur = await conn.execute(f"PRAGMA table_info({table});")
            cached = tuple(r[1] for r in await cur.fetchall())
            if not cached:
                raise BackendError(f"relation {table!r} does not exist", code=UNDEFINED_TABLE)
            self._columns[table] = cached
        return cached

    @staticmethod
    def _check_columns(table: str, columns: Sequence[str], names: Any) -> None:
        unknown = [n for n in names if n not in columns]
        if unknown:
            raise BackendError(
                f"column {unknown[0]!r} of relation {table!r} does not exist",
                code=UNDEFINED_COLUMN,
                details={"columns": unknown},
            )

    def _with_defaults(self, columns: Sequence[str], row: Mapping[str, Any]) -> Dict[str, Any]:
        values = dict(row)
        if "id" in columns and not values.get("id"):
            values["id"] = self._ids.new_id()
        now = self._clock.now()
        for name in TIMESTAMP_DEFAULTS:
            if name in columns and values.get(name) is None:
                # activity samples are range-filtered as text, so they stay in UTC
                values[name] = to_utc_iso(now) if name == "timestamp" else to_iso(now)
        return values

    def _where(self, query: Query, columns: Sequence[str]) -> Tuple[str, List[Any]]:
        self._check_columns(query.table, columns, [f.column for f in query.filters])
        parts: List[str] = []
        params: List[Any] = []
        for f in query.filters:
            if f.op == "eq" and f.value is None:
                parts.append(f"{f.column} IS NULL")
                continue
            op = _OPS.get(f.op)
            if op is None:
                raise BackendError(f"unsupported filter operator {f.op!r}")
            parts.append(f"{f.column} {op} ?")
            params.append(f.value)
        if not parts:
            return "", params
        return " WHERE " + " AND ".join(parts), params

    def _order(self, query: Query, columns: Sequence[str]) -> Tuple[str, List[Any]]:
        self._check_columns(query.table, columns, [c for c, _ in query.ordering])
        # NULLs sort last ascending and first descending, as a Postgres backend does
        clauses: List[str] = []
        for c, asc in query.ordering:
            direction = "ASC" if asc else "DESC"
            clauses.append(f"({c} IS NULL) {direction}")
            clauses.append(f"{c} {direction}")
        # insertion order breaks ties between equal sort keys
        first_asc = query.ordering[0][1] if query.ordering else True
        clauses.append(f"rowid {'ASC' if first_asc else 'DESC'}")
        sql = " ORDER BY " + ", ".join(clauses)
        params: List[Any] = []
        if query.limit_to is not None:
            sql += " LIMIT ?"
            params.append(query.limit_to)
        return sql, params

    async def _matching_ids(self, conn: aiosqlite.Connection, query: Query, columns: Sequence[str]) -> List[Any]:
        where, params = self._where(query, columns)
        order, order_params = self._order(query, columns)
        cur = await conn.execute(f"SELECT id FROM {query.table}{where}{order};", [*params, *order_params])
        return [r["id"] for r in await cur.fetchall()]

    @staticmethod
    async def _fetch_by_ids(conn: aiosqlite.Connection, table: str, ids: Sequence[Any]) -> List[Row]:
        if not ids:
            return []
        cur = await conn.execute(
            f"SELECT * FROM {table} WHERE id IN ({', '.join(['?'] * len(ids))});",
            list(ids),
        )
        by_id = {r["id"]: _decoded(table, r) for r in await cur.fetchall()}
        return [by_id[i] for i in ids if i in by_id]

    @staticmethod
    def _exactly_one(query: Query, rows: Sequence[Any]) -> Any:
        if not rows:
            raise NotFoundError(f"no rows in {query.table} matched the request")
        if len(rows) > 1:
            raise BackendError(f"{len(rows)} rows in {query.table} matched a single-row request", code=MULTIPLE_ROWS)
        return rows[0]

    def _publish(self, table: str, event_type: str, new: Optional[Row] = None, old: Optional[Row] = None) -> None:
        if self._hub is None:
            return
        logger.debug("change %s on %s", event_type, table)
        self._hub.publish(ChangeEvent(table=table, event_type=event_type, new=new, old=old))
