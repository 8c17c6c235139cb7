"""
SQLite backend edge cases, migrations and env-based settings.

Run with: python -m pytest tests/test_backend_and_config.py -v
"""
from __future__ import annotations

import asyncio
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from curiosity.config import load_settings
from curiosity.domain.common.errors import BackendError, NotFoundError
from curiosity.domain.common.query import Query
from curiosity.domain.common.time import to_iso
from curiosity.infra.db.schema_version import apply_migrations

from helpers import Stack, run_with_stack


def test_migrations_apply_once():
    async def run(stack: Stack):
        # run_with_stack already applied everything
        assert await apply_migrations(stack.db, now_iso=to_iso(stack.clock.now())) == []
        rows = await stack.db.fetchall("SELECT version FROM schema_migrations;")
        assert [r["version"] for r in rows] == [1, 2]

    asyncio.run(run_with_stack(run))


def test_unknown_table_and_column_are_reported():
    async def run(stack: Stack):
        with pytest.raises(BackendError) as info:
            await stack.backend.select(Query("secrets"))
        assert info.value.code == "undefined_table"

        with pytest.raises(BackendError) as info:
            await stack.backend.insert("tasks", {"user_id": "u", "title": "x", "mood": "great"})
        assert info.value.code == "undefined_column"
        assert info.value.details == {"columns": ["mood"]}

    asyncio.run(run_with_stack(run))


def test_check_constraints_surface_as_backend_errors():
    async def run(stack: Stack):
        with pytest.raises(BackendError) as info:
            await stack.backend.insert("tasks", {"user_id": "u", "title": "x", "status": "archived"})
        assert info.value.code == "constraint_violation"
        assert await stack.backend.select(Query("tasks")) == []

    asyncio.run(run_with_stack(run))


def test_single_row_requests_need_exactly_one_match():
    async def run(stack: Stack):
        await stack.backend.insert("tasks", {"user_id": "u", "title": "a"})
        await stack.backend.insert("tasks", {"user_id": "u", "title": "b"})

        with pytest.raises(NotFoundError):
            await stack.backend.select_single(Query("tasks").eq("user_id", "nobody"))

        with pytest.raises(BackendError) as info:
            await stack.backend.update_single(Query("tasks").eq("user_id", "u"), {"title": "same"})
        assert info.value.code == "multiple_rows"
        titles = sorted(r["title"] for r in await stack.backend.select(Query("tasks")))
        assert titles == ["a", "b"]

        updated = await stack.backend.update(Query("tasks").eq("user_id", "u"), {"priority": "low"})
        assert [r["priority"] for r in updated] == ["low", "low"]
        assert await stack.backend.delete(Query("tasks").eq("user_id", "u")) == 2

    asyncio.run(run_with_stack(run))


def test_eq_none_matches_null_and_limit_applies():
    async def run(stack: Stack):
        for title in ("a", "b", "c"):
            await stack.backend.insert("tasks", {"user_id": "u", "title": title})
        unlinked = await stack.backend.select(Query("tasks").eq("project_id", None).order("title").limit(2))
        assert [r["title"] for r in unlinked] == ["a", "b"]

    asyncio.run(run_with_stack(run))


# ----- settings -----


def test_load_settings_reads_env_with_defaults():
    env = {"BOT_TOKEN": "123:abc", "OWNER_TELEGRAM_ID": "42"}
    with patch("curiosity.config.load_dotenv"), patch.dict(os.environ, env, clear=True):
        settings = load_settings()
    assert settings.bot_token == "123:abc"
    assert settings.owner_telegram_id == 42
    assert settings.timezone == "Europe/Helsinki"
    assert settings.db_path == Path("data/curiosity.db")
    assert settings.log_level == "INFO"


def test_load_settings_requires_token_and_owner():
    with patch("curiosity.config.load_dotenv"), patch.dict(os.environ, {"OWNER_TELEGRAM_ID": "42"}, clear=True):
        with pytest.raises(RuntimeError):
            load_settings()
    with patch("curiosity.config.load_dotenv"), patch.dict(os.environ, {"BOT_TOKEN": "t", "OWNER_TELEGRAM_ID": "me"}, clear=True):
        with pytest.raises(RuntimeError):
            load_settings()


def test_nulls_sort_last_ascending_and_first_descending():
    async def run(stack: Stack):
        for title, time in (("noon", "12:00"), ("open", None), ("dawn", "05:00")):
            await stack.backend.insert(
                "calendar_events",
                {
                    "user_id": "u",
                    "title": title,
                    "type": "task",
                    "date": "2024-06-10",
                    "energy_required": "low",
                    "time": time,
                },
            )
        ascending = await stack.backend.select(Query("calendar_events").order("time"))
        assert [r["title"] for r in ascending] == ["dawn", "noon", "open"]

        descending = await stack.backend.select(Query("calendar_events").order("time", ascending=False))
        assert [r["title"] for r in descending] == ["open", "noon", "dawn"]

        first = await stack.backend.select(Query("calendar_events").order("time").limit(1))
        assert [r["title"] for r in first] == ["dawn"]

    asyncio.run(run_with_stack(run))


def test_default_activity_timestamp_is_utc():
    async def run(stack: Stack):
        row = await stack.backend.insert("user_activity", {"user_id": "u", "focus_minutes": 5})
        assert row["timestamp"] == "2024-06-10T06:00:00+00:00"
        # other timestamps keep the clock's own offset
        assert row["created_at"] == to_iso(stack.clock.now())

    asyncio.run(run_with_stack(run))
