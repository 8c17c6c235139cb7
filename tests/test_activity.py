"""
Activity samples and the daily aggregation procedure.

Run with: python -m pytest tests/test_activity.py -v
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from curiosity.domain.activity.models import RecordActivityData, UpdateActivityData
from curiosity.domain.common.errors import BackendError, ValidationError
from curiosity.domain.common.time import from_iso, to_iso

from helpers import HELSINKI_SUMMER, Stack, run_with_stack


def test_empty_week_gives_seven_zeroed_days():
    async def run(stack: Stack):
        end = datetime(2024, 6, 10, 12, 0, tzinfo=HELSINKI_SUMMER)
        start = end - timedelta(days=6)
        days = await stack.services.activity.get_daily_activity(start, end)

        assert [d.date for d in days] == [
            "2024-06-04",
            "2024-06-05",
            "2024-06-06",
            "2024-06-07",
            "2024-06-08",
            "2024-06-09",
            "2024-06-10",
        ]
        for d in days:
            assert d.total_focus_minutes == 0
            assert d.total_tasks_completed == 0
            assert d.total_flow_state_minutes == 0
            assert d.avg_energy_level == 0

    asyncio.run(run_with_stack(run))


def test_daily_activity_averages_scores_and_sums_counters():
    async def run(stack: Stack):
        activity = stack.services.activity
        day = datetime(2024, 6, 9, 10, 0, tzinfo=HELSINKI_SUMMER)
        await activity.create(
            RecordActivityData(timestamp=to_iso(day), energy_level=80, focus_minutes=30, tasks_completed=2)
        )
        await activity.create(
            RecordActivityData(
                timestamp=to_iso(day + timedelta(hours=5)),
                energy_level=40,
                focus_minutes=15,
                tasks_completed=1,
                flow_state_minutes=10,
            )
        )
        # someone else's activity never leaks into the totals
        await stack.services_for("user-2").activity.create(
            RecordActivityData(timestamp=to_iso(day), focus_minutes=999)
        )

        days = await activity.get_daily_activity(day - timedelta(days=1), day + timedelta(days=1))
        assert [d.date for d in days] == ["2024-06-08", "2024-06-09", "2024-06-10"]
        busy = days[1]
        assert busy.total_focus_minutes == 45
        assert busy.total_tasks_completed == 3
        assert busy.total_flow_state_minutes == 10
        assert busy.avg_energy_level == pytest.approx(60)
        assert days[0].total_focus_minutes == 0
        assert days[2].total_focus_minutes == 0

    asyncio.run(run_with_stack(run))


def test_daily_activity_rejects_reversed_window():
    async def run(stack: Stack):
        now = stack.clock.now()
        with pytest.raises(ValidationError):
            await stack.services.activity.get_daily_activity(now, now - timedelta(days=1))

    asyncio.run(run_with_stack(run))


def test_unknown_procedure_is_a_backend_error():
    async def run(stack: Stack):
        with pytest.raises(BackendError) as info:
            await stack.backend.rpc("no_such_function", {})
        assert info.value.code == "undefined_function"

    asyncio.run(run_with_stack(run))


def test_missing_metrics_read_back_as_zero():
    async def run(stack: Stack):
        activity = stack.services.activity
        sample = await activity.record_activity(RecordActivityData(focus_score=7.5))
        assert await activity.list() == [sample]
        assert from_iso(sample.timestamp) == stack.clock.now()
        assert sample.timestamp.endswith("+00:00")
        assert sample.focus_score == 7.5
        assert sample.focus_minutes == 0
        assert sample.tasks_completed == 0
        assert sample.energy_level == 0

        updated = await activity.update(sample.id, UpdateActivityData(tasks_completed=4))
        assert updated.tasks_completed == 4
        assert updated.focus_score == 7.5

    asyncio.run(run_with_stack(run))


def test_current_activity_is_latest_sample_or_none():
    async def run(stack: Stack):
        activity = stack.services.activity
        assert await activity.get_current() is None

        base = stack.clock.now()
        await activity.create(RecordActivityData(timestamp=to_iso(base), focus_minutes=1))
        await activity.create(RecordActivityData(timestamp=to_iso(base + timedelta(hours=2)), focus_minutes=2))
        await activity.create(RecordActivityData(timestamp=to_iso(base + timedelta(hours=1)), focus_minutes=3))

        current = await activity.get_current()
        assert current is not None
        assert current.focus_minutes == 2

        window = await activity.list(base + timedelta(minutes=30), base + timedelta(hours=3))
        assert sorted(a.focus_minutes for a in window) == [2, 3]

        await activity.delete(current.id)
        assert (await activity.get_current()).focus_minutes == 3

    asyncio.run(run_with_stack(run))


def test_negative_counters_are_rejected():
    async def run(stack: Stack):
        with pytest.raises(ValidationError):
            await stack.services.activity.create(RecordActivityData(focus_minutes=-1))

    asyncio.run(run_with_stack(run))


def test_samples_are_bucketed_by_local_day_not_their_own_offset():
    async def run(stack: Stack):
        activity = stack.services.activity
        # 01:30 on 2024-06-10 in the clock's zone
        await activity.create(RecordActivityData(timestamp="2024-06-09T22:30:00+00:00", focus_minutes=20))
        # 23:30 on 2024-06-09 local, written with a different offset
        await activity.create(RecordActivityData(timestamp="2024-06-09T22:30:00+02:00", focus_minutes=5))

        start = datetime(2024, 6, 9, 12, 0, tzinfo=HELSINKI_SUMMER)
        days = await activity.get_daily_activity(start, start + timedelta(days=1))
        assert [(d.date, d.total_focus_minutes) for d in days] == [("2024-06-09", 5), ("2024-06-10", 20)]

    asyncio.run(run_with_stack(run))


def test_list_window_compares_instants_across_offsets():
    async def run(stack: Stack):
        activity = stack.services.activity
        # 05:00Z and 07:00Z
        await activity.create(RecordActivityData(timestamp="2024-06-10T08:00:00+03:00", focus_minutes=1))
        await activity.create(RecordActivityData(timestamp="2024-06-10T07:00:00Z", focus_minutes=2))

        window = await activity.list(start=datetime(2024, 6, 10, 6, 0, tzinfo=timezone.utc))
        assert [a.focus_minutes for a in window] == [2]
        assert window[0].timestamp == "2024-06-10T07:00:00+00:00"

        earlier = await activity.list(end=datetime(2024, 6, 10, 8, 30, tzinfo=HELSINKI_SUMMER))
        assert [a.focus_minutes for a in earlier] == [1]

    asyncio.run(run_with_stack(run))


def test_timestamps_without_offset_or_unparseable_are_rejected():
    async def run(stack: Stack):
        activity = stack.services.activity
        with pytest.raises(ValidationError):
            await activity.create(RecordActivityData(timestamp="2024-06-10T08:00:00"))
        with pytest.raises(ValidationError):
            await activity.create(RecordActivityData(timestamp="yesterday"))
        sample = await activity.create(RecordActivityData(focus_minutes=1))
        with pytest.raises(ValidationError):
            await activity.update(sample.id, UpdateActivityData(timestamp="not a time"))
        assert await activity.list() == [sample]

    asyncio.run(run_with_stack(run))
