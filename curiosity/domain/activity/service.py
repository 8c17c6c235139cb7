# -*- coding: utf-8 -*-
"""User activity samples and the server-side daily aggregation."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from curiosity.domain.activity.models import (
    DailyActivitySummary,
    RecordActivityData,
    UpdateActivityData,
    UserActivity,
    activity_from_wire,
    summary_from_wire,
)
from curiosity.domain.common.errors import NotFoundError, ValidationError
from curiosity.domain.common.rules import validate_non_negative
from curiosity.domain.common.service import EntityService, sparse
from curiosity.domain.common.time import ensure_aware, from_iso, to_iso, to_utc_iso

DAILY_ACTIVITY_RPC = "get_user_daily_activity"


def _validate_metrics(data: RecordActivityData) -> None:
    for field in ("tasks_completed", "focus_minutes", "flow_state_minutes"):
        validate_non_negative(field, getattr(data, field))


def _normalized_timestamp(value: Optional[str]) -> Optional[str]:
    """
    Sample timestamps are stored in UTC so range filters and ordering can
    compare them as text whatever offset the caller wrote them with.
    """
    if value is None:
        return None
    try:
        parsed = from_iso(value)
    except (AttributeError, TypeError, ValueError):
        raise ValidationError(f"timestamp must be ISO 8601 (got {value!r}).") from None
    if parsed.tzinfo is None:
        raise ValidationError(f"timestamp needs a UTC offset (got {value!r}).")
    return to_utc_iso(parsed)


class ActivityService(EntityService):
    table = "user_activity"

    async def create(self, data: RecordActivityData) -> UserActivity:
        session = await self._require_session("record activity")
        _validate_metrics(data)
        row = await self._insert_row(
            "recording activity",
            sparse(
                {
                    "user_id": session.user_id,
                    "timestamp": _normalized_timestamp(data.timestamp) or to_utc_iso(self._clock.now()),
                    "focus_score": data.focus_score,
                    "energy_level": data.energy_level,
                    "productivity_score": data.productivity_score,
                    "tasks_completed": data.tasks_completed,
                    "focus_minutes": data.focus_minutes,
                    "flow_state_minutes": data.flow_state_minutes,
                }
            ),
        )
        return activity_from_wire(row)

    record_activity = create

    async def list(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[UserActivity]:
        session = await self._require_session("fetch activity")
        query = self._owned(session)
        if start is not None:
            query = query.gte("timestamp", to_utc_iso(start))
        if end is not None:
            query = query.lte("timestamp", to_utc_iso(end))
        rows = await self._select("fetching activity", query.order("created_at", ascending=False))
        return [activity_from_wire(r) for r in rows]

    async def update(self, activity_id: str, data: UpdateActivityData) -> UserActivity:
        session = await self._require_session("update activity")
        _validate_metrics(data)
        values = sparse(
            {
                "timestamp": _normalized_timestamp(data.timestamp),
                "focus_score": data.focus_score,
                "energy_level": data.energy_level,
                "productivity_score": data.productivity_score,
                "tasks_completed": data.tasks_completed,
                "focus_minutes": data.focus_minutes,
                "flow_state_minutes": data.flow_state_minutes,
            }
        )
        row = await self._update_owned("updating activity", session, activity_id, values)
        return activity_from_wire(row)

    async def delete(self, activity_id: str) -> None:
        session = await self._require_session("delete activity")
        await self._delete_owned("deleting activity", session, activity_id)

    async def get_current(self) -> Optional[UserActivity]:
        """Latest sample, or None when nothing was recorded yet."""
        session = await self._require_session("fetch activity")
        query = self._owned(session).order("timestamp", ascending=False).limit(1)
        try:
            row = await self._select_single("fetching current activity", query)
        except NotFoundError:
            return None
        return activity_from_wire(row)

    async def get_daily_activity(self, start: datetime, end: datetime) -> List[DailyActivitySummary]:
        """
        One summary per local calendar day, from the day holding start to the
        day holding end, both inclusive. Averages and sums are computed by the backend procedure;
        days without samples come back zeroed.
        """
        session = await self._require_session("fetch activity data")
        ensure_aware(start)
        ensure_aware(end)
        if end < start:
            raise ValidationError("end must not be before start.")
        rows = await self._guard(
            "fetching daily activity",
            self._backend.rpc(
                DAILY_ACTIVITY_RPC,
                {"user_id": session.user_id, "start_date": to_iso(start), "end_date": to_iso(end)},
            ),
        )
        return [summary_from_wire(r) for r in rows]
