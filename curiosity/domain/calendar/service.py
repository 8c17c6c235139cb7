# -*- coding: utf-8 -*-
"""Calendar events, ordered by day then time of day."""
from __future__ import annotations

from datetime import date
from typing import List

from curiosity.domain.calendar.models import (
    EVENT_TYPES,
    CalendarEvent,
    CreateCalendarEventData,
    UpdateCalendarEventData,
    event_from_wire,
)
from curiosity.domain.common.errors import ValidationError
from curiosity.domain.common.models import LEVELS, Level
from curiosity.domain.common.rules import validate_choice, validate_non_negative, validate_required_text
from curiosity.domain.common.service import EntityService, sparse


def _validate_day(value: str) -> None:
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"date must be YYYY-MM-DD (got {value!r}).") from None


class CalendarService(EntityService):
    table = "calendar_events"

    async def create(self, data: CreateCalendarEventData) -> CalendarEvent:
        session = await self._require_session("create an event")
        validate_required_text("Title", data.title)
        validate_choice("type", data.type, EVENT_TYPES)
        validate_choice("energy_required", data.energy_required, LEVELS)
        validate_non_negative("duration", data.duration)
        _validate_day(data.date)

        row = await self._insert_row(
            "creating calendar event",
            {
                "user_id": session.user_id,
                "title": data.title.strip(),
                "type": data.type,
                "date": data.date,
                "time": data.time,
                "energy_required": data.energy_required,
                "is_completed": bool(data.is_completed),
                "is_urgent": bool(data.is_urgent),
                "duration": data.duration,
                "description": data.description,
            },
        )
        return event_from_wire(row)

    async def list(self, start_date: date, end_date: date) -> List[CalendarEvent]:
        """Events with start_date <= date <= end_date."""
        session = await self._require_session("fetch events")
        query = (
            self._owned(session)
            .gte("date", start_date.isoformat())
            .lte("date", end_date.isoformat())
            .order("date")
            .order("time")
        )
        rows = await self._select("fetching calendar events", query)
        return [event_from_wire(r) for r in rows]

    async def list_by_date(self, day: date) -> List[CalendarEvent]:
        session = await self._require_session("fetch events")
        query = self._owned(session).eq("date", day.isoformat()).order("time")
        rows = await self._select("fetching calendar events", query)
        return [event_from_wire(r) for r in rows]

    async def update(self, event_id: str, data: UpdateCalendarEventData) -> CalendarEvent:
        session = await self._require_session("update an event")
        if data.title is not None:
            validate_required_text("Title", data.title)
        validate_choice("type", data.type, EVENT_TYPES)
        validate_choice("energy_required", data.energy_required, LEVELS)
        validate_non_negative("duration", data.duration)
        if data.date is not None:
            _validate_day(data.date)

        values = sparse(
            {
                "title": data.title,
                "type": data.type,
                "date": data.date,
                "time": data.time,
                "energy_required": data.energy_required,
                "is_completed": data.is_completed,
                "is_urgent": data.is_urgent,
                "duration": data.duration,
                "description": data.description,
            }
        )
        row = await self._update_owned("updating calendar event", session, event_id, values)
        return event_from_wire(row)

    async def delete(self, event_id: str) -> None:
        session = await self._require_session("delete an event")
        await self._delete_owned("deleting calendar event", session, event_id)

    async def toggle_completion(self, event_id: str) -> CalendarEvent:
        session = await self._require_session("update an event")
        current = await self._select_single("fetching calendar event", self._owned(session, event_id))
        row = await self._update_owned(
            "toggling event completion",
            session,
            event_id,
            {"is_completed": not bool(current["is_completed"])},
        )
        return event_from_wire(row)

    async def list_by_energy_level(self, energy_level: Level) -> List[CalendarEvent]:
        """Open events from today onwards that need the given energy."""
        session = await self._require_session("fetch events")
        validate_choice("energy_required", energy_level, LEVELS)
        today = self._clock.now().date()
        query = (
            self._owned(session)
            .eq("energy_required", energy_level)
            .eq("is_completed", False)
            .gte("date", today.isoformat())
            .order("date")
        )
        rows = await self._select("fetching calendar events by energy level", query)
        return [event_from_wire(r) for r in rows]
