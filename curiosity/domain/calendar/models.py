from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional

from curiosity.domain.common.models import Level

EventType = Literal["task", "appointment", "reminder", "break"]

EVENT_TYPES: tuple[str, ...] = ("task", "appointment", "reminder", "break")


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    user_id: str
    title: str
    type: EventType
    date: str  # YYYY-MM-DD
    energy_required: Level
    is_completed: bool
    is_urgent: bool
    created_at: str
    updated_at: str
    time: Optional[str] = None  # HH:MM
    duration: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CreateCalendarEventData:
    title: str
    type: EventType
    date: str
    energy_required: Level
    time: Optional[str] = None
    is_completed: bool = False
    is_urgent: bool = False
    duration: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class UpdateCalendarEventData:
    title: Optional[str] = None
    type: Optional[EventType] = None
    date: Optional[str] = None
    time: Optional[str] = None
    energy_required: Optional[Level] = None
    is_completed: Optional[bool] = None
    is_urgent: Optional[bool] = None
    duration: Optional[int] = None
    description: Optional[str] = None


def event_to_wire(event: CalendarEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "title": event.title,
        "type": event.type,
        "date": event.date,
        "time": event.time,
        "energy_required": event.energy_required,
        "is_completed": event.is_completed,
        "is_urgent": event.is_urgent,
        "duration": event.duration,
        "description": event.description,
        "created_at": event.created_at,
        "updated_at": event.updated_at,
    }


def event_from_wire(row: Mapping[str, Any]) -> CalendarEvent:
    return CalendarEvent(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        type=row["type"],
        date=row["date"],
        time=row.get("time"),
        energy_required=row["energy_required"],
        is_completed=bool(row.get("is_completed")),
        is_urgent=bool(row.get("is_urgent")),
        duration=row.get("duration"),
        description=row.get("description"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
