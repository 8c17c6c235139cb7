from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class UserActivity:
    id: str
    user_id: str
    timestamp: str
    created_at: str
    updated_at: str
    focus_score: float = 0
    energy_level: float = 0
    productivity_score: float = 0
    tasks_completed: int = 0
    focus_minutes: int = 0
    flow_state_minutes: int = 0


@dataclass(frozen=True)
class RecordActivityData:
    focus_score: Optional[float] = None
    energy_level: Optional[float] = None
    productivity_score: Optional[float] = None
    tasks_completed: Optional[int] = None
    focus_minutes: Optional[int] = None
    flow_state_minutes: Optional[int] = None
    timestamp: Optional[str] = None


UpdateActivityData = RecordActivityData


@dataclass(frozen=True)
class DailyActivitySummary:
    date: str
    avg_focus_score: float = 0
    avg_energy_level: float = 0
    avg_productivity_score: float = 0
    total_tasks_completed: int = 0
    total_focus_minutes: int = 0
    total_flow_state_minutes: int = 0


def activity_to_wire(activity: UserActivity) -> Dict[str, Any]:
    return {
        "id": activity.id,
        "user_id": activity.user_id,
        "timestamp": activity.timestamp,
        "focus_score": activity.focus_score,
        "energy_level": activity.energy_level,
        "productivity_score": activity.productivity_score,
        "tasks_completed": activity.tasks_completed,
        "focus_minutes": activity.focus_minutes,
        "flow_state_minutes": activity.flow_state_minutes,
        "created_at": activity.created_at,
        "updated_at": activity.updated_at,
    }


def activity_from_wire(row: Mapping[str, Any]) -> UserActivity:
    # nullable metric columns read as zero
    return UserActivity(
        id=row["id"],
        user_id=row["user_id"],
        timestamp=row["timestamp"],
        focus_score=row.get("focus_score") or 0,
        energy_level=row.get("energy_level") or 0,
        productivity_score=row.get("productivity_score") or 0,
        tasks_completed=row.get("tasks_completed") or 0,
        focus_minutes=row.get("focus_minutes") or 0,
        flow_state_minutes=row.get("flow_state_minutes") or 0,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def summary_from_wire(row: Mapping[str, Any]) -> DailyActivitySummary:
    return DailyActivitySummary(
        date=row["date"],
        avg_focus_score=row.get("avg_focus_score") or 0,
        avg_energy_level=row.get("avg_energy_level") or 0,
        avg_productivity_score=row.get("avg_productivity_score") or 0,
        total_tasks_completed=row.get("total_tasks_completed") or 0,
        total_focus_minutes=row.get("total_focus_minutes") or 0,
        total_flow_state_minutes=row.get("total_flow_state_minutes") or 0,
    )
