from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional

from curiosity.domain.common.models import Level

TaskStatus = Literal["todo", "in-progress", "done"]

TASK_STATUSES: tuple[str, ...] = ("todo", "in-progress", "done")
STATUS_TODO = "todo"
STATUS_DONE = "done"


@dataclass(frozen=True)
class Task:
    id: str
    user_id: str
    title: str
    status: TaskStatus
    priority: Level
    energy_level: Level
    is_quick_win: bool
    created_at: str
    updated_at: str
    description: Optional[str] = None
    estimated_time: Optional[int] = None
    actual_time: Optional[int] = None
    completed_at: Optional[str] = None
    project_id: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == STATUS_DONE


@dataclass(frozen=True)
class CreateTaskData:
    title: str
    priority: Level = "medium"
    energy_level: Level = "medium"
    is_quick_win: bool = False
    description: Optional[str] = None
    estimated_time: Optional[int] = None


@dataclass(frozen=True)
class UpdateTaskData:
    """None means "leave as is"."""

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Level] = None
    energy_level: Optional[Level] = None
    is_quick_win: Optional[bool] = None
    estimated_time: Optional[int] = None
    status: Optional[TaskStatus] = None
    actual_time: Optional[int] = None
    completed_at: Optional[str] = None


@dataclass(frozen=True)
class TaskFilters:
    status: Optional[TaskStatus] = None
    priority: Optional[Level] = None
    energy_level: Optional[Level] = None
    is_quick_win: Optional[bool] = None
    project_id: Optional[str] = None

    def matches(self, task: Task) -> bool:
        """Same predicate TaskService.list applies server-side."""
        checks = (
            (self.status, task.status),
            (self.priority, task.priority),
            (self.energy_level, task.energy_level),
            (self.is_quick_win, task.is_quick_win),
            (self.project_id, task.project_id),
        )
        return all(wanted is None or wanted == actual for wanted, actual in checks)


def task_to_wire(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "user_id": task.user_id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "priority": task.priority,
        "energy_level": task.energy_level,
        "is_quick_win": task.is_quick_win,
        "estimated_time": task.estimated_time,
        "actual_time": task.actual_time,
        "completed_at": task.completed_at,
        "project_id": task.project_id,
        "created_at": task.created_at,
        "updated_at": task.updated_at,
    }


def task_from_wire(row: Mapping[str, Any]) -> Task:
    return Task(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row.get("description"),
        status=row["status"],
        priority=row["priority"],
        energy_level=row["energy_level"],
        is_quick_win=bool(row["is_quick_win"]),
        estimated_time=row.get("estimated_time"),
        actual_time=row.get("actual_time"),
        completed_at=row.get("completed_at"),
        project_id=row.get("project_id"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
