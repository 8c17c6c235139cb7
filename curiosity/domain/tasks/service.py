# -*- coding: utf-8 -*-
"""Tasks: owner-scoped CRUD plus the status helpers the dashboard uses."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from curiosity.domain.common.errors import ValidationError
from curiosity.domain.common.models import LEVELS, Level
from curiosity.domain.common.rules import validate_choice, validate_non_negative, validate_required_text
from curiosity.domain.common.service import EntityService, sparse
from curiosity.domain.tasks.models import (
    STATUS_DONE,
    STATUS_TODO,
    TASK_STATUSES,
    CreateTaskData,
    Task,
    TaskFilters,
    TaskStatus,
    UpdateTaskData,
    task_from_wire,
)


class TaskService(EntityService):
    table = "tasks"

    async def create(self, data: CreateTaskData) -> Task:
        session = await self._require_session("create a task")
        validate_required_text("Title", data.title)
        validate_choice("priority", data.priority, LEVELS)
        validate_choice("energy_level", data.energy_level, LEVELS)
        validate_non_negative("estimated_time", data.estimated_time)

        row = await self._insert_row(
            "creating task",
            {
                "user_id": session.user_id,
                "title": data.title.strip(),
                "description": data.description,
                "energy_level": data.energy_level,
                "estimated_time": data.estimated_time,
                "priority": data.priority,
                "is_quick_win": data.is_quick_win,
                "status": STATUS_TODO,
                "completed_at": None,
            },
        )
        return task_from_wire(row)

    async def get(self, task_id: str) -> Task:
        session = await self._require_session("fetch a task")
        row = await self._select_single("fetching task", self._owned(session, task_id))
        return task_from_wire(row)

    async def update(self, task_id: str, data: UpdateTaskData) -> Task:
        session = await self._require_session("update a task")
        if data.title is not None:
            validate_required_text("Title", data.title)
        validate_choice("status", data.status, TASK_STATUSES)
        validate_choice("priority", data.priority, LEVELS)
        validate_choice("energy_level", data.energy_level, LEVELS)
        validate_non_negative("estimated_time", data.estimated_time)
        validate_non_negative("actual_time", data.actual_time)

        values: Dict[str, Any] = sparse(
            {
                "title": data.title.strip() if data.title is not None else None,
                "description": data.description,
                "energy_level": data.energy_level,
                "estimated_time": data.estimated_time,
                "priority": data.priority,
                "is_quick_win": data.is_quick_win,
                "status": data.status,
                "actual_time": data.actual_time,
                "completed_at": data.completed_at,
            }
        )
        if data.completed_at is not None and data.status != STATUS_DONE:
            if data.status is not None:
                raise ValidationError("completed_at can only be set on a done task.")
            current = await self._select_single("fetching task", self._owned(session, task_id))
            if current["status"] != STATUS_DONE:
                raise ValidationError("completed_at can only be set on a done task.")

        # completed_at follows status: stamped on done, cleared otherwise
        if data.status == STATUS_DONE and data.completed_at is None:
            values["completed_at"] = self._now_iso()
        elif data.status is not None and data.status != STATUS_DONE:
            values["completed_at"] = None

        row = await self._update_owned("updating task", session, task_id, values)
        return task_from_wire(row)

    async def update_status(self, task_id: str, status: TaskStatus) -> Task:
        return await self.update(task_id, UpdateTaskData(status=status))

    async def list(self, filters: Optional[TaskFilters] = None) -> List[Task]:
        session = await self._require_session("fetch tasks")
        query = self._owned(session)
        if filters is not None:
            if filters.status is not None:
                query = query.eq("status", filters.status)
            if filters.energy_level is not None:
                query = query.eq("energy_level", filters.energy_level)
            if filters.priority is not None:
                query = query.eq("priority", filters.priority)
            if filters.is_quick_win is not None:
                query = query.eq("is_quick_win", filters.is_quick_win)
            if filters.project_id is not None:
                query = query.eq("project_id", filters.project_id)
        rows = await self._select("fetching tasks", query.order("created_at", ascending=False))
        return [task_from_wire(r) for r in rows]

    async def delete(self, task_id: str) -> None:
        session = await self._require_session("delete a task")
        await self._delete_owned("deleting task", session, task_id)

    async def list_quick_wins(self) -> List[Task]:
        return await self.list(TaskFilters(is_quick_win=True, status=STATUS_TODO))

    async def list_by_energy_level(self, energy_level: Level) -> List[Task]:
        validate_choice("energy_level", energy_level, LEVELS)
        return await self.list(TaskFilters(energy_level=energy_level, status=STATUS_TODO))
