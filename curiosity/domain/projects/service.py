# -*- coding: utf-8 -*-
"""Projects and the task -> project link (tasks.project_id)."""
from __future__ import annotations

from typing import List

from curiosity.domain.common.ports import Backend, Clock, IdGenerator, SessionProvider
from curiosity.domain.common.query import Query
from curiosity.domain.common.rules import validate_required_text
from curiosity.domain.common.service import EntityService, sparse
from curiosity.domain.projects.models import (
    PROJECT_COLORS,
    CreateProjectData,
    Project,
    ProjectColor,
    UpdateProjectData,
    project_from_wire,
)


class ProjectService(EntityService):
    table = "projects"

    def __init__(self, backend: Backend, sessions: SessionProvider, clock: Clock, ids: IdGenerator) -> None:
        super().__init__(backend, sessions, clock)
        self._ids = ids

    async def list(self) -> List[Project]:
        session = await self._require_session("fetch projects")
        # tasks are never joined here, see list_task_ids
        rows = await self._select(
            "fetching projects",
            self._owned(session).order("created_at", ascending=False),
        )
        return [project_from_wire(r) for r in rows]

    async def get(self, project_id: str, with_task_ids: bool = False) -> Project:
        session = await self._require_session("fetch a project")
        row = await self._select_single("fetching project", self._owned(session, project_id))
        task_ids: List[str] = []
        if with_task_ids:
            task_ids = await self._task_ids(session.user_id, project_id)
        return project_from_wire(row, task_ids)

    async def create(self, data: CreateProjectData) -> Project:
        session = await self._require_session("create a project")
        validate_required_text("Project name", data.name, max_len=200)
        validate_required_text("Project color", data.color, max_len=32)

        now = self._now_iso()
        row = await self._insert_row(
            "creating project",
            {
                "id": self._ids.new_id(),
                "user_id": session.user_id,
                "name": data.name.strip(),
                "description": data.description or "",
                "color": data.color,
                "created_at": now,
                "updated_at": now,
            },
        )
        return project_from_wire(row)

    async def update(self, project_id: str, data: UpdateProjectData) -> Project:
        session = await self._require_session("update a project")
        if data.name is not None:
            validate_required_text("Project name", data.name, max_len=200)
        values = sparse({"name": data.name, "description": data.description, "color": data.color})
        row = await self._update_owned("updating project", session, project_id, values)
        return project_from_wire(row)

    async def delete(self, project_id: str) -> None:
        session = await self._require_session("delete a project")
        await self._delete_owned("deleting project", session, project_id)

    async def add_task(self, project_id: str, task_id: str) -> None:
        session = await self._require_session("add a task to a project")
        # the project must belong to the caller too, not just the task
        await self._select_single("fetching project", self._owned(session, project_id))
        await self._guard(
            "adding task to project",
            self._backend.update_single(
                self._owned(session, task_id, table="tasks"),
                {"project_id": project_id, "updated_at": self._now_iso()},
            ),
        )

    async def remove_task(self, task_id: str) -> None:
        session = await self._require_session("remove a task from a project")
        await self._guard(
            "removing task from project",
            self._backend.update_single(
                self._owned(session, task_id, table="tasks"),
                {"project_id": None, "updated_at": self._now_iso()},
            ),
        )

    async def list_task_ids(self, project_id: str) -> List[str]:
        session = await self._require_session("fetch project tasks")
        return await self._task_ids(session.user_id, project_id)

    async def _task_ids(self, user_id: str, project_id: str) -> List[str]:
        rows = await self._select(
            "fetching project tasks",
            Query("tasks")
            .eq("user_id", user_id)
            .eq("project_id", project_id)
            .order("created_at", ascending=False),
        )
        return [r["id"] for r in rows]

    @staticmethod
    def project_colors() -> tuple[ProjectColor, ...]:
        return PROJECT_COLORS
