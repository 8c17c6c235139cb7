from __future__ import annotations

from typing import List, Optional

from curiosity.domain.events.bus import TASK_CREATED, NotificationBus
from curiosity.domain.tasks.models import STATUS_DONE, Task, TaskFilters
from curiosity.domain.tasks.service import TaskService
from curiosity.ui.views.base import View


class TaskBoardView(View):
    error_message = "Unable to load tasks. You can still use the dashboard."

    def __init__(self, tasks: TaskService, bus: NotificationBus, filters: Optional[TaskFilters] = None) -> None:
        super().__init__()
        self._service = tasks
        self._bus = bus
        self._filters = filters
        self.tasks: List[Task] = []

    def _on_mount(self) -> None:
        self._bus.subscribe(TASK_CREATED, self._on_task_created)

    def _on_unmount(self) -> None:
        self._bus.unsubscribe(TASK_CREATED, self._on_task_created)

    async def _load(self) -> List[Task]:
        return await self._service.list(self._filters)

    def _apply(self, result: List[Task]) -> None:
        self.tasks = list(result)

    def _on_task_created(self, task: Task) -> None:
        if self._filters is not None and not self._filters.matches(task):
            return
        if any(t.id == task.id for t in self.tasks):
            return
        self.tasks = [task, *self.tasks]

    @property
    def open_tasks(self) -> List[Task]:
        return [t for t in self.tasks if t.status != STATUS_DONE]

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.status == STATUS_DONE)

    async def complete_task(self, task_id: str) -> Task:
        updated = await self._service.update_status(task_id, STATUS_DONE)
        self._replace(updated)
        return updated

    async def delete_task(self, task_id: str) -> None:
        await self._service.delete(task_id)
        self.tasks = [t for t in self.tasks if t.id != task_id]

    def _replace(self, task: Task) -> None:
        self.tasks = [task if t.id == task.id else t for t in self.tasks]
