from __future__ import annotations

import logging
from typing import Optional

from curiosity.domain.events.bus import TASK_CREATED, NotificationBus
from curiosity.domain.tasks.models import CreateTaskData, Task
from curiosity.domain.tasks.service import TaskService

logger = logging.getLogger(__name__)


class DashboardLayout:
    """Dashboard shell. Its quick-add creates a task and tells sibling views about it."""

    def __init__(self, tasks: TaskService, bus: NotificationBus) -> None:
        self._tasks = tasks
        self._bus = bus
        self.recently_created_task: Optional[Task] = None

    async def create_task(self, data: CreateTaskData) -> Task:
        task = await self._tasks.create(data)
        self.recently_created_task = task
        delivered = self._bus.notify(TASK_CREATED, task)
        logger.info("Task %s created, notified %d listener(s)", task.id, delivered)
        return task
