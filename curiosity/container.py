# -*- coding: utf-8 -*-
"""Per-session bundle of entity services."""
from __future__ import annotations

from dataclasses import dataclass

from curiosity.domain.activity.service import ActivityService
from curiosity.domain.calendar.service import CalendarService
from curiosity.domain.common.ports import Backend, Clock, IdGenerator, SessionProvider
from curiosity.domain.focus.service import FocusService
from curiosity.domain.mindmaps.service import MindMapService
from curiosity.domain.profiles.service import ProfileService
from curiosity.domain.projects.service import ProjectService
from curiosity.domain.tasks.service import TaskService


@dataclass(frozen=True)
class Services:
    tasks: TaskService
    projects: ProjectService
    calendar: CalendarService
    activity: ActivityService
    focus: FocusService
    profiles: ProfileService
    mindmaps: MindMapService


def build_services(backend: Backend, sessions: SessionProvider, clock: Clock, ids: IdGenerator) -> Services:
    return Services(
        tasks=TaskService(backend, sessions, clock),
        projects=ProjectService(backend, sessions, clock, ids),
        calendar=CalendarService(backend, sessions, clock),
        activity=ActivityService(backend, sessions, clock),
        focus=FocusService(backend, sessions, clock),
        profiles=ProfileService(backend, sessions, clock),
        mindmaps=MindMapService(backend, sessions, clock),
    )
