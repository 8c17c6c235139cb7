# -*- coding: utf-8 -*-
"""Plain-text rendering and quick-add parsing for the Telegram front end."""
from __future__ import annotations

import re
from datetime import date
from typing import Sequence

from curiosity.domain.activity.models import DailyActivitySummary
from curiosity.domain.calendar.models import CalendarEvent
from curiosity.domain.focus.models import FocusSettings, FocusStreak
from curiosity.domain.tasks.models import CreateTaskData, Task

_PRIORITY_TOKEN = re.compile(r"^!(low|medium|high)$", re.IGNORECASE)
_ENERGY_TOKEN = re.compile(r"^~(low|medium|high)$", re.IGNORECASE)
_ESTIMATE_TOKEN = re.compile(r"^(\d{1,4})m$", re.IGNORECASE)
QUICK_TOKENS = {"#quick", "#quickwin"}

PRIORITY_MARK = {"high": "🔴", "medium": "🟡", "low": "🟢"}


def parse_quick_add(text: str) -> CreateTaskData:
    """
    "Write report !high ~low 30m #quick" -> title "Write report", priority high,
    energy low, 30 min estimate, quick win. Unknown tokens stay in the title.
    """
    priority = "medium"
    energy = "medium"
    estimate = None
    quick = False
    words = []
    for token in (text or "").split():
        prio = _PRIORITY_TOKEN.match(token)
        level = _ENERGY_TOKEN.match(token)
        minutes = _ESTIMATE_TOKEN.match(token)
        if prio:
            priority = prio.group(1).lower()
        elif level:
            energy = level.group(1).lower()
        elif minutes:
            estimate = int(minutes.group(1))
        elif token.lower() in QUICK_TOKENS:
            quick = True
        else:
            words.append(token)
    return CreateTaskData(
        title=" ".join(words),
        priority=priority,
        energy_level=energy,
        is_quick_win=quick,
        estimated_time=estimate,
    )


def render_tasks(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "No open tasks. Add one with /add."
    lines = ["Open tasks:"]
    for i, task in enumerate(tasks, start=1):
        extras = [f"energy {task.energy_level}"]
        if task.estimated_time:
            extras.append(f"{task.estimated_time} min")
        if task.is_quick_win:
            extras.append("quick win")
        lines.append(f"{i}. {PRIORITY_MARK.get(task.priority, '')} {task.title} ({', '.join(extras)})")
    return "\n".join(lines)


def render_focus(settings: FocusSettings, streak: FocusStreak) -> str:
    days = "day" if streak.current_streak == 1 else "days"
    return "\n".join(
        [
            "Focus",
            f"Focus {settings.focus_time} min · short break {settings.short_break_time} min · "
            f"long break {settings.long_break_time} min",
            f"Long break after {settings.sessions_until_long_break} sessions",
            f"Streak: {streak.current_streak} {days} (best {streak.longest_streak})",
        ]
    )


def render_activity(days: Sequence[DailyActivitySummary], timeframe: str) -> str:
    if not days:
        return f"No activity for this {timeframe}."
    lines = [f"Activity this {timeframe}:"]
    for d in days:
        lines.append(
            f"{d.date}: focus {d.total_focus_minutes} min, flow {d.total_flow_state_minutes} min, "
            f"tasks {d.total_tasks_completed}, energy {d.avg_energy_level:.0f}"
        )
    lines.append(
        f"Total: {sum(d.total_focus_minutes for d in days)} focus min, "
        f"{sum(d.total_tasks_completed for d in days)} tasks"
    )
    return "\n".join(lines)


def render_events(events: Sequence[CalendarEvent], day: date) -> str:
    if not events:
        return f"Nothing planned for {day.isoformat()}."
    lines = [f"Plan for {day.isoformat()}:"]
    for e in events:
        mark = "✅" if e.is_completed else ("❗" if e.is_urgent else "•")
        when = e.time or "any time"
        suffix = f" ({e.duration} min)" if e.duration else ""
        lines.append(f"{mark} {when} {e.title} [{e.type}, {e.energy_required} energy]{suffix}")
    return "\n".join(lines)
