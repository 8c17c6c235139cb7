"""
Row <-> model mapping and the Telegram text helpers (pure, no DB).

Run with: python -m pytest tests/test_wire_and_texts.py -v
"""
from __future__ import annotations

from datetime import date

from curiosity.domain.activity.models import (
    DailyActivitySummary,
    UserActivity,
    activity_from_wire,
    activity_to_wire,
    summary_from_wire,
)
from curiosity.domain.calendar.models import CalendarEvent, event_from_wire, event_to_wire
from curiosity.domain.common.errors import BackendError, NotFoundError
from curiosity.domain.common.query import Query
from curiosity.domain.focus.models import (
    FocusSession,
    FocusSettings,
    FocusStreak,
    session_from_wire,
    session_to_wire,
    settings_from_wire,
    settings_to_wire,
    streak_from_wire,
    streak_to_wire,
)
from curiosity.domain.profiles.models import Profile, profile_from_wire, profile_to_wire
from curiosity.domain.projects.models import Project, project_from_wire, project_to_wire
from curiosity.domain.tasks.models import Task, task_from_wire, task_to_wire
from curiosity.ui.telegram.texts import parse_quick_add, render_activity, render_events, render_focus, render_tasks


def _task(**overrides) -> Task:
    fields = dict(
        id="t1",
        user_id="u1",
        title="Write report",
        status="todo",
        priority="high",
        energy_level="low",
        is_quick_win=True,
        created_at="2024-06-10T09:00:00+03:00",
        updated_at="2024-06-10T09:00:00+03:00",
        estimated_time=30,
    )
    fields.update(overrides)
    return Task(**fields)


# ----- wire mapping -----


def test_task_row_uses_integer_flags_from_storage():
    row = task_to_wire(_task())
    row["is_quick_win"] = 1
    task = task_from_wire(row)
    assert task.is_quick_win is True
    assert task == _task()


def test_task_to_wire_has_every_column():
    row = task_to_wire(_task(project_id="p1"))
    assert row["project_id"] == "p1"
    assert row["completed_at"] is None
    assert set(row) >= {"id", "user_id", "title", "status", "priority", "energy_level", "created_at", "updated_at"}


def test_project_task_ids_are_derived_not_stored():
    project = Project(
        id="p1",
        user_id="u1",
        name="Thesis",
        color="#e01e5a",
        created_at="2024-06-10",
        updated_at="2024-06-10",
        task_ids=("t1",),
    )
    row = project_to_wire(project)
    assert "task_ids" not in row
    assert project_from_wire(row, ["t1"]) == project
    assert project_from_wire({**row, "description": None}).description == ""


def test_event_flags_round_trip_through_integers():
    event = CalendarEvent(
        id="e1",
        user_id="u1",
        title="Standup",
        type="appointment",
        date="2024-06-10",
        energy_required="medium",
        is_completed=False,
        is_urgent=True,
        created_at="x",
        updated_at="x",
        time="09:15",
    )
    row = event_to_wire(event)
    row["is_urgent"] = 1
    row["is_completed"] = 0
    assert event_from_wire(row) == event


def test_activity_nulls_become_zero():
    activity = activity_from_wire(
        {
            "id": "a1",
            "user_id": "u1",
            "timestamp": "2024-06-10T09:00:00+03:00",
            "focus_score": None,
            "energy_level": 55.0,
            "productivity_score": None,
            "tasks_completed": None,
            "focus_minutes": 20,
            "flow_state_minutes": None,
            "created_at": "x",
            "updated_at": "x",
        }
    )
    assert activity.focus_score == 0
    assert activity.tasks_completed == 0
    assert activity.energy_level == 55.0
    assert activity.focus_minutes == 20


def test_summary_from_wire_reads_aggregates():
    summary = summary_from_wire(
        {
            "date": "2024-06-10",
            "avg_focus_score": 3.5,
            "avg_energy_level": 60,
            "avg_productivity_score": 0,
            "total_tasks_completed": 4,
            "total_focus_minutes": 90,
            "total_flow_state_minutes": 15,
        }
    )
    assert summary == DailyActivitySummary(
        date="2024-06-10",
        avg_focus_score=3.5,
        avg_energy_level=60,
        total_tasks_completed=4,
        total_focus_minutes=90,
        total_flow_state_minutes=15,
    )


def test_settings_row_converts_flags():
    row = settings_to_wire(FocusSettings(sound_enabled=False))
    row["sound_enabled"] = 0
    row["audio_looping"] = 1
    assert settings_from_wire(row) == FocusSettings(sound_enabled=False)


def test_every_model_survives_its_own_wire_format():
    activity = UserActivity(
        id="a1",
        user_id="u1",
        timestamp="2024-06-10T06:00:00+00:00",
        created_at="2024-06-10T09:00:00+03:00",
        updated_at="2024-06-10T09:05:00+03:00",
        focus_score=7.5,
        energy_level=40,
        productivity_score=3.25,
        tasks_completed=2,
        focus_minutes=50,
        flow_state_minutes=15,
    )
    assert activity_from_wire(activity_to_wire(activity)) == activity

    for session in (
        FocusSession(id="f1", user_id="u1", duration=25, mode="focus", completed=True, created_at="x", energy_level="low"),
        FocusSession(id="f2", user_id="u1", duration=5, mode="shortBreak", completed=False, created_at="x"),
    ):
        assert session_from_wire(session_to_wire(session)) == session

    settings = FocusSettings(
        focus_time=50,
        short_break_time=10,
        long_break_time=30,
        sessions_until_long_break=3,
        sound_enabled=False,
        preferred_theme="space",
        audio_volume=0.8,
        audio_looping=False,
        last_ambient_sound="rain",
    )
    assert settings_from_wire(settings_to_wire(settings)) == settings

    for streak in (FocusStreak(), FocusStreak(3, 9, "2024-06-10")):
        assert streak_from_wire(streak_to_wire(streak)) == streak

    full = Profile(id="u1", first_name="Ada", last_name="L", email="a@x.io", avatar_url="https://x.io/a.png")
    for profile in (Profile(id="u1"), full):
        assert profile_from_wire(profile_to_wire(profile)) == profile

    task = _task(
        description="draft",
        actual_time=45,
        status="done",
        completed_at="2024-06-10T10:00:00+03:00",
        project_id="p1",
    )
    assert task_from_wire(task_to_wire(task)) == task

    project = Project(id="p1", user_id="u1", name="Thesis", color="#e01e5a", created_at="x", updated_at="y", description="big")
    assert project_from_wire(project_to_wire(project)) == project

    event = CalendarEvent(
        id="e1",
        user_id="u1",
        title="Deep work",
        type="task",
        date="2024-06-10",
        energy_required="high",
        is_completed=True,
        is_urgent=False,
        created_at="x",
        updated_at="y",
        time="14:00",
        duration=90,
        description="no meetings",
    )
    assert event_from_wire(event_to_wire(event)) == event


# ----- query + errors -----


def test_query_builder_returns_new_queries():
    base = Query("tasks").eq("user_id", "u1")
    ordered = base.order("created_at", ascending=False).limit(5)
    assert base.ordering == ()
    assert base.limit_to is None
    assert ordered.ordering == (("created_at", False),)
    assert ordered.limit_to == 5
    assert [f.column for f in ordered.filters] == ["user_id"]


def test_backend_error_renders_code_and_message():
    assert str(BackendError("duplicate key", code="constraint_violation")) == "[constraint_violation] duplicate key"
    assert str(BackendError("plain")) == "plain"
    missing = NotFoundError("no rows")
    assert missing.code == "row_not_found"
    assert missing.message == "no rows"


# ----- texts -----


def test_parse_quick_add_tokens():
    data = parse_quick_add("Write report !high ~low 30m #quick")
    assert data.title == "Write report"
    assert data.priority == "high"
    assert data.energy_level == "low"
    assert data.estimated_time == 30
    assert data.is_quick_win is True


def test_parse_quick_add_defaults_and_unknown_tokens():
    data = parse_quick_add("Call mom !urgent")
    assert data.title == "Call mom !urgent"
    assert data.priority == "medium"
    assert data.energy_level == "medium"
    assert data.estimated_time is None
    assert data.is_quick_win is False


def test_render_tasks_empty_and_filled():
    assert "No open tasks" in render_tasks([])
    text = render_tasks([_task()])
    assert "1." in text
    assert "Write report" in text
    assert "30 min" in text
    assert "quick win" in text


def test_render_focus_pluralizes_days():
    assert "1 day" in render_focus(FocusSettings(), FocusStreak(1, 4, "2024-06-10"))
    assert "3 days (best 4)" in render_focus(FocusSettings(), FocusStreak(3, 4, "2024-06-10"))


def test_render_activity_totals():
    days = [
        DailyActivitySummary(date="2024-06-09", total_focus_minutes=30, total_tasks_completed=1),
        DailyActivitySummary(date="2024-06-10", total_focus_minutes=15, total_tasks_completed=2),
    ]
    text = render_activity(days, "week")
    assert text.startswith("Activity this week:")
    assert "Total: 45 focus min, 3 tasks" in text


def test_render_events_marks_and_times():
    day = date(2024, 6, 10)
    assert render_events([], day) == "Nothing planned for 2024-06-10."
    event = CalendarEvent(
        id="e1",
        user_id="u1",
        title="Gym",
        type="break",
        date="2024-06-10",
        energy_required="high",
        is_completed=False,
        is_urgent=False,
        created_at="x",
        updated_at="x",
        duration=45,
    )
    text = render_events([event], day)
    assert "any time Gym" in text
    assert "(45 min)" in text
