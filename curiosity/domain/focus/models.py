from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional

from curiosity.domain.common.models import Level

FocusMode = Literal["focus", "shortBreak", "longBreak"]
Theme = Literal["light", "dark", "nature", "space"]

FOCUS_MODES: tuple[str, ...] = ("focus", "shortBreak", "longBreak")
THEMES: tuple[str, ...] = ("light", "dark", "nature", "space")
MODE_FOCUS = "focus"


@dataclass(frozen=True)
class FocusSession:
    id: str
    user_id: str
    duration: int
    mode: FocusMode
    completed: bool
    created_at: str
    energy_level: Optional[Level] = None


@dataclass(frozen=True)
class CreateFocusSessionData:
    duration: int
    mode: FocusMode
    completed: bool
    energy_level: Optional[Level] = None


@dataclass(frozen=True)
class UpdateFocusSessionData:
    duration: Optional[int] = None
    completed: Optional[bool] = None
    energy_level: Optional[Level] = None


@dataclass(frozen=True)
class FocusSettings:
    focus_time: int = 25
    short_break_time: int = 5
    long_break_time: int = 15
    sessions_until_long_break: int = 4
    sound_enabled: bool = True
    preferred_theme: Theme = "light"
    audio_volume: float = 0.5
    audio_looping: bool = True
    last_ambient_sound: Optional[str] = None


@dataclass(frozen=True)
class UpdateFocusSettingsData:
    focus_time: Optional[int] = None
    short_break_time: Optional[int] = None
    long_break_time: Optional[int] = None
    sessions_until_long_break: Optional[int] = None
    sound_enabled: Optional[bool] = None
    preferred_theme: Optional[Theme] = None
    audio_volume: Optional[float] = None
    audio_looping: Optional[bool] = None
    last_ambient_sound: Optional[str] = None


@dataclass(frozen=True)
class FocusStreak:
    current_streak: int = 0
    longest_streak: int = 0
    last_focus_date: Optional[str] = None  # YYYY-MM-DD


def session_to_wire(session: FocusSession) -> Dict[str, Any]:
    return {
        "id": session.id,
        "user_id": session.user_id,
        "duration": session.duration,
        "mode": session.mode,
        "completed": session.completed,
        "energy_level": session.energy_level,
        "created_at": session.created_at,
    }


def session_from_wire(row: Mapping[str, Any]) -> FocusSession:
    return FocusSession(
        id=row["id"],
        user_id=row["user_id"],
        duration=row["duration"],
        mode=row["mode"],
        completed=bool(row["completed"]),
        energy_level=row.get("energy_level"),
        created_at=row["created_at"],
    )


def settings_to_wire(settings: FocusSettings) -> Dict[str, Any]:
    return {
        "focus_time": settings.focus_time,
        "short_break_time": settings.short_break_time,
        "long_break_time": settings.long_break_time,
        "sessions_until_long_break": settings.sessions_until_long_break,
        "sound_enabled": settings.sound_enabled,
        "preferred_theme": settings.preferred_theme,
        "audio_volume": settings.audio_volume,
        "audio_looping": settings.audio_looping,
        "last_ambient_sound": settings.last_ambient_sound,
    }


def settings_from_wire(row: Mapping[str, Any]) -> FocusSettings:
    return FocusSettings(
        focus_time=row["focus_time"],
        short_break_time=row["short_break_time"],
        long_break_time=row["long_break_time"],
        sessions_until_long_break=row["sessions_until_long_break"],
        sound_enabled=bool(row["sound_enabled"]),
        preferred_theme=row["preferred_theme"],
        audio_volume=row["audio_volume"],
        audio_looping=bool(row["audio_looping"]),
        last_ambient_sound=row.get("last_ambient_sound"),
    )


def streak_to_wire(streak: FocusStreak) -> Dict[str, Any]:
    return {
        "current_streak": streak.current_streak,
        "longest_streak": streak.longest_streak,
        "last_focus_date": streak.last_focus_date,
    }


def streak_from_wire(row: Mapping[str, Any]) -> FocusStreak:
    return FocusStreak(
        current_streak=row["current_streak"] or 0,
        longest_streak=row["longest_streak"] or 0,
        last_focus_date=row.get("last_focus_date"),
    )
