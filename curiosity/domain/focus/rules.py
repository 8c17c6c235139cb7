from __future__ import annotations

from datetime import date
from typing import Optional

from curiosity.domain.common.errors import ValidationError
from curiosity.domain.common.time import day_iso, yesterday_of
from curiosity.domain.focus.models import FocusStreak


def advance_streak(existing: Optional[FocusStreak], today: date) -> FocusStreak:
    """
    Streak after a completed focus session on `today`.

    Same day: unchanged, so a broken streak cannot be repaired by a second
    session that day. Consecutive day: +1. Any gap: back to 1.
    """
    today_s = day_iso(today)
    if existing is None:
        return FocusStreak(current_streak=1, longest_streak=1, last_focus_date=today_s)

    if existing.last_focus_date == today_s:
        return existing

    if existing.last_focus_date == day_iso(yesterday_of(today)):
        current = existing.current_streak + 1
        return FocusStreak(
            current_streak=current,
            longest_streak=max(existing.longest_streak, current),
            last_focus_date=today_s,
        )

    return FocusStreak(current_streak=1, longest_streak=existing.longest_streak, last_focus_date=today_s)


def validate_minutes(field: str, value: Optional[int], upper: int = 24 * 60) -> None:
    if value is None:
        return
    if value <= 0:
        raise ValidationError(f"{field} must be positive.")
    if value > upper:
        raise ValidationError(f"{field} is unrealistically large.")


def validate_volume(value: Optional[float]) -> None:
    if value is not None and not 0 <= value <= 1:
        raise ValidationError("audio_volume must be between 0 and 1.")
