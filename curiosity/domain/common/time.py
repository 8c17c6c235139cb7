from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def to_iso(dt: datetime) -> str:
    ensure_aware(dt)
    # store as ISO 8601 with offset
    return dt.isoformat()


def to_utc_iso(dt: datetime) -> str:
    """Instant as a +00:00 string; these compare and sort correctly as text."""
    return to_iso(ensure_aware(dt).astimezone(timezone.utc))


def from_iso(s: str) -> datetime:
    # fromisoformat only learned the Z suffix in 3.11
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


def day_iso(d: date) -> str:
    return d.isoformat()


def yesterday_of(d: date) -> date:
    return d - timedelta(days=1)
