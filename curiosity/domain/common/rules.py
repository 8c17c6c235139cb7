from __future__ import annotations

from typing import Iterable, Optional

from curiosity.domain.common.errors import ValidationError


def validate_required_text(field: str, value: Optional[str], max_len: int = 500) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required.")
    if len(value.strip()) > max_len:
        raise ValidationError(f"{field} is too long (max {max_len} chars).")


def validate_choice(field: str, value: Optional[str], choices: Iterable[str]) -> None:
    if value is None:
        return
    allowed = tuple(choices)
    if value not in allowed:
        raise ValidationError(f"{field} must be one of {', '.join(allowed)} (got {value!r}).")


def validate_non_negative(field: str, value: Optional[float]) -> None:
    if value is not None and value < 0:
        raise ValidationError(f"{field} cannot be negative.")
