from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

Level = Literal["low", "medium", "high"]

LEVELS: tuple[str, ...] = ("low", "medium", "high")


@dataclass(frozen=True)
class Session:
    user_id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Result:
    """Outcome object for call sites that report failures instead of raising."""

    success: bool
    error: Optional[str] = None
