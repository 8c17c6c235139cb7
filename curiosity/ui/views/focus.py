from __future__ import annotations

from typing import Optional, Tuple

from curiosity.domain.common.models import Level
from curiosity.domain.focus.models import (
    MODE_FOCUS,
    CreateFocusSessionData,
    FocusMode,
    FocusSession,
    FocusSettings,
    FocusStreak,
)
from curiosity.domain.focus.service import FocusService
from curiosity.ui.views.base import View


class FocusView(View):
    error_message = "Failed to load focus settings. Please try again."

    def __init__(self, focus: FocusService) -> None:
        super().__init__()
        self._service = focus
        self.settings = FocusSettings()
        self.streak = FocusStreak()

    async def _load(self) -> Tuple[FocusSettings, FocusStreak]:
        settings = await self._service.get_settings()
        streak = await self._service.get_streak()
        return settings, streak

    def _apply(self, result: Tuple[FocusSettings, FocusStreak]) -> None:
        self.settings, self.streak = result

    def duration_for(self, mode: FocusMode) -> int:
        if mode == MODE_FOCUS:
            return self.settings.focus_time
        if mode == "shortBreak":
            return self.settings.short_break_time
        return self.settings.long_break_time

    async def complete_session(self, mode: FocusMode = MODE_FOCUS, energy_level: Optional[Level] = None) -> FocusSession:
        session = await self._service.create_session(
            CreateFocusSessionData(
                duration=self.duration_for(mode),
                mode=mode,
                completed=True,
                energy_level=energy_level,
            )
        )
        if mode == MODE_FOCUS:
            streak = await self._service.get_streak()
            if self.is_mounted:
                self.streak = streak
        return session
