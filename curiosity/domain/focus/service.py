# -*- coding: utf-8 -*-
"""Focus sessions, per-user focus settings and the focus streak."""
from __future__ import annotations

import logging
from typing import List, Optional

from curiosity.domain.common.errors import NotFoundError
from curiosity.domain.common.models import LEVELS, Session
from curiosity.domain.common.rules import validate_choice
from curiosity.domain.common.service import EntityService, sparse
from curiosity.domain.focus.models import (
    FOCUS_MODES,
    MODE_FOCUS,
    THEMES,
    CreateFocusSessionData,
    FocusSession,
    FocusSettings,
    FocusStreak,
    UpdateFocusSessionData,
    UpdateFocusSettingsData,
    session_from_wire,
    settings_from_wire,
    streak_from_wire,
    streak_to_wire,
)
from curiosity.domain.focus.rules import advance_streak, validate_minutes, validate_volume

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "focus_settings"
STREAKS_TABLE = "focus_streaks"


class FocusService(EntityService):
    table = "focus_sessions"

    # --- sessions ---

    async def create_session(self, data: CreateFocusSessionData) -> FocusSession:
        session = await self._require_session("save a focus session")
        validate_choice("mode", data.mode, FOCUS_MODES)
        validate_choice("energy_level", data.energy_level, LEVELS)
        validate_minutes("duration", data.duration)

        row = await self._insert_row(
            "creating focus session",
            {
                "user_id": session.user_id,
                "duration": data.duration,
                "mode": data.mode,
                "completed": bool(data.completed),
                "energy_level": data.energy_level,
            },
        )
        if data.mode == MODE_FOCUS and data.completed:
            await self._advance_streak(session)
        return session_from_wire(row)

    async def list_sessions(self, limit: int = 10) -> List[FocusSession]:
        session = await self._require_session("fetch focus sessions")
        query = self._owned(session).order("created_at", ascending=False).limit(limit)
        rows = await self._select("fetching focus sessions", query)
        return [session_from_wire(r) for r in rows]

    async def update_session(self, session_id: str, data: UpdateFocusSessionData) -> FocusSession:
        session = await self._require_session("update a focus session")
        validate_minutes("duration", data.duration)
        validate_choice("energy_level", data.energy_level, LEVELS)
        values = sparse(
            {"duration": data.duration, "completed": data.completed, "energy_level": data.energy_level}
        )
        # focus_sessions has no updated_at column
        row = await self._guard(
            "updating focus session",
            self._backend.update_single(self._owned(session, session_id), values),
        )
        return session_from_wire(row)

    async def delete_session(self, session_id: str) -> None:
        session = await self._require_session("delete a focus session")
        await self._delete_owned("deleting focus session", session, session_id)

    # --- settings ---

    async def get_settings(self) -> FocusSettings:
        session = await self._require_session("fetch focus settings")
        try:
            row = await self._select_single("fetching focus settings", self._owned(session, table=SETTINGS_TABLE))
        except NotFoundError:
            return FocusSettings()
        return settings_from_wire(row)

    async def update_settings(self, data: UpdateFocusSettingsData) -> FocusSettings:
        session = await self._require_session("save settings")
        for field in ("focus_time", "short_break_time", "long_break_time"):
            validate_minutes(field, getattr(data, field))
        validate_minutes("sessions_until_long_break", data.sessions_until_long_break, upper=100)
        validate_choice("preferred_theme", data.preferred_theme, THEMES)
        validate_volume(data.audio_volume)

        values = sparse(
            {
                "focus_time": data.focus_time,
                "short_break_time": data.short_break_time,
                "long_break_time": data.long_break_time,
                "sessions_until_long_break": data.sessions_until_long_break,
                "sound_enabled": data.sound_enabled,
                "preferred_theme": data.preferred_theme,
                "audio_volume": data.audio_volume,
                "audio_looping": data.audio_looping,
                "last_ambient_sound": data.last_ambient_sound,
            }
        )
        query = self._owned(session, table=SETTINGS_TABLE)
        existing = await self._select("fetching existing settings", query)
        if existing:
            logger.info("Updating focus settings for user %s", session.user_id)
            values["updated_at"] = self._now_iso()
            row = await self._guard("updating focus settings", self._backend.update_single(query, values))
        else:
            logger.info("Creating focus settings for user %s", session.user_id)
            values["user_id"] = session.user_id
            row = await self._guard("creating focus settings", self._backend.insert(SETTINGS_TABLE, values))
        return settings_from_wire(row)

    async def update_audio_settings(
        self,
        sound_enabled: Optional[bool] = None,
        audio_volume: Optional[float] = None,
        audio_looping: Optional[bool] = None,
        last_ambient_sound: Optional[str] = None,
    ) -> FocusSettings:
        return await self.update_settings(
            UpdateFocusSettingsData(
                sound_enabled=sound_enabled,
                audio_volume=audio_volume,
                audio_looping=audio_looping,
                last_ambient_sound=last_ambient_sound,
            )
        )

    # --- streak ---

    async def get_streak(self) -> FocusStreak:
        session = await self._require_session("fetch the focus streak")
        try:
            row = await self._select_single("fetching focus streak", self._owned(session, table=STREAKS_TABLE))
        except NotFoundError:
            return FocusStreak()
        return streak_from_wire(row)

    async def record_focus_day(self) -> FocusStreak:
        session = await self._require_session("update the focus streak")
        return await self._advance_streak(session)

    async def _advance_streak(self, session: Session) -> FocusStreak:
        query = self._owned(session, table=STREAKS_TABLE)
        try:
            existing: Optional[FocusStreak] = streak_from_wire(
                await self._select_single("fetching focus streak", query)
            )
        except NotFoundError:
            existing = None

        streak = advance_streak(existing, self._clock.now().date())
        if existing is None:
            values = streak_to_wire(streak)
            values["user_id"] = session.user_id
            await self._guard("creating focus streak", self._backend.insert(STREAKS_TABLE, values))
        elif streak != existing:
            values = streak_to_wire(streak)
            values["updated_at"] = self._now_iso()
            await self._guard("updating focus streak", self._backend.update_single(query, values))
        return streak
