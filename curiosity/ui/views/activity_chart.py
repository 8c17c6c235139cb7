from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from curiosity.domain.activity.models import DailyActivitySummary
from curiosity.domain.activity.service import ActivityService
from curiosity.domain.common.ports import Clock
from curiosity.infra.realtime.hub import Channel, ChangeEvent, RealtimeHub
from curiosity.ui.views.base import View

TIMEFRAME_DAYS = {"day": 1, "week": 7, "month": 30}
ACTIVITY_CHANNEL = "activity_changes"
ACTIVITY_TABLE = "user_activity"


class ActivityChartView(View):
    """Daily activity for a timeframe; any change on user_activity reloads the whole window."""

    error_message = "Failed to load activity data. Please try again."

    def __init__(self, activity: ActivityService, hub: RealtimeHub, clock: Clock, timeframe: str = "week") -> None:
        super().__init__()
        if timeframe not in TIMEFRAME_DAYS:
            raise ValueError(f"Unknown timeframe {timeframe!r}")
        self._service = activity
        self._hub = hub
        self._clock = clock
        self.timeframe = timeframe
        self.days: List[DailyActivitySummary] = []
        self.load_count = 0
        self._channel: Optional[Channel] = None

    def _on_mount(self) -> None:
        self._channel = self._hub.channel(ACTIVITY_CHANNEL).on(ACTIVITY_TABLE, self._on_change).subscribe()

    def _on_unmount(self) -> None:
        if self._channel is not None:
            self._hub.remove_channel(self._channel)
            self._channel = None

    async def _on_change(self, change: ChangeEvent) -> None:
        if self.is_mounted:
            await self.reload()

    def window(self) -> tuple[datetime, datetime]:
        now = self._clock.now()
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start = start_of_today - timedelta(days=TIMEFRAME_DAYS[self.timeframe] - 1)
        return start, now

    async def _load(self) -> List[DailyActivitySummary]:
        start, end = self.window()
        return await self._service.get_daily_activity(start, end)

    def _apply(self, result: List[DailyActivitySummary]) -> None:
        self.days = list(result)
        self.load_count += 1

    @property
    def total_focus_minutes(self) -> int:
        return sum(d.total_focus_minutes for d in self.days)

    @property
    def total_tasks_completed(self) -> int:
        return sum(d.total_tasks_completed for d in self.days)

    @property
    def total_flow_state_minutes(self) -> int:
        return sum(d.total_flow_state_minutes for d in self.days)
