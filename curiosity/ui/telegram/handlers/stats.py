from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from curiosity.container import Services
from curiosity.domain.activity.models import RecordActivityData
from curiosity.domain.common.errors import ValidationError
from curiosity.domain.common.ports import Clock
from curiosity.infra.realtime.hub import RealtimeHub
from curiosity.ui.telegram.keyboards.mainmenu import BTN_STATS
from curiosity.ui.telegram.texts import render_activity
from curiosity.ui.views.activity_chart import TIMEFRAME_DAYS, ActivityChartView

router = Router()


def _timeframe(message: Message) -> str:
    parts = (message.text or "").split()
    if len(parts) >= 2 and parts[1].lower() in TIMEFRAME_DAYS:
        return parts[1].lower()
    return "week"


@router.message(Command("stats"))
@router.message(F.text == BTN_STATS)
async def stats_cmd(message: Message, state: FSMContext, services: Services, hub: RealtimeHub, clock: Clock):
    await state.clear()
    timeframe = _timeframe(message)
    chart = ActivityChartView(services.activity, hub, clock, timeframe=timeframe)
    await chart.mount()
    try:
        if chart.error:
            await message.answer(chart.error)
            return
        await message.answer(render_activity(chart.days, timeframe))
    finally:
        chart.unmount()


@router.message(Command("log"))
async def log_cmd(message: Message, services: Services):
    """/log <focus_minutes> <tasks_completed> [energy 0-100] [flow_minutes]"""
    parts = (message.text or "").split()[1:]
    if not parts or not all(p.isdigit() for p in parts) or len(parts) > 4:
        await message.answer("Usage: /log <focus_minutes> <tasks_completed> [energy 0-100] [flow_minutes]")
        return
    numbers = [int(p) for p in parts] + [None] * (4 - len(parts))
    focus_minutes, tasks_completed, energy, flow = numbers
    try:
        activity = await services.activity.create(
            RecordActivityData(
                focus_minutes=focus_minutes,
                tasks_completed=tasks_completed,
                energy_level=energy,
                flow_state_minutes=flow,
            )
        )
    except ValidationError as e:
        await message.answer(str(e))
        return
    await message.answer(
        f"Logged {activity.focus_minutes} focus min and {activity.tasks_completed} task(s)."
    )
