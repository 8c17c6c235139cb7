from __future__ import annotations

import re

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from curiosity.container import Services
from curiosity.domain.calendar.models import CreateCalendarEventData
from curiosity.domain.common.errors import ValidationError
from curiosity.domain.common.ports import Clock
from curiosity.ui.telegram.keyboards.mainmenu import BTN_TODAY
from curiosity.ui.telegram.texts import render_events

router = Router()

_TIME = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


@router.message(Command("today"))
@router.message(F.text == BTN_TODAY)
async def today_cmd(message: Message, state: FSMContext, services: Services, clock: Clock):
    await state.clear()
    today = clock.now().date()
    events = await services.calendar.list_by_date(today)
    await message.answer(render_events(events, today))


@router.message(Command("event"))
async def event_cmd(message: Message, services: Services, clock: Clock):
    """/event [HH:MM] <title> -> appointment today."""
    parts = (message.text or "").split(maxsplit=2)[1:]
    time = None
    if parts and _TIME.match(parts[0]):
        h, m = _TIME.match(parts[0]).groups()
        time = f"{int(h):02d}:{m}"
        parts = parts[1:]
    title = " ".join(parts).strip()
    if not title:
        await message.answer("Usage: /event [HH:MM] <title>")
        return
    today = clock.now().date()
    try:
        event = await services.calendar.create(
            CreateCalendarEventData(
                title=title,
                type="appointment",
                date=today.isoformat(),
                time=time,
                energy_required="medium",
            )
        )
    except ValidationError as e:
        await message.answer(str(e))
        return
    await message.answer(f"Planned: {event.time or 'any time'} {event.title}")
