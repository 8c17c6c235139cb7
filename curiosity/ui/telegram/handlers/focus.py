from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from curiosity.container import Services
from curiosity.domain.common.errors import ValidationError
from curiosity.domain.focus.models import FOCUS_MODES, MODE_FOCUS, UpdateFocusSettingsData
from curiosity.ui.telegram.keyboards.focus import focus_kb
from curiosity.ui.telegram.keyboards.mainmenu import BTN_FOCUS
from curiosity.ui.telegram.texts import render_focus
from curiosity.ui.views.focus import FocusView

router = Router()


@router.message(Command("focus"))
@router.message(F.text == BTN_FOCUS)
async def focus_cmd(message: Message, state: FSMContext, services: Services):
    await state.clear()
    view = FocusView(services.focus)
    await view.mount()
    try:
        if view.error:
            await message.answer(view.error)
            return
        await message.answer(render_focus(view.settings, view.streak), reply_markup=focus_kb())
    finally:
        view.unmount()


@router.callback_query(F.data.startswith("focus:done:"))
async def focus_done_cb(cb: CallbackQuery, services: Services):
    mode = (cb.data or "").split(":", 2)[2]
    if mode not in FOCUS_MODES:
        await cb.answer("Unknown session type.", show_alert=True)
        return
    view = FocusView(services.focus)
    await view.mount()
    try:
        session = await view.complete_session(mode)
        if mode == MODE_FOCUS:
            await cb.answer(f"Nice! {session.duration} min of focus. Streak {view.streak.current_streak}.")
        else:
            await cb.answer("Break logged.")
        if cb.message:
            await cb.message.answer(render_focus(view.settings, view.streak), reply_markup=focus_kb())
    finally:
        view.unmount()


@router.message(Command("focus_time"))
async def focus_time_cmd(message: Message, services: Services):
    """/focus_time 30 -> focus sessions last 30 minutes."""
    parts = (message.text or "").split()
    if len(parts) != 2 or not parts[1].isdigit():
        await message.answer("Usage: /focus_time <minutes>")
        return
    try:
        settings = await services.focus.update_settings(UpdateFocusSettingsData(focus_time=int(parts[1])))
    except ValidationError as e:
        await message.answer(str(e))
        return
    await message.answer(f"Focus sessions now last {settings.focus_time} min.")
