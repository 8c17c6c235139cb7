from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

CB_FOCUS_DONE = "focus:done:focus"
CB_SHORT_BREAK_DONE = "focus:done:shortBreak"
CB_LONG_BREAK_DONE = "focus:done:longBreak"


def focus_kb() -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="Focus session done", callback_data=CB_FOCUS_DONE)
    kb.button(text="Short break done", callback_data=CB_SHORT_BREAK_DONE)
    kb.button(text="Long break done", callback_data=CB_LONG_BREAK_DONE)
    kb.adjust(1, 2)
    return kb.as_markup()
