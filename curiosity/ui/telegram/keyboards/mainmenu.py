from __future__ import annotations

from aiogram.types import ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

BTN_TASKS = "Tasks"
BTN_ADD_TASK = "Add task"
BTN_FOCUS = "Focus"
BTN_STATS = "Stats"
BTN_TODAY = "Today"


def main_menu_kb() -> ReplyKeyboardMarkup:
    kb = ReplyKeyboardBuilder()

    kb.button(text=BTN_TASKS)
    kb.button(text=BTN_ADD_TASK)
    kb.button(text=BTN_FOCUS)
    kb.button(text=BTN_STATS)
    kb.button(text=BTN_TODAY)

    kb.adjust(2, 2, 1)

    return kb.as_markup(resize_keyboard=True, one_time_keyboard=False)
