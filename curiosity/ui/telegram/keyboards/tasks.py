from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from curiosity.domain.tasks.models import Task

CB_DONE = "task:done"
CB_DELETE = "task:del"


def tasks_list_kb(tasks: Sequence[Task]) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for task in tasks:
        title = task.title if len(task.title) <= 40 else task.title[:39] + "…"
        kb.button(text=f"✅ {title}", callback_data=f"{CB_DONE}:{task.id}")
        kb.button(text="🗑️", callback_data=f"{CB_DELETE}:{task.id}")
    kb.adjust(2)
    return kb.as_markup()
