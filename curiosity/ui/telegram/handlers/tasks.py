from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from curiosity.container import Services
from curiosity.domain.common.errors import DomainError, NotFoundError
from curiosity.domain.events.bus import NotificationBus
from curiosity.domain.tasks.models import STATUS_TODO, TaskFilters
from curiosity.ui.telegram.keyboards.mainmenu import BTN_ADD_TASK, BTN_TASKS, main_menu_kb
from curiosity.ui.telegram.keyboards.tasks import CB_DELETE, CB_DONE, tasks_list_kb
from curiosity.ui.telegram.states.tasks import TasksFlow
from curiosity.ui.telegram.texts import parse_quick_add, render_tasks
from curiosity.ui.views.layout import DashboardLayout
from curiosity.ui.views.task_board import TaskBoardView

logger = logging.getLogger(__name__)

router = Router()


def _command_args(message: Message) -> str:
    text = (message.text or "").strip()
    parts = text.split(maxsplit=1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()


async def _send_task_list(message: Message, services: Services, bus: NotificationBus, prefer_edit: bool = False) -> None:
    board = TaskBoardView(services.tasks, bus, TaskFilters(status=STATUS_TODO))
    await board.mount()
    try:
        if board.error:
            await message.answer(board.error, reply_markup=main_menu_kb())
            return
        text = render_tasks(board.tasks)
        markup = tasks_list_kb(board.tasks) if board.tasks else None
        if prefer_edit:
            try:
                await message.edit_text(text, reply_markup=markup)
                return
            except TelegramBadRequest:
                # old or unchanged message, send a fresh one instead
                logger.debug("Could not edit task list message", exc_info=True)
        await message.answer(text, reply_markup=markup)
    finally:
        board.unmount()


async def _create_from_text(message: Message, services: Services, bus: NotificationBus, text: str) -> None:
    layout = DashboardLayout(services.tasks, bus)
    try:
        task = await layout.create_task(parse_quick_add(text))
    except DomainError as e:
        await message.answer(f"Could not add task: {e}", reply_markup=main_menu_kb())
        return
    await message.answer(f"Added: {task.title}", reply_markup=main_menu_kb())
    await _send_task_list(message, services, bus)


@router.message(Command("tasks"))
@router.message(F.text == BTN_TASKS)
async def tasks_cmd(message: Message, state: FSMContext, services: Services, bus: NotificationBus):
    await state.clear()
    await _send_task_list(message, services, bus)


@router.message(Command("add"))
async def add_cmd(message: Message, state: FSMContext, services: Services, bus: NotificationBus):
    args = _command_args(message)
    if not args:
        await state.set_state(TasksFlow.add_title)
        await message.answer("Write the task (e.g. 'Review proposal !high ~low 30m #quick').")
        return
    await state.clear()
    await _create_from_text(message, services, bus, args)


@router.message(F.text == BTN_ADD_TASK)
async def add_button(message: Message, state: FSMContext):
    await state.set_state(TasksFlow.add_title)
    await message.answer("Write the task (e.g. 'Review proposal !high ~low 30m #quick').")


@router.message(TasksFlow.add_title)
async def add_title_msg(message: Message, state: FSMContext, services: Services, bus: NotificationBus):
    await state.clear()
    await _create_from_text(message, services, bus, message.text or "")


@router.callback_query(F.data.startswith(f"{CB_DONE}:"))
async def task_done_cb(cb: CallbackQuery, services: Services, bus: NotificationBus):
    task_id = (cb.data or "").split(":", 2)[2]
    try:
        task = await services.tasks.update_status(task_id, "done")
    except NotFoundError:
        await cb.answer("Task not found.", show_alert=True)
        return
    await cb.answer(f"Done: {task.title}")
    if cb.message:
        await _send_task_list(cb.message, services, bus, prefer_edit=True)


@router.callback_query(F.data.startswith(f"{CB_DELETE}:"))
async def task_delete_cb(cb: CallbackQuery, services: Services, bus: NotificationBus):
    task_id = (cb.data or "").split(":", 2)[2]
    await services.tasks.delete(task_id)
    await cb.answer("Deleted.")
    if cb.message:
        await _send_task_list(cb.message, services, bus, prefer_edit=True)
