from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from curiosity.ui.telegram.keyboards.mainmenu import main_menu_kb

router = Router()

CANCEL_WORDS = {"cancel", "stop"}


async def go_to_main_menu(message: Message, state: FSMContext) -> None:
    await state.clear()
    await message.answer("Cancelled.", reply_markup=main_menu_kb())


@router.message(Command("cancel"))
async def cancel_cmd(message: Message, state: FSMContext):
    await go_to_main_menu(message, state)


@router.message(F.text.casefold().in_(CANCEL_WORDS))
async def cancel_text(message: Message, state: FSMContext):
    await go_to_main_menu(message, state)


@router.callback_query(F.data == "cancel")
async def cancel_cb(cb: CallbackQuery, state: FSMContext):
    await cb.answer()
    await state.clear()
    if cb.message:
        await cb.message.answer("Cancelled.", reply_markup=main_menu_kb())
