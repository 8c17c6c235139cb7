from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from curiosity.container import Services
from curiosity.domain.profiles.models import UpdateProfileData
from curiosity.ui.telegram.keyboards.mainmenu import main_menu_kb

router = Router()


async def send_mainmenu(message: Message, services: Services) -> None:
    profile = await services.profiles.get_profile()
    await message.answer(f"Hi {profile.full_name}! Pick an action.", reply_markup=main_menu_kb())


@router.message(CommandStart())
async def start_cmd(message: Message, state: FSMContext, services: Services):
    await state.clear()
    user = message.from_user
    if user is not None and user.first_name:
        # first contact seeds the profile from Telegram
        profile = await services.profiles.get_profile()
        if profile.first_name is None:
            result = await services.profiles.update_profile(
                UpdateProfileData(first_name=user.first_name, last_name=user.last_name)
            )
            if not result.success:
                await message.answer(f"Could not save your profile: {result.error}")
    await send_mainmenu(message, services)


@router.message(Command("menu"))
async def menu_cmd(message: Message, state: FSMContext, services: Services):
    await state.clear()
    await send_mainmenu(message, services)
