from __future__ import annotations

import logging
from typing import Any, Awaitable

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from panelcore.models import ControllerState
from panelcore.poller import StatusPoller
from panelcore.service import PanelController

from .keyboards import (
    BTN_CREATE,
    BTN_HELP,
    BTN_LOGIN,
    BTN_LOGOUT,
    BTN_RAM,
    BTN_STATUS,
    ram_kb,
    ram_label,
)
from .states import InputState

router = Router()
logger = logging.getLogger(__name__)

HELP_TEXT = (
    "👋 Panel creator bot.\n\n"
    "Commands:\n"
    "• /login — log in with an access token\n"
    "• /create — create a panel\n"
    "• /ram — choose the RAM size\n"
    "• /status — backend status\n"
    "• /logout — end the session\n"
    "• /cancel — cancel the current input\n"
)

# ========= helpers =========


async def _run(msg: Message, action: Awaitable[Any]) -> None:
    try:
        await action
    except Exception as e:
        logger.exception("Controller call failed. chat_id=%s error=%s", msg.chat.id, e)
        await msg.answer("⚠️ Service error. Try again a bit later.")


async def _drop_message(msg: Message) -> None:
    # the access token should not stay in the chat history
    try:
        await msg.delete()
    except TelegramBadRequest as e:
        logger.debug("cannot delete token message: %s", e)


# ========= MENU =========


@router.message(Command("start"))
@router.message(Command("menu"))
async def start_menu(m: Message, state: FSMContext, controller: PanelController):
    await state.clear()
    if controller.state == ControllerState.AUTHENTICATED:
        await _run(m, controller.show_panel())
    else:
        await _run(m, controller.show_login())


@router.message(Command("help"))
@router.message(F.text == BTN_HELP)
async def help_menu(m: Message):
    await m.answer(HELP_TEXT)


@router.message(Command("cancel"))
async def cancel_input(m: Message, state: FSMContext):
    await state.clear()
    await m.answer("Cancelled.")


@router.message(Command("status"))
@router.message(F.text == BTN_STATUS)
async def status(m: Message, poller: StatusPoller):
    await m.answer(f"📡 Server: {poller.status.text}")


# ========= AUTH =========


@router.message(Command("login"))
@router.message(F.text == BTN_LOGIN)
async def login_start(m: Message, state: FSMContext, controller: PanelController):
    if controller.state == ControllerState.AUTHENTICATED:
        await m.answer("You are already logged in ✅")
        return
    await state.set_state(InputState.waiting_token)
    await m.answer("Send your access token:")


@router.message(Command("logout"))
@router.message(F.text == BTN_LOGOUT)
async def logout(m: Message, state: FSMContext, controller: PanelController):
    await state.clear()
    await _run(m, controller.logout())


# ========= PANEL =========


@router.message(Command("ram"))
@router.message(F.text == BTN_RAM)
async def ram_menu(m: Message, controller: PanelController):
    await m.answer("Choose RAM:", reply_markup=ram_kb(controller.ram_choices, controller.selected_ram))


@router.callback_query(F.data.startswith("ram:"))
async def ram_select(c: CallbackQuery, controller: PanelController):
    value = c.data.split(":", 1)[1]
    if await controller.select_ram(value):
        await c.answer(f"RAM: {ram_label(value)}")
        try:
            await c.message.edit_reply_markup(reply_markup=ram_kb(controller.ram_choices, controller.selected_ram))
        except TelegramBadRequest as e:
            # same option pressed twice: markup is unchanged
            logger.debug("ram keyboard not updated: %s", e)
    else:
        await c.answer()


@router.message(Command("create"))
@router.message(F.text == BTN_CREATE)
async def create_start(m: Message, state: FSMContext, controller: PanelController):
    await state.set_state(InputState.waiting_username)
    await m.answer(f"Send the username for the new panel (RAM: {ram_label(controller.selected_ram)}):")


# ========= INPUT =========
# registered last: commands and menu buttons win over free-text input


@router.message(StateFilter(InputState.waiting_token), F.text, ~F.text.startswith("/"))
async def login_token(m: Message, state: FSMContext, controller: PanelController):
    token = m.text
    await _drop_message(m)
    await state.clear()
    await _run(m, controller.login(token))


@router.message(StateFilter(InputState.waiting_username), F.text, ~F.text.startswith("/"))
async def create_username(m: Message, state: FSMContext, controller: PanelController):
    await state.clear()
    await _run(m, controller.create_panel(m.text))
