from __future__ import annotations

import logging
from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import BaseStorage, StorageKey

from panelcore.models import Action, ConnectivityStatus
from panelcore.presenter import LOGIN_OUTPUT, PANEL_OUTPUT

from .keyboards import actions_kb, login_menu_kb, panel_menu_kb

logger = logging.getLogger(__name__)

KIND_ICONS = {
    "info": "ℹ️",
    "loading": "⏳",
    "success": "✅",
    "error": "❌",
}


class TelegramPresenter:
    """Renders controller output into the operator chat.

    Every output pane is a single message: showing a new one replaces the
    previous message of the same pane, hiding it deletes the message.
    """

    def __init__(self, bot: Bot, chat_id: int, storage: Optional[BaseStorage] = None):
        self.bot = bot
        self.chat_id = chat_id
        self.storage = storage
        self.screen = "login"
        self.status = ConnectivityStatus.CHECKING
        self._outputs: dict[str, int] = {}

    async def _delete(self, message_id: int) -> None:
        try:
            await self.bot.delete_message(self.chat_id, message_id)
        except TelegramBadRequest as e:
            logger.debug("cannot delete message %s: %s", message_id, e)

    async def show_login(self) -> None:
        self.screen = "login"
        await self.bot.send_message(
            self.chat_id,
            "🔐 You are not logged in. Press Login and send your access token.",
            reply_markup=login_menu_kb(),
        )

    async def show_panel(self, username: str) -> None:
        self.screen = "panel"
        await self.bot.send_message(
            self.chat_id,
            f"👤 Logged in as {username}",
            reply_markup=panel_menu_kb(),
        )

    async def set_status(self, status: ConnectivityStatus) -> None:
        if status == ConnectivityStatus.CHECKING:
            return
        previous, self.status = self.status, status
        if status == previous:
            return
        logger.info("backend status: %s", status.text)
        # the first successful probe is silent; losing or regaining the backend is announced
        if status == ConnectivityStatus.DISCONNECTED or previous == ConnectivityStatus.DISCONNECTED:
            await self.bot.send_message(self.chat_id, f"📡 Server: {status.text}")

    async def show_output(self, target: str, text: str, kind: str = "info") -> None:
        await self.hide_output(target)
        icon = KIND_ICONS.get(kind, KIND_ICONS["info"])
        msg = await self.bot.send_message(self.chat_id, f"{icon} {text}", disable_notification=True)
        self._outputs[target] = msg.message_id

    async def hide_output(self, target: str) -> None:
        message_id = self._outputs.pop(target, None)
        if message_id is not None:
            await self._delete(message_id)

    async def set_loading(self, target: str, is_loading: bool) -> None:
        if is_loading:
            await self.bot.send_chat_action(self.chat_id, "typing")

    async def notify(self, message: str, kind: str = "info") -> None:
        # an open output pane already carries the same news
        logger.info("notify [%s] %s", kind, message)
        if self._outputs:
            return
        icon = KIND_ICONS.get(kind, KIND_ICONS["info"])
        await self.bot.send_message(self.chat_id, f"{icon} {message}")

    async def offer_actions(self, target: str, actions: list[Action]) -> None:
        # the report stays in the chat, only the pending pane reference is dropped
        self._outputs.pop(target, None)
        await self.bot.send_message(self.chat_id, "Quick actions:", reply_markup=actions_kb(actions))

    async def reset_forms(self) -> None:
        if self.storage is None:
            return
        key = StorageKey(bot_id=self.bot.id, chat_id=self.chat_id, user_id=self.chat_id)
        await FSMContext(storage=self.storage, key=key).clear()
