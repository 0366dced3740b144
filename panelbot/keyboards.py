from aiogram.types import (
    CopyTextButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
)
from aiogram.utils.keyboard import InlineKeyboardBuilder

from panelcore.models import Action, ActionKind

BTN_LOGIN = "🔐 Login"
BTN_CREATE = "➕ Create panel"
BTN_RAM = "💾 RAM"
BTN_STATUS = "📡 Status"
BTN_LOGOUT = "🚪 Logout"
BTN_HELP = "ℹ️ Help"


def login_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_LOGIN)],
            [KeyboardButton(text=BTN_STATUS), KeyboardButton(text=BTN_HELP)],
        ],
        resize_keyboard=True,
    )


def panel_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_CREATE), KeyboardButton(text=BTN_RAM)],
            [KeyboardButton(text=BTN_STATUS), KeyboardButton(text=BTN_LOGOUT)],
            [KeyboardButton(text=BTN_HELP)],
        ],
        resize_keyboard=True,
    )


def ram_label(value: str) -> str:
    if value == "0":
        return "Unlimited"
    try:
        return f"{int(value) / 1000:g} GB"
    except ValueError:
        return value


def ram_kb(choices: list[str], selected: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for value in choices:
        mark = "✅ " if value == selected else ""
        b.button(text=f"{mark}{ram_label(value)}", callback_data=f"ram:{value}")
    b.adjust(3)
    return b.as_markup()


def actions_kb(actions: list[Action]) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for action in actions:
        if action.kind == ActionKind.OPEN:
            b.button(text=action.label, url=action.value)
        else:
            b.button(text=action.label, copy_text=CopyTextButton(text=action.value))
    b.adjust(2, 1)
    return b.as_markup()
