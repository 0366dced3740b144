from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import Action, ActionKind, ConnectivityStatus, PanelCreationResult

LOGIN_OUTPUT = "login"
PANEL_OUTPUT = "panel"


class Presenter(Protocol):
    """View operations the controller drives. The core never renders anything itself."""

    async def show_login(self) -> None: ...

    async def show_panel(self, username: str) -> None: ...

    async def set_status(self, status: ConnectivityStatus) -> None: ...

    async def show_output(self, target: str, text: str, kind: str = "info") -> None: ...

    async def hide_output(self, target: str) -> None: ...

    async def set_loading(self, target: str, is_loading: bool) -> None: ...

    async def notify(self, message: str, kind: str = "info") -> None: ...

    async def offer_actions(self, target: str, actions: list[Action]) -> None: ...

    async def reset_forms(self) -> None: ...


def format_created_at(moment: datetime) -> str:
    return moment.strftime("%d/%m/%Y, %H.%M.%S")


def format_creation_report(result: PanelCreationResult, created_at: datetime, by: str | None) -> str:
    user = result.user
    server = result.server
    return (
        "Panel created successfully!\n"
        "\n"
        "Login Details:\n"
        f"Domain: {result.login_url}\n"
        f"Username: {user.username}\n"
        f"Password: {user.password}\n"
        "\n"
        "User Info:\n"
        f"User ID: {user.id}\n"
        f"Email: {user.email}\n"
        "\n"
        "Server Specs:\n"
        f"Server ID: {server.id}\n"
        f"Server Name: {server.name}\n"
        f"RAM: {server.ram}\n"
        f"CPU: {server.cpu}\n"
        f"Storage: {server.disk}\n"
        "\n"
        f"Created: {format_created_at(created_at)}\n"
        f"By: {by}\n"
        "\n"
        "Panel will be active in 2-3 minutes."
    )


def creation_actions(result: PanelCreationResult) -> list[Action]:
    candidates = [
        (ActionKind.COPY, "Copy Username", result.user.username),
        (ActionKind.COPY, "Copy Password", result.user.password),
        (ActionKind.OPEN, "Open Panel", result.login_url),
    ]
    return [
        Action(kind=kind, label=label, value=str(value))
        for kind, label, value in candidates
        if value not in (None, "")
    ]
