from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class ControllerState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    EXPIRING = "expiring"


class ConnectivityStatus(str, Enum):
    CHECKING = "checking"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

    @property
    def text(self) -> str:
        return STATUS_TEXTS.get(self.value, "Unknown")


STATUS_TEXTS = {
    "checking": "Checking...",
    "connected": "Connected",
    "disconnected": "Disconnected",
}


class Session(BaseModel):
    username: str
    token: str
    issued_at: int  # epoch ms


class PanelUser(BaseModel):
    # display-only, rendered as the backend sends them
    id: Any = None
    username: Any = None
    password: Any = None
    email: Any = None


class PanelServer(BaseModel):
    id: Any = None
    name: Any = None
    ram: Any = None
    cpu: Any = None
    disk: Any = None


class PanelCreationResult(BaseModel):
    login_url: Any = None
    user: PanelUser
    server: PanelServer


class ActionKind(str, Enum):
    COPY = "copy"
    OPEN = "open"


class Action(BaseModel):
    kind: ActionKind
    label: str
    value: str


class PanelRequest(BaseModel):
    username: str
    ram: str
