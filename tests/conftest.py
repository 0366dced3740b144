from __future__ import annotations

import json
from typing import Callable, Optional

import httpx
import pytest

from panelcore.auth_client import AuthClient
from panelcore.core_client import CoreClient
from panelcore.service import PanelController
from panelcore.session_store import SessionStore

BASE_URL = "https://panel.test"
NOW_MS = 1_700_000_000_000


class FakeRepo:
    def __init__(self, data: Optional[dict[str, str]] = None):
        self.data = dict(data or {})

    async def get(self, key: str):
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self.data.pop(key, None)


class RecordingPresenter:
    def __init__(self):
        self.calls: list[tuple] = []

    def named(self, name: str) -> list[tuple]:
        return [c[1:] for c in self.calls if c[0] == name]

    def outputs(self, target: str) -> list[str]:
        return [text for t, text, _ in self.named("show_output") if t == target]

    async def show_login(self):
        self.calls.append(("show_login",))

    async def show_panel(self, username):
        self.calls.append(("show_panel", username))

    async def set_status(self, status):
        self.calls.append(("set_status", status))

    async def show_output(self, target, text, kind="info"):
        self.calls.append(("show_output", target, text, kind))

    async def hide_output(self, target):
        self.calls.append(("hide_output", target))

    async def set_loading(self, target, is_loading):
        self.calls.append(("set_loading", target, is_loading))

    async def notify(self, message, kind="info"):
        self.calls.append(("notify", message, kind))

    async def offer_actions(self, target, actions):
        self.calls.append(("offer_actions", target, actions))

    async def reset_forms(self):
        self.calls.append(("reset_forms",))


class Backend:
    """Routes requests to per-path handlers and records every call."""

    def __init__(self):
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[path] = handler

    def reply(self, path: str, status: int, body) -> None:
        self.routes[path] = lambda request: httpx.Response(status, json=body)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def json_body(self, request: httpx.Request):
        return json.loads(request.content.decode("utf-8"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "not found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class Clock:
    def __init__(self, now_ms: int = NOW_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def store(repo: FakeRepo, clock: Clock) -> SessionStore:
    return SessionStore(repo, 24 * 60 * 60, now_ms=clock)


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def auth(backend: Backend) -> AuthClient:
    return AuthClient(BASE_URL, 2.0, transport=backend.transport)


@pytest.fixture
def core(backend: Backend) -> CoreClient:
    return CoreClient(BASE_URL, 2.0, transport=backend.transport)


@pytest.fixture
def controller(store, auth, core, presenter) -> PanelController:
    return PanelController(
        store,
        auth,
        core,
        presenter,
        default_ram="1000",
        ram_choices=["1000", "2000", "0"],
        login_redirect_delay=0,
        expired_logout_delay=0,
    )
