from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable, Optional

import httpx
from pydantic import ValidationError

from .auth_client import AuthClient
from .core_client import CoreClient
from .models import ControllerState, PanelCreationResult, PanelRequest
from .presenter import (
    LOGIN_OUTPUT,
    PANEL_OUTPUT,
    Presenter,
    creation_actions,
    format_creation_report,
)
from .session_store import SessionStore

logger = logging.getLogger(__name__)

MIN_USERNAME_LEN = 3
SESSION_EXPIRED = "Session expired. Please login again."


def _is_success(code: int, body: Any) -> bool:
    return 200 <= code < 300 and isinstance(body, dict) and bool(body.get("success"))


def _message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        return body.get("message") or None
    return None


class PanelController:
    def __init__(
        self,
        store: SessionStore,
        auth_client: AuthClient,
        core_client: CoreClient,
        presenter: Presenter,
        default_ram: str = "1000",
        ram_choices: Optional[Iterable[str]] = None,
        login_redirect_delay: float = 1.5,
        expired_logout_delay: float = 2.0,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.auth = auth_client
        self.core = core_client
        self.view = presenter
        self.default_ram = default_ram
        self.ram_choices = list(ram_choices) if ram_choices is not None else [default_ram]
        self.selected_ram = default_ram
        self.login_redirect_delay = login_redirect_delay
        self.expired_logout_delay = expired_logout_delay
        self.now = now
        self.state = ControllerState.UNAUTHENTICATED
        self._tasks: set[asyncio.Task] = set()
        self._expiry: Optional[asyncio.Task] = None

    # ========= tasks =========

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _later(self, delay: float, action: Callable[[], Awaitable[Any]]) -> asyncio.Task:
        async def runner():
            await asyncio.sleep(delay)
            await action()

        return self._spawn(runner())

    def _cancel_expiry(self) -> None:
        task, self._expiry = self._expiry, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def join(self) -> None:
        """Wait for delayed view switches and detached requests to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ========= views =========

    async def show_login(self) -> None:
        await self.view.show_login()
        await self.view.hide_output(LOGIN_OUTPUT)

    async def show_panel(self) -> None:
        if self.state != ControllerState.AUTHENTICATED:
            return
        await self.view.show_panel(self.store.username or "User")
        await self.view.hide_output(PANEL_OUTPUT)

    # ========= session =========

    async def start(self) -> bool:
        if await self.store.load():
            if await self.auth.safe_verify_session(self.store.token):
                self.state = ControllerState.AUTHENTICATED
                await self.show_panel()
                return True
            await self.store.clear()
        self.state = ControllerState.UNAUTHENTICATED
        await self.show_login()
        return False

    async def login(self, token: Optional[str]) -> bool:
        token = (token or "").strip()
        if not token:
            await self.view.show_output(LOGIN_OUTPUT, "Please enter your access token", "error")
            await self.view.notify("Token required", "error")
            return False

        # a fresh login supersedes a forced logout still waiting to run
        self._cancel_expiry()
        self.state = ControllerState.AUTHENTICATING
        await self.view.set_loading(LOGIN_OUTPUT, True)
        await self.view.show_output(LOGIN_OUTPUT, "Authenticating...", "loading")
        try:
            code, body = await self.auth.token_login(token)
            data = body.get("data") if isinstance(body, dict) else None
            if not _is_success(code, body) or not isinstance(data, dict) or not data.get("sessionToken"):
                await self._login_failed(_message(body) or "Authentication failed")
                return False

            await self.store.save(data)
            await self.view.show_output(LOGIN_OUTPUT, "Login successful! Redirecting...", "success")
            await self.view.notify("Login successful", "success")
            await self.view.reset_forms()
            self.state = ControllerState.AUTHENTICATED
            self._later(self.login_redirect_delay, self.show_panel)
            return True
        except httpx.HTTPError as e:
            logger.warning("token login failed: %s", e)
            await self._login_failed(str(e) or "Authentication failed")
            return False
        finally:
            await self.view.set_loading(LOGIN_OUTPUT, False)

    async def _login_failed(self, message: str) -> None:
        self.state = ControllerState.UNAUTHENTICATED
        await self.view.show_output(LOGIN_OUTPUT, f"Login failed: {message}", "error")
        await self.view.notify("Login failed", "error")

    async def logout(self) -> None:
        self._cancel_expiry()
        token = self.store.token
        self.state = ControllerState.EXPIRING
        if token:
            # at most once, nobody awaits the outcome
            self._spawn(self.auth.safe_logout(token))

        await self.store.clear()
        self.selected_ram = self.default_ram
        await self.view.reset_forms()
        self.state = ControllerState.UNAUTHENTICATED
        await self.show_login()
        await self.view.notify("Logged out successfully", "info")

    async def expire(self) -> None:
        if self._expiry is not None and not self._expiry.done():
            return
        await self.view.show_output(PANEL_OUTPUT, SESSION_EXPIRED, "error")
        self.state = ControllerState.EXPIRING
        self._expiry = self._later(self.expired_logout_delay, self.logout)

    # ========= panel =========

    async def select_ram(self, ram: str) -> bool:
        if ram not in self.ram_choices:
            await self.view.notify(f"Unknown RAM option: {ram}", "error")
            return False
        self.selected_ram = ram
        return True

    async def create_panel(self, username: Optional[str], ram: Optional[str] = None) -> Optional[PanelCreationResult]:
        username = (username or "").strip()
        if not username:
            await self.view.show_output(PANEL_OUTPUT, "Please enter a username", "error")
            await self.view.notify("Username required", "error")
            return None
        if len(username) < MIN_USERNAME_LEN:
            await self.view.show_output(PANEL_OUTPUT, "Username must be at least 3 characters", "error")
            await self.view.notify("Username too short", "error")
            return None

        token = self.store.token
        if not token:
            await self.expire()
            return None

        request = PanelRequest(username=username, ram=ram or self.selected_ram)
        await self.view.set_loading(PANEL_OUTPUT, True)
        await self.view.show_output(PANEL_OUTPUT, "Creating panel...", "loading")
        try:
            code, body = await self.core.create_panel(token, request.username, request.ram)
            if not _is_success(code, body):
                if code in (401, 403):
                    await self.expire()
                    return None
                await self._creation_failed(_message(body) or "Panel creation failed")
                return None

            result = PanelCreationResult.model_validate(body.get("data"))
            report = format_creation_report(result, self.now(), self.store.username)
            await self.view.show_output(PANEL_OUTPUT, report, "success")
            await self.view.notify("Panel created successfully", "success")
            await self.view.offer_actions(PANEL_OUTPUT, creation_actions(result))
            return result
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning("panel creation failed: %s", e)
            await self._creation_failed(str(e) or "Panel creation failed")
            return None
        finally:
            await self.view.set_loading(PANEL_OUTPUT, False)

    async def _creation_failed(self, message: str) -> None:
        await self.view.show_output(PANEL_OUTPUT, f"Panel creation failed: {message}", "error")
        await self.view.notify("Panel creation failed", "error")
