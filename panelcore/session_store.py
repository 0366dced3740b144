from __future__ import annotations

import time
from typing import Any, Callable, Optional

from .models import Session

USER_KEY = "panel_user"
SESSION_KEY = "panel_session"
TIME_KEY = "panel_time"


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionStore:
    """Persists the operator session and keeps the in-memory copy.

    The three fields live under fixed keys. Freshness is checked on load only:
    a stale session is reported as missing but left in storage, the caller
    decides whether to clear it.
    """

    def __init__(self, repo, max_age_sec: int = 24 * 60 * 60, now_ms: Callable[[], int] = _now_ms):
        self.repo = repo
        self.max_age_ms = max_age_sec * 1000
        self.now_ms = now_ms
        self.session: Optional[Session] = None

    @property
    def token(self) -> Optional[str]:
        return self.session.token if self.session else None

    @property
    def username(self) -> Optional[str]:
        return self.session.username if self.session else None

    async def save(self, data: dict[str, Any]) -> None:
        issued_at = self.now_ms()
        username = str(data.get("username") or "")
        token = str(data.get("sessionToken") or "")
        await self.repo.set(USER_KEY, username)
        await self.repo.set(SESSION_KEY, token)
        await self.repo.set(TIME_KEY, str(issued_at))
        self.session = Session(username=username, token=token, issued_at=issued_at)

    async def load(self) -> bool:
        user = await self.repo.get(USER_KEY)
        token = await self.repo.get(SESSION_KEY)
        raw_time = await self.repo.get(TIME_KEY)
        if not user or not token or not raw_time:
            return False
        try:
            issued_at = int(raw_time)
        except ValueError:
            return False
        if self.now_ms() - issued_at >= self.max_age_ms:
            return False
        self.session = Session(username=user, token=token, issued_at=issued_at)
        return True

    async def clear(self) -> None:
        await self.repo.delete(USER_KEY, SESSION_KEY, TIME_KEY)
        self.session = None
