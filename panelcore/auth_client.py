from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class AuthClient:
    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout_sec
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def token_login(self, access_token: str) -> tuple[int, Any]:
        """Exchange a raw access token for a panel session.

        Returns ``(status_code, body)``; transport errors propagate so the
        caller can report them.
        """
        async with self._client() as client:
            r = await client.post(f"{self.base_url}/api/token-login", json={"accessToken": access_token})
        try:
            data = r.json()
        except ValueError:
            data = r.text
        return r.status_code, data

    async def safe_verify_session(self, token: Optional[str]) -> bool:
        # invalid token and unreachable backend are not told apart
        if not token:
            return False
        try:
            async with self._client() as client:
                r = await client.post(f"{self.base_url}/api/verify-session", headers=self._headers(token))
            data = r.json()
            return r.is_success and isinstance(data, dict) and bool(data.get("success"))
        except Exception as e:
            logger.warning("session verification failed: %s", e)
            return False

    async def safe_logout(self, token: str) -> bool:
        try:
            async with self._client() as client:
                r = await client.post(f"{self.base_url}/api/logout", headers=self._headers(token))
            return r.status_code < 400
        except Exception as e:
            logger.error("Logout request failed: %s", e)
            return False
