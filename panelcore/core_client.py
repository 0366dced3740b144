from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class CoreClient:
    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout_sec
        self.transport = transport

    def _headers(self, access: Optional[str]) -> dict[str, str]:
        if not access:
            return {}
        return {"Authorization": f"Bearer {access}"}

    async def _request(self, method: str, path: str, access: Optional[str] = None, json: Optional[dict] = None):
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.request(method, url, headers=self._headers(access), json=json)

        try:
            data = r.json()
        except ValueError:
            data = r.text
        return r.status_code, data

    async def safe_ping(self) -> bool:
        try:
            code, body = await self._request("GET", "/api/test")
        except Exception as e:
            logger.warning("health probe failed: %s", e)
            return False
        return 200 <= code < 300 and isinstance(body, dict) and bool(body.get("success"))

    async def create_panel(self, access: str, username: str, ram: str) -> tuple[int, Any]:
        return await self._request("POST", "/api/create-panel", access, json={"username": username, "ram": ram})
