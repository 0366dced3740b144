from __future__ import annotations

from typing import Optional

import redis.asyncio as redis


class RedisRepo:
    """Flat key-value storage for the client-local session fields."""

    def __init__(self, host: str, port: int, db: int = 0):
        self.r = redis.Redis(host=host, port=port, db=db, decode_responses=True)

    async def get(self, key: str) -> Optional[str]:
        return await self.r.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.r.set(key, value)

    async def delete(self, *keys: str) -> None:
        await self.r.delete(*keys)

    async def close(self) -> None:
        await self.r.aclose()
