from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .core_client import CoreClient
from .models import ConnectivityStatus

logger = logging.getLogger(__name__)


class StatusPoller:
    """Probes backend reachability once at start and then on a fixed interval.

    Ticks run one after another inside a single task, so a slow probe delays
    the next tick instead of racing it.
    """

    def __init__(self, core: CoreClient, presenter, interval_sec: float = 30.0):
        self.core = core
        self.presenter = presenter
        self.interval = interval_sec
        self.status = ConnectivityStatus.CHECKING
        self._task: Optional[asyncio.Task] = None

    async def _set(self, status: ConnectivityStatus) -> None:
        self.status = status
        await self.presenter.set_status(status)

    async def tick(self) -> ConnectivityStatus:
        await self._set(ConnectivityStatus.CHECKING)
        ok = await self.core.safe_ping()
        await self._set(ConnectivityStatus.CONNECTED if ok else ConnectivityStatus.DISCONNECTED)
        return self.status

    async def run(self) -> None:
        while True:
            try:
                await self.tick()
            except Exception as e:
                logger.warning(f"status tick error: {e}")
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
