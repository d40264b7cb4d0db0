"""
GAS PRICE CACHE

Refreshed on demand: a request within the TTL of the last render is served
from memory, otherwise every tracked network is queried concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Callable, List, Sequence

from rankbot.domain.models import GasReading, TrackedNetwork
from rankbot.domain.reports import render_gas_report
from rankbot.infrastructure.gas.rpc_provider import RpcGasPriceProvider
from rankbot.services.cache_entry import CacheEntry
from rankbot.utils.time import report_now

logger = logging.getLogger(__name__)


class GasPriceCache:
    def __init__(
        self,
        provider: RpcGasPriceProvider,
        networks: Sequence[TrackedNetwork],
        ttl_seconds: float = 60,
        clock: Callable[[], datetime] = report_now,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.networks: List[TrackedNetwork] = list(networks)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._monotonic = monotonic
        self._entry = CacheEntry()
        self._refresh_lock = asyncio.Lock()

    @property
    def entry(self) -> CacheEntry:
        return self._entry

    def _fresh_text(self):
        if self._entry.is_fresh(self._monotonic(), self.ttl_seconds):
            return self._entry.text
        return None

    async def get_or_refresh(self) -> str:
        text = self._fresh_text()
        if text is not None:
            return text

        # Callers arriving mid-refresh wait and reuse its result
        async with self._refresh_lock:
            text = self._fresh_text()
            if text is not None:
                return text
            return await self.refresh()

    async def _fetch_all(self) -> List[GasReading]:
        outcomes = await asyncio.gather(
            *(self.provider.fetch_gas_price(network) for network in self.networks),
            return_exceptions=True,
        )
        readings: List[GasReading] = []
        for network, outcome in zip(self.networks, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("[%s] gas fetch raised %s: %s", network.name, type(outcome).__name__, outcome)
                outcome = GasReading(network=network, gwei=None)
            readings.append(outcome)
        return readings

    async def refresh(self) -> str:
        readings = await self._fetch_all()
        now = self._clock()
        text = render_gas_report(readings, now)
        self._entry = CacheEntry(text=text, updated_at=now, rendered_at=self._monotonic())
        logger.info("Gas prices updated at %s", now)
        return text
