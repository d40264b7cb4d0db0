"""
MARKET SNAPSHOT CACHE

Refreshed on a fixed timer by MarketRefreshWorker, read by the market
command. A refresh fetches every tracked asset concurrently, renders the
report and swaps the cache entry.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from rankbot.domain.models import TrackedAsset
from rankbot.domain.reports import AssetResult, render_market_report
from rankbot.infrastructure.market_data.types import MarketDataProvider
from rankbot.services.cache_entry import CacheEntry
from rankbot.utils.time import report_now

logger = logging.getLogger(__name__)


class MarketSnapshotCache:
    def __init__(
        self,
        provider: MarketDataProvider,
        assets: Sequence[TrackedAsset],
        clock: Callable[[], datetime] = report_now,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.assets: List[TrackedAsset] = list(assets)
        self._clock = clock
        self._monotonic = monotonic
        self._entry = CacheEntry()

    @property
    def entry(self) -> CacheEntry:
        return self._entry

    def get(self) -> Optional[str]:
        """Last rendered report, or None before the first good refresh."""
        return self._entry.text

    async def _fetch_all(self) -> List[AssetResult]:
        outcomes = await asyncio.gather(
            *(self.provider.fetch_snapshot(asset) for asset in self.assets),
            return_exceptions=True,
        )
        results: List[AssetResult] = []
        for asset, outcome in zip(self.assets, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("[%s] fetch raised %s: %s", asset.key, type(outcome).__name__, outcome)
                outcome = None
            results.append((asset, outcome))
        return results

    async def refresh(self) -> bool:
        """
        Run one refresh cycle.

        Returns False, keeping the previous entry, when no asset could be
        fetched. Partial results are rendered and stored.
        """
        results = await self._fetch_all()
        if all(snapshot is None for _, snapshot in results):
            logger.warning("Market refresh produced no data, keeping previous report")
            return False

        now = self._clock()
        text = render_market_report(results, now)
        self._entry = CacheEntry(text=text, updated_at=now, rendered_at=self._monotonic())

        failed = [asset.key for asset, snapshot in results if snapshot is None]
        if failed:
            logger.info("Market data updated at %s (unavailable: %s)", now, ", ".join(failed))
        else:
            logger.info("Market data updated successfully at %s", now)
        return True


class MarketRefreshWorker:
    """
    Background task: refresh immediately, then every ``interval_seconds``.

    Each cycle starts whether or not the previous one succeeded. ``stop()``
    ends the loop and cancels an in-flight refresh.
    """

    def __init__(self, cache: MarketSnapshotCache, interval_seconds: float = 300):
        self._cache = cache
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._stop = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._stop.clear()
            self._task = asyncio.create_task(self._run(), name="market-refresh")

    async def stop(self) -> None:
        self._stop.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _run(self) -> None:
        while not self._stop.is_set():
            try:
                await self._cache.refresh()
            except Exception:
                logger.exception("Market refresh failed")

            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue
