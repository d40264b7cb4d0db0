"""
Market data provider protocols for type hints.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple

from rankbot.domain.models import MarketSnapshot, TrackedAsset


class MarketDataProvider(Protocol):
    async def fetch_snapshot(self, asset: TrackedAsset) -> Optional[MarketSnapshot]:
        ...

    async def close(self) -> None:
        ...


class ExchangeTickerProvider(Protocol):
    name: str

    async def get_price_and_change(self, symbol: str) -> Optional[Tuple[float, float]]:
        ...
