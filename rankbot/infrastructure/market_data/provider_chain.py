"""
Provider chain - CoinGecko first, then exchange tickers.

Exchange tickers only carry price and 24h change. Market cap, FDV and volume
for a fallback result are rebuilt from the supplies cached on the last good
CoinGecko snapshot, while those are fresh enough.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from rankbot.domain.models import ExchangeSymbols, MarketSnapshot, SupplySnapshot, TrackedAsset
from rankbot.infrastructure.market_data.types import ExchangeTickerProvider, MarketDataProvider

logger = logging.getLogger(__name__)

SUPPLY_TTL_SECONDS = 24 * 60 * 60
VOLUME_TTL_SECONDS = 30 * 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def supply_from_snapshot(snapshot: MarketSnapshot, now: datetime) -> SupplySnapshot:
    circulating = full = None
    price = snapshot.price
    if price:
        if snapshot.market_cap:
            circulating = snapshot.market_cap / price
        if snapshot.fully_diluted_valuation:
            full = snapshot.fully_diluted_valuation / price
    return SupplySnapshot(
        circulating=circulating,
        full=full,
        total_volume=snapshot.total_volume,
        updated_at=now,
    )


class FallbackMarketDataProvider:
    def __init__(
        self,
        primary: MarketDataProvider,
        exchanges: List[ExchangeTickerProvider],
        exchange_symbols: Dict[str, ExchangeSymbols],
        supply_ttl_seconds: float = SUPPLY_TTL_SECONDS,
        volume_ttl_seconds: float = VOLUME_TTL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.primary = primary
        self.exchanges = exchanges
        self.exchange_symbols = exchange_symbols
        self.supply_ttl_seconds = supply_ttl_seconds
        self.volume_ttl_seconds = volume_ttl_seconds
        self._clock = clock
        self._supplies: Dict[str, SupplySnapshot] = {}
        self.last_sources: Dict[str, str] = {}

    def get_last_sources(self) -> Dict[str, str]:
        return dict(self.last_sources)

    def get_supply(self, key: str) -> Optional[SupplySnapshot]:
        return self._supplies.get(key)

    async def fetch_snapshot(self, asset: TrackedAsset) -> Optional[MarketSnapshot]:
        snapshot = await self.primary.fetch_snapshot(asset)
        if snapshot is not None:
            self._supplies[asset.key] = supply_from_snapshot(snapshot, self._clock())
            self.last_sources[asset.key] = "coingecko"
            return snapshot

        logger.info("[%s] source=coingecko status=failed, trying exchanges", asset.key)
        snapshot = await self._fetch_from_exchanges(asset)
        if snapshot is None:
            logger.warning("[%s] source=all status=failed", asset.key)
        return snapshot

    async def _fetch_from_exchanges(self, asset: TrackedAsset) -> Optional[MarketSnapshot]:
        symbols = self.exchange_symbols.get(asset.key)
        if symbols is None:
            logger.warning("[%s] no exchange symbols configured", asset.key)
            return None

        for exchange in self.exchanges:
            symbol = symbols.for_exchange(exchange.name)
            if not symbol:
                logger.debug("[%s] provider=%s status=not_supported", asset.key, exchange.name)
                continue
            result = await exchange.get_price_and_change(symbol)
            if result is None:
                continue

            price, change = result
            logger.info(
                "[%s] provider=%s symbol=%s price=%.4f change=%.2f%%",
                asset.key, exchange.name, symbol, price, change,
            )
            self.last_sources[asset.key] = exchange.name
            return self._compose(asset.key, price, change)
        return None

    def _compose(self, key: str, price: float, change: float) -> MarketSnapshot:
        market_cap = fdv = volume = None
        supply = self._supplies.get(key)
        now = self._clock()

        if supply is None:
            logger.info("[%s] cache_miss: no cached supply data", key)
        else:
            if supply.is_fresh(now, self.supply_ttl_seconds):
                if supply.circulating:
                    market_cap = price * supply.circulating
                if supply.full:
                    fdv = price * supply.full
            else:
                logger.info("[%s] cache_expired supply", key)
            if supply.is_fresh(now, self.volume_ttl_seconds):
                volume = supply.total_volume
            else:
                logger.info("[%s] cache_expired volume", key)

        return MarketSnapshot(
            price=price,
            market_cap=market_cap,
            fully_diluted_valuation=fdv,
            price_change_percentage_24h=change,
            total_volume=volume,
            # Tickers carry no market cap history
            market_cap_change_percentage_24h=None,
        )

    async def close(self) -> None:
        await self.primary.close()
        for exchange in self.exchanges:
            close = getattr(exchange, "close", None)
            if close is not None:
                await close()
