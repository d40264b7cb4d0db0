"""
Domain models for tracked subjects and fetched readings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TrackedAsset:
    """One market-data subject; ``key`` is the CoinGecko coin id."""
    key: str
    name: str


@dataclass(frozen=True)
class TrackedNetwork:
    """One gas-price subject."""
    name: str
    rpc_url: str
    glyph: str


@dataclass(frozen=True)
class ExchangeSymbols:
    """Trading pair of one asset on each fallback exchange; empty means unlisted."""
    binance: str = ""
    okx: str = ""
    bybit: str = ""
    bitget: str = ""

    def for_exchange(self, exchange: str) -> str:
        return getattr(self, exchange, "") or ""


@dataclass(frozen=True)
class MarketSnapshot:
    """
    Per-asset market data in USD.

    ``None`` on any field means the value was not available upstream,
    never zero.
    """
    price: Optional[float]
    market_cap: Optional[float]
    fully_diluted_valuation: Optional[float]
    price_change_percentage_24h: Optional[float]
    total_volume: Optional[float]
    market_cap_change_percentage_24h: Optional[float] = None


@dataclass(frozen=True)
class GasReading:
    network: TrackedNetwork
    gwei: Optional[float]


@dataclass(frozen=True)
class SupplySnapshot:
    """Supplies derived from the last good CoinGecko snapshot of an asset."""
    circulating: Optional[float]
    full: Optional[float]
    total_volume: Optional[float]
    updated_at: datetime

    def is_fresh(self, now: datetime, ttl_seconds: float) -> bool:
        return (now - self.updated_at).total_seconds() < ttl_seconds
