from datetime import datetime
from typing import Dict, List, Optional

import pytest

from rankbot.domain.models import GasReading, MarketSnapshot, TrackedAsset, TrackedNetwork

FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0)


class FakeMarketProvider:
    """Returns canned snapshots; an Exception value is raised for that asset."""

    def __init__(self, results: Dict[str, object]):
        self.results = results
        self.calls: List[str] = []

    async def fetch_snapshot(self, asset: TrackedAsset) -> Optional[MarketSnapshot]:
        self.calls.append(asset.key)
        result = self.results.get(asset.key)
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        return None


class FakeGasProvider:
    def __init__(self, prices: Dict[str, object]):
        self.prices = prices
        self.calls: List[str] = []

    async def fetch_gas_price(self, network: TrackedNetwork) -> GasReading:
        self.calls.append(network.name)
        price = self.prices.get(network.name)
        if isinstance(price, Exception):
            raise price
        return GasReading(network=network, gwei=price)


def make_snapshot(
    price=1.0,
    market_cap=1e9,
    fdv=2e9,
    change=5.5,
    volume=3e8,
    mc_change=-1.25,
) -> MarketSnapshot:
    return MarketSnapshot(
        price=price,
        market_cap=market_cap,
        fully_diluted_valuation=fdv,
        price_change_percentage_24h=change,
        total_volume=volume,
        market_cap_change_percentage_24h=mc_change,
    )


@pytest.fixture()
def assets() -> List[TrackedAsset]:
    return [
        TrackedAsset(key="starknet", name="Starknet"),
        TrackedAsset(key="zksync", name="ZkSync"),
        TrackedAsset(key="taiko", name="Taiko"),
        TrackedAsset(key="scroll", name="Scroll"),
    ]


@pytest.fixture()
def networks() -> List[TrackedNetwork]:
    return [
        TrackedNetwork(name="Ethereum", rpc_url="https://rpc.mevblocker.io", glyph="⬙"),
        TrackedNetwork(name="ZkSync", rpc_url="https://mainnet.era.zksync.io", glyph="⇆"),
        TrackedNetwork(name="Taiko", rpc_url="https://rpc.mainnet.taiko.xyz", glyph="▲"),
        TrackedNetwork(name="Scroll", rpc_url="https://rpc.scroll.io", glyph="📜"),
    ]


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW


class FakeMonotonic:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture()
def snapshot_factory():
    return make_snapshot


@pytest.fixture()
def market_provider_factory():
    return FakeMarketProvider


@pytest.fixture()
def gas_provider_factory():
    return FakeGasProvider
