"""
Report rendering for the market snapshot and gas price commands.

Rendering is pure: all fetch results and the clock reading are passed in.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from rankbot.domain.formatters import (
    format_change,
    format_gwei,
    format_magnitude,
    format_price,
    format_ratio,
)
from rankbot.domain.models import GasReading, MarketSnapshot, TrackedAsset
from rankbot.utils.time import format_report_time

AssetResult = Tuple[TrackedAsset, Optional[MarketSnapshot]]


def total_fdv(results: Sequence[AssetResult]) -> float:
    """Sum of known FDVs; failed assets and missing FDVs count as 0."""
    return sum(
        snapshot.fully_diluted_valuation
        for _, snapshot in results
        if snapshot is not None and snapshot.fully_diluted_valuation is not None
    )


def compute_fdv_ratios(results: Sequence[AssetResult]) -> Dict[str, float]:
    """Each asset's share of the basket's aggregate FDV, keyed by asset key."""
    total = total_fdv(results)
    ratios: Dict[str, float] = {}
    for asset, snapshot in results:
        fdv = snapshot.fully_diluted_valuation if snapshot is not None else None
        if fdv is not None and total > 0:
            ratios[asset.key] = fdv / total
        else:
            ratios[asset.key] = 0.0
    return ratios


def render_asset_block(asset: TrackedAsset, snapshot: Optional[MarketSnapshot], fdv_ratio: float) -> str:
    if snapshot is None:
        return f"{asset.name}:\nData unavailable"

    return (
        f"{asset.name}:\n"
        f"- Price: {format_price(snapshot.price)}\n"
        f"- 24h Price Change: {format_change(snapshot.price_change_percentage_24h)}\n"
        f"- 24h Volume (USD): {format_magnitude(snapshot.total_volume)}\n"
        f"- Market Cap: {format_magnitude(snapshot.market_cap)}\n"
        f"- 24h MC Change: {format_change(snapshot.market_cap_change_percentage_24h)}\n"
        f"- FDV: {format_magnitude(snapshot.fully_diluted_valuation)}\n"
        f"- FDV Ratio: {format_ratio(fdv_ratio)}"
    )


def rank_by_fdv(results: Sequence[AssetResult]) -> List[AssetResult]:
    """
    Largest FDV first. Failed fetches and missing FDVs go last; ties keep
    their configured order.
    """

    def sort_key(result: AssetResult):
        snapshot = result[1]
        fdv = snapshot.fully_diluted_valuation if snapshot is not None else None
        if fdv is None:
            return (1, 0.0)
        return (0, -fdv)

    return sorted(results, key=sort_key)


def render_market_report(results: Sequence[AssetResult], now: datetime) -> str:
    ratios = compute_fdv_ratios(results)
    blocks: List[str] = [
        render_asset_block(asset, snapshot, ratios[asset.key])
        for asset, snapshot in rank_by_fdv(results)
    ]
    return f"Date: {format_report_time(now)} (UTC)\n\n" + "\n\n".join(blocks)


def render_gas_report(readings: Sequence[GasReading], now: datetime) -> str:
    lines = [
        f"{reading.network.glyph} {reading.network.name}: {format_gwei(reading.gwei)}"
        for reading in readings
    ]
    return (
        "🔄 Current Gas Prices (Gwei):\n\n"
        + "\n".join(lines)
        + f"\n\nUpdated: {format_report_time(now)} UTC"
    )
