from datetime import datetime

import pytest

from rankbot.domain.models import GasReading, TrackedAsset
from rankbot.domain.reports import (
    compute_fdv_ratios,
    rank_by_fdv,
    render_asset_block,
    render_gas_report,
    render_market_report,
    total_fdv,
)

NOW = datetime(2026, 10, 18, 12, 0, 0)


def test_fdv_ratios_sum_to_one(assets, snapshot_factory):
    results = [
        (assets[0], snapshot_factory(fdv=1e9)),
        (assets[1], snapshot_factory(fdv=3e9)),
        (assets[2], snapshot_factory(fdv=2.5e9)),
        (assets[3], snapshot_factory(fdv=0.5e9)),
    ]
    ratios = compute_fdv_ratios(results)
    assert sum(ratios.values()) == pytest.approx(1.0)
    assert ratios["zksync"] == pytest.approx(3 / 7)


def test_null_fdv_asset_gets_zero_ratio(assets, snapshot_factory):
    results = [
        (assets[0], snapshot_factory(fdv=None)),
        (assets[1], snapshot_factory(fdv=2e9)),
        (assets[2], None),
        (assets[3], snapshot_factory(fdv=2e9)),
    ]
    assert total_fdv(results) == 4e9
    ratios = compute_fdv_ratios(results)
    assert ratios["starknet"] == 0.0
    assert ratios["taiko"] == 0.0
    assert ratios["zksync"] == pytest.approx(0.5)


def test_no_fdv_anywhere_gives_zero_ratios(assets, snapshot_factory):
    results = [(asset, snapshot_factory(fdv=None)) for asset in assets]
    assert set(compute_fdv_ratios(results).values()) == {0.0}


def test_render_asset_block_unavailable():
    asset = TrackedAsset(key="taiko", name="Taiko")
    assert render_asset_block(asset, None, 0.0) == "Taiko:\nData unavailable"


def test_render_asset_block_fields(snapshot_factory):
    asset = TrackedAsset(key="scroll", name="Scroll")
    block = render_asset_block(asset, snapshot_factory(fdv=None, change=None), 0.0)
    assert block == (
        "Scroll:\n"
        "- Price: $1.0000\n"
        "- 24h Price Change: N/A\n"
        "- 24h Volume (USD): 300.00 M\n"
        "- Market Cap: 1.00 B\n"
        "- 24h MC Change: -1.25% ⬇️\n"
        "- FDV: N/A\n"
        "- FDV Ratio: 0.00%"
    )


def test_render_market_report_end_to_end(assets, snapshot_factory):
    results = [
        (asset, None if asset.key == "taiko" else snapshot_factory())
        for asset in assets
    ]
    report = render_market_report(results, NOW)

    header, *blocks = report.split("\n\n")
    assert header == "Date: 2026-10-18 12:00:00 (UTC)"
    assert len(blocks) == 4
    assert blocks[3] == "Taiko:\nData unavailable"
    for block in blocks[:3]:
        assert "- Price: $1.0000" in block
        assert "- 24h Price Change: 5.5% ⬆️" in block
        assert "- 24h Volume (USD): 300.00 M" in block
        assert "- Market Cap: 1.00 B" in block
        assert "- 24h MC Change: -1.25% ⬇️" in block
        assert "- FDV: 2.00 B" in block
        assert block.endswith("- FDV Ratio: 33.33%")


def test_render_gas_report_fixed_order(networks):
    readings = [
        GasReading(network=networks[0], gwei=12.3456),
        GasReading(network=networks[1], gwei=0.0451),
        GasReading(network=networks[2], gwei=None),
        GasReading(network=networks[3], gwei=0.02),
    ]
    assert render_gas_report(readings, NOW) == (
        "🔄 Current Gas Prices (Gwei):\n\n"
        "⬙ Ethereum: 12.35\n"
        "⇆ ZkSync: 0.05\n"
        "▲ Taiko: N/A\n"
        "📜 Scroll: 0.02\n\n"
        "Updated: 2026-10-18 12:00:00 UTC"
    )


def _names(report):
    return [block.split(":\n", 1)[0] for block in report.split("\n\n")[1:]]


def test_market_report_ranks_by_fdv(assets, snapshot_factory):
    fdvs = {"starknet": 1e9, "zksync": 5e9, "taiko": 2e9, "scroll": 3e9}
    results = [(asset, snapshot_factory(fdv=fdvs[asset.key])) for asset in assets]

    report = render_market_report(results, NOW)

    assert _names(report) == ["ZkSync", "Scroll", "Taiko", "Starknet"]
    assert "ZkSync:\n" in report and "- FDV Ratio: 45.45%" in report


def test_ranking_puts_missing_fdv_last_in_config_order(assets, snapshot_factory):
    results = [
        (assets[0], snapshot_factory(fdv=None)),
        (assets[1], None),
        (assets[2], snapshot_factory(fdv=2e9)),
        (assets[3], snapshot_factory(fdv=2e9)),
    ]

    assert [asset.key for asset, _ in rank_by_fdv(results)] == ["taiko", "scroll", "starknet", "zksync"]
    assert _names(render_market_report(results, NOW)) == ["Taiko", "Scroll", "Starknet", "ZkSync"]


def test_mc_change_missing_renders_na(snapshot_factory):
    block = render_asset_block(TrackedAsset(key="scroll", name="Scroll"), snapshot_factory(mc_change=None), 0.5)
    assert "- Market Cap: 1.00 B\n- 24h MC Change: N/A\n- FDV: 2.00 B" in block
