"""
Market data provider factory (settings-driven).
"""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from rankbot.config import Settings, settings as default_settings
from rankbot.domain.models import ExchangeSymbols
from rankbot.infrastructure.market_data.coingecko_provider import CoinGeckoProvider
from rankbot.infrastructure.market_data.exchanges import default_exchange_providers
from rankbot.infrastructure.market_data.provider_chain import FallbackMarketDataProvider
from rankbot.infrastructure.market_data.types import MarketDataProvider


def get_market_data_provider(
    exchange_symbols: Dict[str, ExchangeSymbols],
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> MarketDataProvider:
    cfg = settings or default_settings
    primary = CoinGeckoProvider(
        base_url=cfg.COINGECKO_BASE_URL,
        client=client,
        timeout=cfg.HTTP_TIMEOUT_SECONDS,
    )
    if not cfg.MARKET_FALLBACK_ENABLED:
        return primary

    return FallbackMarketDataProvider(
        primary=primary,
        exchanges=default_exchange_providers(client=client, timeout=cfg.HTTP_TIMEOUT_SECONDS),
        exchange_symbols=exchange_symbols,
        supply_ttl_seconds=cfg.SUPPLY_TTL_SECONDS,
        volume_ttl_seconds=cfg.VOLUME_TTL_SECONDS,
    )
