"""
CoinGecko Market Data Provider
Fetches one asset's market snapshot from /coins/{id}
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from rankbot.domain.models import MarketSnapshot, TrackedAsset
from rankbot.infrastructure.http import DEFAULT_TIMEOUT_SECONDS, HttpJsonProvider

logger = logging.getLogger(__name__)


class UsdAmount(BaseModel):
    usd: Optional[float] = None


class CoinMarketData(BaseModel):
    current_price: Optional[UsdAmount] = None
    market_cap: Optional[UsdAmount] = None
    # Absent or {} for assets without a max supply
    fully_diluted_valuation: Optional[UsdAmount] = None
    price_change_percentage_24h: Optional[float] = None
    total_volume: Optional[UsdAmount] = None
    market_cap_change_percentage_24h: Optional[float] = None


class CoinResponse(BaseModel):
    market_data: CoinMarketData


def _usd(amount: Optional[UsdAmount]) -> Optional[float]:
    return amount.usd if amount is not None else None


class CoinGeckoProvider(HttpJsonProvider):
    """
    CoinGecko coin endpoint.

    ``fetch_snapshot`` never raises: failures are logged and returned as None
    so one asset cannot abort a refresh.
    """

    name = "coingecko"

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        super().__init__(client=client, timeout=timeout)
        self.base_url = base_url.rstrip("/")

    async def fetch_snapshot(self, asset: TrackedAsset) -> Optional[MarketSnapshot]:
        url = f"{self.base_url}/coins/{asset.key}"
        payload = await self._request_json("GET", url, subject=asset.key)
        if payload is None:
            return None

        try:
            data = CoinResponse.model_validate(payload).market_data
        except ValidationError as exc:
            logger.warning("[%s] provider=coingecko malformed payload: %s", asset.key, exc.errors()[:3])
            return None

        snapshot = MarketSnapshot(
            price=_usd(data.current_price),
            market_cap=_usd(data.market_cap),
            fully_diluted_valuation=_usd(data.fully_diluted_valuation),
            price_change_percentage_24h=data.price_change_percentage_24h,
            total_volume=_usd(data.total_volume),
            market_cap_change_percentage_24h=data.market_cap_change_percentage_24h,
        )
        logger.debug("[%s] source=coingecko status=success", asset.key)
        return snapshot
