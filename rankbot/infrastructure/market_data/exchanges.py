"""
Exchange ticker providers used as market data fallback.

Each provider returns ``(last_price, change_pct_24h)`` for a spot pair, or
None when the pair is unknown, the exchange errors, or the payload cannot
be parsed.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import httpx

from rankbot.infrastructure.http import DEFAULT_TIMEOUT_SECONDS, HttpJsonProvider

logger = logging.getLogger(__name__)

PriceAndChange = Tuple[float, float]


def _change_from_open(last: float, open_24h: float) -> float:
    if open_24h == 0:
        raise ValueError("24h open is zero, cannot calculate change")
    return (last / open_24h - 1) * 100


class ExchangeProvider(HttpJsonProvider):
    base_url = ""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        super().__init__(client=client, timeout=timeout)

    def _ticker_request(self, symbol: str) -> Tuple[str, dict]:
        raise NotImplementedError

    def _parse(self, payload: Any) -> PriceAndChange:
        raise NotImplementedError

    async def get_price_and_change(self, symbol: str) -> Optional[PriceAndChange]:
        if not symbol:
            return None

        url, params = self._ticker_request(symbol)
        payload = await self._request_json("GET", url, params=params, subject=symbol)
        if payload is None:
            return None

        try:
            return self._parse(payload)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("[%s] provider=%s unusable ticker: %s", symbol, self.name, exc)
            return None


class BinanceProvider(ExchangeProvider):
    name = "binance"
    base_url = "https://api.binance.com"

    def _ticker_request(self, symbol: str) -> Tuple[str, dict]:
        return f"{self.base_url}/api/v3/ticker/24hr", {"symbol": symbol}

    def _parse(self, payload: Any) -> PriceAndChange:
        return float(payload["lastPrice"]), float(payload["priceChangePercent"])


class OKXProvider(ExchangeProvider):
    name = "okx"
    base_url = "https://www.okx.com"

    def _ticker_request(self, symbol: str) -> Tuple[str, dict]:
        return f"{self.base_url}/api/v5/market/ticker", {"instId": symbol}

    def _parse(self, payload: Any) -> PriceAndChange:
        if payload.get("code") != "0":
            raise ValueError(f"OKX API error code: {payload.get('code')}")
        data = payload.get("data") or []
        if not data:
            raise ValueError("no data returned")
        last = float(data[0]["last"])
        return last, _change_from_open(last, float(data[0]["open24h"]))


class BybitProvider(ExchangeProvider):
    name = "bybit"
    base_url = "https://api.bybit.com"

    def _ticker_request(self, symbol: str) -> Tuple[str, dict]:
        return f"{self.base_url}/v5/market/tickers", {"category": "spot", "symbol": symbol}

    def _parse(self, payload: Any) -> PriceAndChange:
        if payload.get("retCode") != 0:
            raise ValueError(f"Bybit API error: {payload.get('retMsg')} (code {payload.get('retCode')})")
        tickers = (payload.get("result") or {}).get("list") or []
        if not tickers:
            raise ValueError("no data returned")
        # price24hPcnt is a fraction: "0.0123" means 1.23%
        return float(tickers[0]["lastPrice"]), float(tickers[0]["price24hPcnt"]) * 100


class BitgetProvider(ExchangeProvider):
    name = "bitget"
    base_url = "https://api.bitget.com"

    def _ticker_request(self, symbol: str) -> Tuple[str, dict]:
        return f"{self.base_url}/api/spot/v1/market/ticker", {"symbol": symbol}

    def _parse(self, payload: Any) -> PriceAndChange:
        if payload.get("code") != "00000":
            raise ValueError(f"Bitget API error: {payload.get('msg')} (code {payload.get('code')})")
        data = payload["data"]
        close = float(data["close"])
        return close, _change_from_open(close, float(data["open"]))


def default_exchange_providers(client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
    """Fallback order: Binance, OKX, Bybit, Bitget."""
    return [
        BinanceProvider(client=client, timeout=timeout),
        OKXProvider(client=client, timeout=timeout),
        BybitProvider(client=client, timeout=timeout),
        BitgetProvider(client=client, timeout=timeout),
    ]
