"""
JSON-RPC gas price provider (eth_gasPrice).
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from rankbot.domain.models import GasReading, TrackedNetwork
from rankbot.infrastructure.http import DEFAULT_TIMEOUT_SECONDS, HttpJsonProvider

logger = logging.getLogger(__name__)

WEI_PER_GWEI = 1e9


def gas_price_request() -> dict:
    return {"jsonrpc": "2.0", "method": "eth_gasPrice", "params": [], "id": 1}


def parse_gas_price(result: str) -> float:
    """Hex quantity in wei ("0x3b9aca00") to gwei (1.0)."""
    return int(result, 16) / WEI_PER_GWEI


class RpcGasPriceProvider(HttpJsonProvider):
    name = "rpc"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        super().__init__(client=client, timeout=timeout)

    async def fetch_gas_price(self, network: TrackedNetwork) -> GasReading:
        """Never raises; a failed call yields a reading with ``gwei=None``."""
        payload = await self._request_json(
            "POST", network.rpc_url, json_body=gas_price_request(), subject=network.name
        )
        if payload is None:
            return GasReading(network=network, gwei=None)

        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, str):
            error = payload.get("error") if isinstance(payload, dict) else payload
            logger.warning("[%s] eth_gasPrice returned no result: %s", network.name, error)
            return GasReading(network=network, gwei=None)

        try:
            gwei = parse_gas_price(result)
        except ValueError:
            logger.warning("[%s] eth_gasPrice result is not hex: %r", network.name, result)
            return GasReading(network=network, gwei=None)

        return GasReading(network=network, gwei=gwei)
