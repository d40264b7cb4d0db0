"""
Shared async JSON-over-HTTP plumbing for upstream providers.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_USER_AGENT = "scroll-rank-bot/1.0"


def build_http_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> httpx.AsyncClient:
    """Client shared by every provider: one pool, one per-call timeout."""
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": user_agent, "Accept": "application/json"},
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=10),
        follow_redirects=True,
    )


class HttpJsonProvider:
    """
    Base for providers that speak JSON over HTTP.

    Requests are single attempts. Any transport error, non-2xx status or
    undecodable body is logged and reported as ``None``.
    """

    name = "http"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    def _get_session(self) -> httpx.AsyncClient:
        """Get or lazily create the HTTP client"""
        if self._client is None:
            self._client = build_http_client(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        subject: str = "",
    ) -> Optional[Any]:
        session = self._get_session()
        try:
            response = await session.request(method, url, params=params, json=json_body)
        except httpx.HTTPError as exc:
            logger.warning("[%s] provider=%s request failed: %s", subject, self.name, exc)
            return None

        if response.status_code == 429:
            logger.warning("[%s] provider=%s rate limited", subject, self.name)
            return None
        if not response.is_success:
            logger.warning(
                "[%s] provider=%s HTTP %s: %s",
                subject, self.name, response.status_code, response.text[:200],
            )
            return None

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("[%s] provider=%s invalid JSON: %s", subject, self.name, exc)
            return None
