"""Distance oracle API client.

The oracle answers social-graph queries: hop distance, shortest-path counts,
follows, and concrete paths between two public keys. Every answer is checked
by the response validators before it is returned.

A 404 means "not in the graph" and maps to the operation's empty value.
Any other non-2xx status raises OracleError.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from ..errors import OracleError, OracleTransportError
from ..models import DEFAULT_SCORING, DistanceInfo, Identity, ScoringConfig, TrustAssessment
from ..scoring import assess
from ..validation import (
    validate_batch,
    validate_common_follows,
    validate_distance_info,
    validate_follows,
    validate_path,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
CONNECT_TIMEOUT = 10.0

# Returned by _fetch for a 404, distinct from a JSON null body.
_NOT_FOUND = object()


class OracleClient:
    """Async client for a remote distance oracle.

    Holds only the base address and transport settings. Each call opens its
    own httpx client, so calls never share state.

    Args:
        base_url: Oracle address. One trailing slash is stripped.
        timeout: Overall request timeout in seconds.
        transport: Optional httpx transport, e.g. for tests or custom pooling.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.timeout = timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"OracleClient({self.base_url!r})"

    # -- internal --

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=min(CONNECT_TIMEOUT, self.timeout)),
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        endpoint: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.debug("Oracle %s %s params=%s", method, url, params)
        async with self._client() as client:
            try:
                return await client.request(method, url, params=params, json=json)
            except httpx.TransportError as exc:
                raise OracleTransportError(endpoint, str(exc) or type(exc).__name__) from exc

    async def _fetch(
        self,
        method: str,
        path: str,
        endpoint: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        not_found_is_empty: bool = True,
    ) -> Any:
        """Send one request and decode its JSON body.

        Returns _NOT_FOUND when the oracle answers 404 and ``not_found_is_empty``.
        """
        response = await self._request(method, path, endpoint, params=params, json=json)

        if not response.is_success:
            if response.status_code == 404 and not_found_is_empty:
                logger.debug("Oracle %s: not found in graph", endpoint)
                return _NOT_FOUND
            logger.warning("Oracle %s returned status %d", endpoint, response.status_code)
            raise OracleError(response.status_code, endpoint)

        try:
            return response.json()
        except ValueError as exc:
            raise OracleTransportError(endpoint, f"invalid JSON body: {exc}") from exc

    # -- Distance --

    async def get_distance(self, from_: str, to: str) -> Optional[int]:
        """Hop distance between two pubkeys, None if unreachable or unknown."""
        info = await self.get_distance_info(from_, to)
        return info.hops if info is not None else None

    async def get_distance_info(self, from_: str, to: str) -> Optional[DistanceInfo]:
        """Full distance answer including path count and any extra fields like bridges."""
        data = await self._fetch("GET", "/distance", "distance", params={"from": from_, "to": to})
        if data is _NOT_FOUND:
            return None
        return DistanceInfo.model_validate(validate_distance_info(data))

    async def get_distance_batch(self, from_: str, targets: Sequence[str]) -> dict[Identity, Optional[int]]:
        """Hop distances from one pubkey to many targets in a single request."""
        data = await self._fetch(
            "POST",
            "/distance/batch",
            "batch",
            json={"from": from_, "targets": list(targets)},
            not_found_is_empty=False,
        )
        validate_batch(data)
        return {Identity(pubkey): hops for pubkey, hops in data.items()}

    # -- Stats & Health --

    async def get_stats(self) -> Any:
        """Oracle statistics. The schema is oracle-defined, so it is returned unvalidated."""
        return await self._fetch("GET", "/stats", "stats", not_found_is_empty=False)

    async def is_healthy(self) -> bool:
        """True if the oracle answers its health check with a 2xx. Never raises."""
        try:
            response = await self._request("GET", "/health", "health")
            return response.is_success
        except Exception as exc:
            logger.info("Oracle health check failed: %s", exc)
            return False

    # -- Follows & Paths --

    async def get_follows(self, pubkey: str) -> list[Identity]:
        """Pubkeys followed by ``pubkey``, in oracle order."""
        data = await self._fetch("GET", "/follows", "follows", params={"pubkey": pubkey})
        if data is _NOT_FOUND:
            return []
        return [Identity(p) for p in validate_follows(data)["follows"]]

    async def get_common_follows(self, from_: str, to: str) -> list[Identity]:
        """Pubkeys followed by both ``from_`` and ``to``."""
        data = await self._fetch("GET", "/common-follows", "common-follows", params={"from": from_, "to": to})
        if data is _NOT_FOUND:
            return []
        return [Identity(p) for p in validate_common_follows(data)["common"]]

    async def get_path(self, from_: str, to: str) -> Optional[list[Identity]]:
        """One concrete shortest path from ``from_`` to ``to``, None if there is none."""
        data = await self._fetch("GET", "/path", "path", params={"from": from_, "to": to})
        if data is _NOT_FOUND:
            return None
        path = validate_path(data).get("path")
        if path is None:
            return None
        return [Identity(p) for p in path]

    # -- Trust --

    async def get_trust(
        self,
        from_: str,
        to: str,
        config: ScoringConfig = DEFAULT_SCORING,
    ) -> TrustAssessment:
        """Score the relationship between two pubkeys from the oracle's distance answer."""
        info = await self.get_distance_info(from_, to)
        return assess(info, config)
