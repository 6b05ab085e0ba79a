"""Fixed-query metrics (network, DEX) with caching and graceful degradation."""

from collections.abc import Callable

import httpx
from loguru import logger

from app.errors import NotFoundError, UpstreamError, ValidationError
from app.repositories.common import CacheRepository, cache_key
from settings import TL_QUERIES, TOPLEDGER_RESEARCH_URL
from topledger_client import BaseClient, DexClient, NetworkClient, QueryError

# name -> (client class, call)
METRICS: dict[str, tuple[type[BaseClient], Callable]] = {
    "txn_fees": (NetworkClient, lambda c, p: c.txn_fees()),
    "tps": (NetworkClient, lambda c, p: c.tps()),
    "validator_performance": (NetworkClient, lambda c, p: c.validator_performance(p["vote_account"])),
    "dex_volume": (DexClient, lambda c, p: c.volume_by_year()),
    "tvl_velocity": (DexClient, lambda c, p: c.tvl_velocity(p.get("date_part", "D"))),
    "stablecoin_tvl": (DexClient, lambda c, p: c.stablecoin_tvl()),
}

# Metrics whose pages fail outright instead of rendering empty
STRICT_METRICS = {"validator_performance"}


class MetricsService:
    """Named adapters over the TopLedger fixed queries."""

    def __init__(
        self,
        cache: CacheRepository,
        queries: dict[str, tuple[int, str]] = TL_QUERIES,
        research_url: str = TOPLEDGER_RESEARCH_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._cache = cache
        self._queries = queries
        self._research_url = research_url
        self._transport = transport
        self._request_count = 0

    @property
    def request_count(self) -> int:
        return self._request_count

    @staticmethod
    def names() -> list[str]:
        return list(METRICS)

    def _client(self, cls: type[BaseClient]) -> BaseClient:
        if cls is NetworkClient:
            return NetworkClient(self._queries, research_url=self._research_url, transport=self._transport)
        return cls(self._queries, transport=self._transport)

    async def _load(self, name: str, params: dict) -> list[dict]:
        cls, call = METRICS[name]
        async with self._client(cls) as client:
            try:
                points = await call(client, params)
            finally:
                self._request_count += client.request_count
        return [p.model_dump() for p in points]

    async def get(self, name: str, params: dict[str, str] | None = None) -> dict:
        """{metric, data, fromCache[, stale]}; empty data when a lenient metric fails uncached."""
        if name not in METRICS:
            raise NotFoundError(f"Unknown metric: {name}")
        params = params or {}
        if name == "validator_performance" and not params.get("vote_account"):
            raise ValidationError("vote_account is required")

        key = cache_key(name, params)
        entry = self._cache.get(key)
        if entry is not None:
            return {"metric": name, "data": entry.data, "fromCache": True}

        try:
            data = await self._load(name, params)
        except (httpx.HTTPError, QueryError, ValueError) as e:
            stale = self._cache.peek(key)
            if stale is not None:
                logger.warning("Serving stale {} after fetch error: {}", name, e)
                return {"metric": name, "data": stale.data, "fromCache": True, "stale": True}
            if name in STRICT_METRICS:
                raise UpstreamError(f"Failed to fetch {name}", details=str(e)) from e
            logger.error("Error fetching {}: {}", name, e)
            return {"metric": name, "data": [], "fromCache": False}

        self._cache.set(key, data)
        logger.info("Fetched {} ({} points)", name, len(data))
        return {"metric": name, "data": data, "fromCache": False}

    async def volume_counter(self) -> dict:
        """Latest cumulative DEX volume and its change against the previous year."""
        rows = (await self.get("dex_volume"))["data"]
        if len(rows) < 2:
            return {"cumulativeVolume": 0, "percentChange": 0, "isPositive": False}

        current, previous = rows[-1], rows[-2]
        base = previous["cumulative_volume"]
        change = (current["cumulative_volume"] - base) / base * 100 if base else 0.0
        return {
            "cumulativeVolume": current["cumulative_volume"],
            "percentChange": round(change, 2),
            "isPositive": change > 0,
        }
