"""Chart data proxy - fetch rows for a stored chart, cached with stale-on-error."""

import asyncio

import httpx
from loguru import logger

from app.errors import UpstreamError, ValidationError
from app.repositories.common import CacheRepository, cache_key
from app.services.charts.configs import ChartConfigService
from topledger_client import ChartClient, QueryError


def envelope(rows: list, from_cache: bool, stale: bool = False) -> dict:
    """Rows in the TopLedger shape the renderers expect."""
    body = {"query_result": {"data": {"rows": rows}}, "fromCache": from_cache}
    if stale:
        body["stale"] = True
    return body


class ChartDataService:
    """Keeps API keys server-side; one cache entry per (chart, filter set)."""

    def __init__(
        self,
        configs: ChartConfigService,
        cache: CacheRepository,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._configs = configs
        self._cache = cache
        self._transport = transport
        self._request_count = 0

    @property
    def request_count(self) -> int:
        return self._request_count

    async def get_rows(self, chart_id: str, filters: dict[str, str] | None = None) -> dict:
        chart = await asyncio.to_thread(self._configs.get, chart_id)
        if not chart.api_endpoint:
            raise ValidationError("Chart has no API endpoint configured")

        key = cache_key(chart_id, filters)
        entry = self._cache.get(key)
        if entry is not None:
            return envelope(entry.data, from_cache=True)

        try:
            rows = await self._fetch(chart.api_endpoint, chart.api_key, filters)
        except (httpx.HTTPError, QueryError, ValueError) as e:
            stale = self._cache.peek(key)
            if stale is not None:
                logger.warning("Serving stale data for chart {} after fetch error: {}", chart_id, e)
                return envelope(stale.data, from_cache=True, stale=True)
            logger.error("Chart {} fetch failed with nothing cached: {}", chart_id, e)
            raise UpstreamError("Failed to fetch chart data", details=str(e)) from e

        self._cache.set(key, rows)
        logger.info("Fetched {} rows for chart {}", len(rows), chart_id)
        return envelope(rows, from_cache=False)

    async def _fetch(self, endpoint: str, api_key: str | None, filters: dict[str, str] | None) -> list[dict]:
        async with ChartClient(transport=self._transport) as client:
            try:
                return await client.fetch(endpoint, api_key, filters)
            finally:
                self._request_count += client.request_count
