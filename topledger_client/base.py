"""Base HTTP client for the TopLedger analytics API."""

import asyncio
from typing import Any

import httpx
from loguru import logger
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

# Default settings
API_BASE_URL = "https://analytics.topledger.xyz/tl/api"
API_TIMEOUT = 60
API_MAX_ATTEMPTS = 1

JOB_DONE = 3
JOB_FAILED = 4


class QueryError(Exception):
    """Malformed query envelope or failed query job."""


def set_api_config(base_url: str, timeout: int, max_attempts: int = 1) -> None:
    """Set API configuration."""
    global API_BASE_URL, API_TIMEOUT, API_MAX_ATTEMPTS
    API_BASE_URL = base_url
    API_TIMEOUT = timeout
    API_MAX_ATTEMPTS = max_attempts


def _is_retryable_error(exc: BaseException) -> bool:
    """Check if exception is retryable (network errors + 5xx server errors)."""
    if isinstance(exc, (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


def _stop_after_configured_attempts(retry_state) -> bool:
    return stop_after_attempt(API_MAX_ATTEMPTS)(retry_state)


def split_api_key(api_key: str | None) -> dict[str, str]:
    """Turn a stored api key (optionally `key&max_age=N`) into query params."""
    if not api_key:
        return {}
    value = api_key.strip()
    if "&max_age=" not in value:
        return {"api_key": value}

    key, max_age = value.split("&max_age=", 1)
    params = {}
    if key.strip():
        params["api_key"] = key.strip()
    if max_age.strip():
        params["max_age"] = max_age.strip()
    return params


def extract_rows(payload: Any, strict: bool = True) -> list[dict]:
    """Pull rows out of a query envelope.

    Strict mode only accepts `{"query_result": {"data": {"rows": [...]}}}`.
    Lenient mode also accepts job envelopes, bare arrays and a few flat
    shapes returned by older endpoints.
    """
    if isinstance(payload, dict):
        rows = ((payload.get("query_result") or {}).get("data") or {}).get("rows")
        if isinstance(rows, list):
            return rows

    if strict:
        raise QueryError("Invalid data format received from API: missing query_result.data.rows")

    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        logger.warning("Unexpected API response type: {}", type(payload).__name__)
        return []

    job = payload.get("job")
    if job:
        status = job.get("status")
        if status == JOB_FAILED and job.get("error"):
            raise QueryError(f"Query error: {job['error']}")
        if status == JOB_DONE:
            rows = ((job.get("query_result") or {}).get("data") or {}).get("rows")
            if rows is None:
                raise QueryError("Query completed but no data found")
            return rows
        raise QueryError(f"Query is still running (status: {status})")

    for field in ("data", "rows", "results"):
        if isinstance(payload.get(field), list):
            return payload[field]

    if payload.get("error"):
        raise QueryError(f"API returned an error: {payload['error']}")

    logger.warning("Unexpected API response format: keys={}", list(payload.keys()))
    return []


class BaseClient:
    """Base async HTTP client with a concurrency cap and optional retries."""

    def __init__(
        self,
        max_concurrent: int = 20,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client: httpx.AsyncClient | None = None
        self._sem = asyncio.Semaphore(max_concurrent)
        self._request_count = 0
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        logger.debug("{}: max_concurrent={}", self.__class__.__name__, max_concurrent)

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            timeout=self._timeout or API_TIMEOUT,
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            headers={"Accept": "application/json", "User-Agent": "TopLedger-Charts/1.0"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        logger.debug("Total API requests: {}", self._request_count)
        if self._client:
            await self._client.aclose()

    @property
    def request_count(self) -> int:
        return self._request_count

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url or API_BASE_URL}/{path.lstrip('/')}"

    @retry(
        stop=_stop_after_configured_attempts,
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception(_is_retryable_error),
        reraise=True,
    )
    async def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> Any:
        """Single HTTP call; raises httpx.HTTPStatusError on non-2xx."""
        async with self._sem:
            self._request_count += 1
            resp = await self._client.request(method, self._url(path), params=params, json=json)
            resp.raise_for_status()
            return resp.json()

    async def _get(self, path: str, params: dict | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def _post(self, path: str, params: dict | None = None, json: dict | None = None) -> Any:
        return await self._request("POST", path, params=params, json=json)

    async def query_rows(
        self,
        query_id: int,
        api_key: str | None,
        parameters: dict | None = None,
        base_url: str | None = None,
    ) -> list[dict]:
        """Rows of a fixed query; POST with parameters, GET otherwise."""
        params = split_api_key(api_key)
        prefix = f"{base_url.rstrip('/')}/" if base_url else ""
        if parameters:
            payload = await self._post(
                f"{prefix}queries/{query_id}/results", params=params, json={"parameters": parameters}
            )
        else:
            payload = await self._get(f"{prefix}queries/{query_id}/results.json", params=params)
        return extract_rows(payload, strict=True)

