"""Chart endpoint client - arbitrary chart configs pointing at TopLedger queries."""

from loguru import logger

from topledger_client.base import BaseClient, extract_rows, split_api_key

# Time filter codes -> `days` query param
TIME_FILTER_DAYS = {
    "D": "1",
    "W": "7",
    "M": "30",
    "Q": "90",
    "Y": "365",
}


def build_query_params(api_key: str | None, filters: dict[str, str] | None = None) -> dict[str, str]:
    """Query params for a chart proxy GET: api key parts plus mapped filters."""
    params = split_api_key(api_key)
    for key, value in (filters or {}).items():
        if key == "timeFilter":
            params["days"] = TIME_FILTER_DAYS.get(value, value)
        else:
            params[key] = value
    return params


class ChartClient(BaseClient):
    """Client for chart configs that carry their own endpoint and key."""

    async def fetch(self, endpoint: str, api_key: str | None, filters: dict[str, str] | None = None) -> list[dict]:
        """GET {endpoint}?api_key=...&filters - rows in any known envelope."""
        payload = await self._get(endpoint, params=build_query_params(api_key, filters))
        rows = extract_rows(payload, strict=False)
        logger.debug("Fetched {} rows from {}", len(rows), endpoint)
        return rows

    async def fetch_with_parameters(
        self,
        endpoint: str,
        api_key: str | None,
        parameters: dict | None = None,
    ) -> list[dict]:
        """POST {"parameters": ...} when parameters are set, GET otherwise."""
        params = split_api_key(api_key)
        if parameters:
            payload = await self._post(endpoint, params=params, json={"parameters": parameters})
        else:
            payload = await self._get(endpoint, params=params)
        return extract_rows(payload, strict=False)
