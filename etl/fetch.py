"""Fetch data for every exported chart, page by page."""

import asyncio
import time
from datetime import datetime, timezone

import httpx
from loguru import logger

from app.repositories.storage import TempFileStore
from settings import FETCH_BATCH_DELAY, FETCH_BATCH_SIZE, FETCH_PARAM_DELAY, FETCH_TIMEOUT, MAX_CONCURRENT
from topledger_client import ChartClient, QueryError


def _filters(chart: dict) -> dict:
    return (chart.get("additionalOptions") or {}).get("filters") or {}


def _first(options: list | None):
    return options[0] if options else None


def parameter_combinations(chart: dict) -> list[dict]:
    """Filter values to fetch for a chart.

    Currency options unless the filter is a field switcher; otherwise time
    options (only the first when the client aggregates time itself).
    """
    options = chart.get("additionalOptions") or {}
    filters = _filters(chart)
    combos: list[dict] = [{}]

    currency = filters.get("currencyFilter")
    if currency and currency.get("options") and currency.get("type") != "field_switcher":
        combos = [{**c, "currency": o} for c in combos for o in currency["options"]]

    time_filter = filters.get("timeFilter")
    if time_filter and time_filter.get("options") and not currency:
        values = time_filter["options"][:1] if options.get("enableTimeAggregation") else time_filter["options"]
        combos = [{**c, "timeFilter": v} for c in combos for v in values]

    return combos


def build_parameters(chart: dict, combo: dict) -> dict:
    """Query parameters for one combination; unset filters use their first option."""
    filters = _filters(chart)
    params = {}

    currency = filters.get("currencyFilter")
    if currency and currency.get("type") != "field_switcher":
        value = combo.get("currency") or _first(currency.get("options"))
        if value is not None:
            params[currency.get("paramName", "currency")] = value

    for name, key in (("timeFilter", "timeFilter"), ("displayMode", "displayModeFilter")):
        option = filters.get(key)
        if not option:
            continue
        value = combo.get(name) or _first(option.get("options"))
        if value is not None:
            params[option.get("paramName", name)] = value

    return params


async def fetch_chart(client: ChartClient, chart: dict, combo: dict | None = None) -> dict:
    """One fetch; never raises, failures come back as `success: False`."""
    params = build_parameters(chart, combo or {})
    base = {"chartId": chart.get("id"), "title": chart.get("title")}

    if not chart.get("apiEndpoint"):
        return {**base, "success": False, "error": "No API endpoint configured"}

    try:
        rows = await client.fetch_with_parameters(chart["apiEndpoint"], chart.get("apiKey"), params)
    except httpx.TimeoutException:
        error = f"API request timed out after {FETCH_TIMEOUT} seconds"
    except (httpx.HTTPError, QueryError, ValueError) as e:
        error = str(e)
    else:
        result = {**base, "success": True, "data": rows, "timestamp": int(time.time() * 1000)}
        if params:
            result["parameters"] = params
        return result

    logger.warning("Error fetching data for {}: {}", chart.get("title"), error)
    return {**base, "success": False, "error": error, "parameters": combo or {}}


async def fetch_chart_all(client: ChartClient, chart: dict, param_delay: float = FETCH_PARAM_DELAY) -> dict:
    """Fetch every filter combination; the first non-empty one is the primary data."""
    if not _filters(chart):
        return await fetch_chart(client, chart)

    combos = parameter_combinations(chart)
    results, datasets = [], []
    for combo in combos:
        result = await fetch_chart(client, chart, combo)
        results.append(result)
        if result["success"] and result.get("data"):
            datasets.append({"parameters": result.get("parameters", {}), "data": result["data"]})
        await asyncio.sleep(param_delay)

    if not datasets:
        return results[-1] if results else {"chartId": chart.get("id"), "title": chart.get("title"), "success": False}

    return {
        "chartId": chart.get("id"),
        "title": chart.get("title"),
        "success": True,
        "datasets": datasets,
        "data": datasets[0]["data"],
        "parameters": datasets[0]["parameters"],
        "timestamp": int(time.time() * 1000),
        "totalCombinations": len(combos),
        "successfulCombinations": len(datasets),
        "failedCombinations": len(combos) - len(datasets),
        "availableParameters": [d["parameters"] for d in datasets],
    }


async def fetch_page(
    client: ChartClient,
    charts: list[dict],
    batch_size: int = FETCH_BATCH_SIZE,
    batch_delay: float = FETCH_BATCH_DELAY,
    param_delay: float = FETCH_PARAM_DELAY,
) -> list[dict]:
    """Charts in small concurrent batches; one failure never aborts the page."""
    results = []
    for start in range(0, len(charts), batch_size):
        batch = charts[start : start + batch_size]
        outcomes = await asyncio.gather(
            *(fetch_chart_all(client, c, param_delay) for c in batch),
            return_exceptions=True,
        )
        for chart, outcome in zip(batch, outcomes):
            if isinstance(outcome, Exception):
                logger.error("Chart {} failed: {}", chart.get("title"), outcome)
                outcome = {"chartId": chart.get("id"), "title": chart.get("title"), "success": False, "error": str(outcome)}
            results.append(outcome)
        if start + batch_size < len(charts):
            await asyncio.sleep(batch_delay)
    return results


async def fetch_all(
    files: TempFileStore,
    transport: httpx.AsyncBaseTransport | None = None,
    batch_size: int = FETCH_BATCH_SIZE,
    batch_delay: float = FETCH_BATCH_DELAY,
    param_delay: float = FETCH_PARAM_DELAY,
) -> dict:
    """Fetch every exported page, write `chart-data/{page}.json` and `_summary.json`."""
    pages = files.config_pages()
    total = succeeded = failed = 0

    async with ChartClient(max_concurrent=MAX_CONCURRENT, timeout=FETCH_TIMEOUT, transport=transport) as client:
        for page_id in pages:
            charts = files.read_page_configs(page_id).get("charts", [])
            if not charts:
                logger.info("No charts for page {}", page_id)
                continue

            logger.info("Page {}: fetching {} charts", page_id, len(charts))
            results = await fetch_page(client, charts, batch_size, batch_delay, param_delay)
            ok = sum(1 for r in results if r.get("success"))
            total += len(charts)
            succeeded += ok
            failed += len(results) - ok

            files.write_page_data(
                page_id,
                {
                    "pageId": page_id,
                    "fetchedAt": datetime.now(timezone.utc).isoformat(),
                    "charts": results,
                    "summary": {
                        "totalCharts": len(charts),
                        "successfulFetches": ok,
                        "failedFetches": len(results) - ok,
                    },
                },
            )

    summary = {
        "fetchedAt": datetime.now(timezone.utc).isoformat(),
        "totalPages": len(pages),
        "totalCharts": total,
        "successfulFetches": succeeded,
        "failedFetches": failed,
        "successRate": f"{succeeded / total * 100:.2f}%" if total else "0%",
    }
    files.write_summary(summary)
    logger.info("Fetched {} charts: {} ok, {} failed ({})", total, succeeded, failed, summary["successRate"])
    return summary
