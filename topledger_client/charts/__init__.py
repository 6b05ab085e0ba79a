"""Chart endpoint client."""

from topledger_client.charts.client import TIME_FILTER_DAYS, ChartClient, build_query_params

__all__ = [
    "ChartClient",
    "TIME_FILTER_DAYS",
    "build_query_params",
]
