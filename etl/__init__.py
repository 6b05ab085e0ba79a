"""ETL package - refresh temp chart data from the analytics API."""

from etl.aggregation import aggregate_page, aggregate_rows
from etl.configs import export_chart_configs
from etl.fetch import fetch_all, parameter_combinations
from etl.sync import sync_all

__all__ = [
    "aggregate_page",
    "aggregate_rows",
    "export_chart_configs",
    "fetch_all",
    "parameter_combinations",
    "sync_all",
]
