"""Chart domain models."""

from app.models.charts.chart import CHART_DDL, CHART_INDEXES, CHART_TYPES, ChartConfig, DataMapping

__all__ = [
    "CHART_DDL",
    "CHART_INDEXES",
    "CHART_TYPES",
    "ChartConfig",
    "DataMapping",
]
