"""Models package - DDL and entities for all domains."""

from app.models.blog import AnalyticsSession, BlogAnalytics
from app.models.charts import CHART_DDL, CHART_INDEXES, ChartConfig, DataMapping
from app.models.common import BaseEntity, CachedEntry
from app.models.updater import AutoUpdateState, UpdateResult

ALL_DDL = [
    # Charts
    CHART_DDL,
    *CHART_INDEXES,
]

__all__ = [
    # Common
    "BaseEntity",
    "CachedEntry",
    # Charts
    "CHART_DDL",
    "ChartConfig",
    "DataMapping",
    # Blog
    "AnalyticsSession",
    "BlogAnalytics",
    # Updater
    "AutoUpdateState",
    "UpdateResult",
    # All DDL
    "ALL_DDL",
]
