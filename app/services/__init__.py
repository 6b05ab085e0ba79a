"""Services package - service class exports."""

from app.services.auth import AuthService
from app.services.blog import BlogAnalyticsService, BlogArticleService
from app.services.charts import ChartConfigService, ChartDataService
from app.services.configs import ConfigCollection
from app.services.metrics import MetricsService
from app.services.newsletter import NewsletterService
from app.services.updater import AutoUpdater

__all__ = [
    "AuthService",
    "AutoUpdater",
    "BlogAnalyticsService",
    "BlogArticleService",
    "ChartConfigService",
    "ChartDataService",
    "ConfigCollection",
    "MetricsService",
    "NewsletterService",
]
