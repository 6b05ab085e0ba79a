"""Blog domain models."""

from app.models.blog.analytics import AnalyticsSession, BlogAnalytics

__all__ = [
    "AnalyticsSession",
    "BlogAnalytics",
]
