from app.services.blog.analytics import BlogAnalyticsService, format_duration
from app.services.blog.articles import BlogArticleService

__all__ = ["BlogAnalyticsService", "BlogArticleService", "format_duration"]
