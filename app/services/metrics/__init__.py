from app.services.metrics.service import METRICS, MetricsService

__all__ = ["METRICS", "MetricsService"]
