"""Metrics API."""

from web.api.metrics.views import router

__all__ = ["router"]
