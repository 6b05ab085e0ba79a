"""Charts API."""

from web.api.charts.views import router

__all__ = ["router"]
