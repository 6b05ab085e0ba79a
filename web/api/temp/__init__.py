"""Temp chart data API."""

from web.api.temp.views import router

__all__ = ["router"]
