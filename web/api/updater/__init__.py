"""Auto-updater API."""

from web.api.updater.views import router

__all__ = ["router"]
