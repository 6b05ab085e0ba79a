"""Auth, newsletter and status API."""

from web.api.system.views import router

__all__ = ["router"]
