"""Blog API."""

from web.api.blog.views import router

__all__ = ["router"]
