"""Table and counter config APIs."""

from web.api.configs.views import counters_router, tables_router

__all__ = ["tables_router", "counters_router"]
