"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from app.container import container
from settings import AUTO_UPDATE_ENABLED, BASE_URL
from web.api import blog, charts, metrics, system, temp, updater
from web.api.configs import counters_router, tables_router
from web.api.errors import register_error_handlers


def create_app(auto_update: bool = AUTO_UPDATE_ENABLED, **init_overrides) -> FastAPI:
    """Build the app; `init_overrides` go to `container.init()` on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container.init(**init_overrides)
        if auto_update:
            container.updater.start()
            container.updater.install_signal_handlers()
        logger.info("API started (auto-update {})", "on" if auto_update else "off")
        try:
            yield
        finally:
            container.updater.stop()
            container.shutdown()
            logger.info("API stopped")

    app = FastAPI(
        title="State of Solana API",
        version="0.1.0",
        servers=[{"url": BASE_URL}],
        lifespan=lifespan,
    )
    register_error_handlers(app)

    for router in (
        charts.router,
        tables_router,
        counters_router,
        blog.router,
        metrics.router,
        temp.router,
        updater.router,
        system.router,
    ):
        app.include_router(router)

    return app
