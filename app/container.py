"""Dependency Injection container - initialized at app startup."""

import time
from pathlib import Path

import httpx
from loguru import logger

from app.repositories.charts import ChartRepository
from app.repositories.common import CacheRepository
from app.repositories.storage import ObjectStore, TempFileStore
from app.services.auth import AuthService
from app.services.blog import BlogAnalyticsService, BlogArticleService
from app.services.charts import ChartConfigService, ChartDataService
from app.services.configs import ConfigCollection
from app.services.metrics import MetricsService
from app.services.newsletter import NewsletterService
from app.services.updater import AutoUpdater
from settings import (
    API_MAX_ATTEMPTS,
    API_TIMEOUT,
    AUTH_TTL,
    CHART_CONFIG_TTL,
    CHART_DATA_TTL,
    CHARTS_DB_PATH,
    S3_CONDITIONAL_WRITES,
    TEMP_DIR,
    TOPLEDGER_BASE_URL,
    UPDATE_INITIAL_DELAY,
    UPDATE_INTERVAL,
)
from topledger_client import set_api_config


class Container:
    """Application DI container - holds all singleton instances."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(
        self,
        object_store: ObjectStore | None = None,
        db_path: str = CHARTS_DB_PATH,
        temp_dir: Path = TEMP_DIR,
        transport: httpx.AsyncBaseTransport | None = None,
        updater_runner=None,
        clock=time.time,
        conditional_writes: bool = S3_CONDITIONAL_WRITES,
    ) -> None:
        """Initialize all dependencies. Call once at app startup; overrides are for tests."""
        if self._initialized:
            return

        self._clock = clock
        self.started_at = clock()

        set_api_config(TOPLEDGER_BASE_URL, API_TIMEOUT, API_MAX_ATTEMPTS)

        # Repositories (singletons)
        self.store = object_store or ObjectStore()
        self.files = TempFileStore(temp_dir)
        self._chart_repo = ChartRepository(db_path)
        self.chart_cache = CacheRepository(CHART_CONFIG_TTL, name="chart-config", clock=clock)
        self.page_cache = CacheRepository(CHART_CONFIG_TTL, name="chart-page", clock=clock)
        self.data_cache = CacheRepository(CHART_DATA_TTL, name="chart-data", clock=clock)
        self.metrics_cache = CacheRepository(CHART_DATA_TTL, name="metrics", clock=clock)
        self._auth_cache = CacheRepository(AUTH_TTL, name="auth", clock=clock)

        # Services (with injected repos)
        self.chart_configs = ChartConfigService(
            store=self.store,
            chart_repo=self._chart_repo,
            cache=self.chart_cache,
            page_cache=self.page_cache,
        )
        self.chart_data = ChartDataService(
            configs=self.chart_configs,
            cache=self.data_cache,
            transport=transport,
        )
        self.metrics = MetricsService(cache=self.metrics_cache, transport=transport)

        self.tables = ConfigCollection(self.store, prefix="tables/", kind="table")
        self.counters = ConfigCollection(self.store, prefix="counters/", kind="counter")

        self.blog_articles = BlogArticleService(self.store)
        self.blog_analytics = BlogAnalyticsService(self.store, conditional=conditional_writes)

        self.auth = AuthService(self.store, self._auth_cache)
        self.newsletter = NewsletterService(transport=transport)

        self.updater = AutoUpdater(
            files=self.files,
            interval=UPDATE_INTERVAL,
            initial_delay=UPDATE_INITIAL_DELAY,
            runner=updater_runner,
            clock=clock,
        )

        self._initialized = True
        logger.debug("Container initialized (db={}, temp={})", db_path, temp_dir)

    def uptime_seconds(self) -> float:
        return self._clock() - self.started_at

    def api_request_count(self) -> int:
        return self.chart_data.request_count + self.metrics.request_count

    def cache_sizes(self) -> dict[str, int]:
        return {
            "chartConfigs": len(self.chart_cache),
            "chartPages": len(self.page_cache),
            "chartData": len(self.data_cache),
            "metrics": len(self.metrics_cache),
        }

    def shutdown(self) -> None:
        """Stop background work; init() may be called again."""
        if not self._initialized:
            return
        self.updater.stop()
        self.updater.restore_signal_handlers()
        self._initialized = False
        logger.debug("Container shut down")


# Global container instance
container = Container()
