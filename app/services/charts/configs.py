"""Chart config service - S3 primary, DuckDB backup, memory cache in front."""

import uuid
from collections.abc import Callable
from datetime import datetime, timezone

import duckdb
import pydantic
from loguru import logger

from app.errors import NotFoundError, StorageError, UpstreamError, ValidationError
from app.models.charts import ChartConfig
from app.repositories.charts import ChartRepository
from app.repositories.common import CacheRepository
from app.repositories.storage import ObjectStore

CHARTS_PREFIX = "charts/"
BATCH_PREFIX = "charts/batches/"
REQUIRED_FIELDS = ("title", "page", "chartType")
ALL_CHARTS = "__all__"


def chart_key(chart_id: str) -> str:
    return f"{CHARTS_PREFIX}{chart_id}.json"


def batch_key(page: str) -> str:
    return f"{BATCH_PREFIX}page_{page}.json"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_chart(payload) -> ChartConfig:
    """Validate an incoming chart payload; a missing id is generated."""
    if not isinstance(payload, dict) or not all(payload.get(f) for f in REQUIRED_FIELDS):
        raise ValidationError("Invalid chart configuration")

    data = dict(payload)
    if not data.get("id"):
        data["id"] = f"chart_{uuid.uuid4().hex[:12]}"
    try:
        return ChartConfig.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError("Invalid chart configuration") from e


def complete_chart(data) -> ChartConfig | None:
    """Stored object as a chart, or None for batch files and partial configs."""
    if not isinstance(data, dict) or not data.get("id"):
        return None
    if not all(data.get(f) for f in REQUIRED_FIELDS):
        return None
    try:
        return ChartConfig.model_validate(data)
    except pydantic.ValidationError:
        return None


class ChartConfigService:
    """Reads go cache -> S3 -> DuckDB (with read-repair); writes go S3 then DuckDB."""

    def __init__(
        self,
        store: ObjectStore,
        chart_repo: ChartRepository,
        cache: CacheRepository,
        page_cache: CacheRepository,
        now: Callable[[], str] = utc_now_iso,
    ):
        self._store = store
        self._repo = chart_repo
        self._cache = cache
        self._pages = page_cache
        self._now = now

    # Reads

    def get(self, chart_id: str) -> ChartConfig:
        """Chart by id; NotFoundError if neither store has it."""
        entry = self._cache.get(chart_id)
        if entry is not None:
            return entry.data

        chart = None
        try:
            chart = complete_chart(self._store.get(chart_key(chart_id)))
        except StorageError as e:
            logger.warning("S3 read failed for chart {}, trying DB: {}", chart_id, e.message)

        if chart is None:
            chart = self._from_backup(chart_id)

        if chart is None:
            raise NotFoundError("Chart not found")

        self._cache.set(chart_id, chart)
        return chart

    def _from_backup(self, chart_id: str) -> ChartConfig | None:
        try:
            chart = self._repo.get(chart_id)
        except duckdb.Error as e:
            logger.warning("DB read failed for chart {}: {}", chart_id, e)
            return None
        if chart is None:
            return None

        logger.info("Chart {} restored from DB, writing back to S3", chart_id)
        try:
            self._store.save(chart_key(chart_id), chart.to_json())
        except StorageError as e:
            logger.warning("Read-repair of chart {} failed: {}", chart_id, e.message)
        return chart

    def list_charts(self, page: str | None = None, skip_cache: bool = False) -> tuple[list[ChartConfig], str]:
        """(charts, source) for one page or for all pages."""
        key = page or ALL_CHARTS
        if skip_cache:
            self._pages.delete(key)

        entry = self._pages.get(key)
        if entry is not None:
            return entry.data, "memory_cache"

        if page:
            charts = self._from_batch(page)
            if charts:
                self._pages.set(key, charts)
                return charts, "batch_file"

        try:
            charts = self._scan(page)
            source = "s3_scan"
        except StorageError as e:
            logger.warning("S3 listing failed, falling back to DB: {}", e.message)
            try:
                charts = self._repo.list_charts(page)
            except duckdb.Error as db_err:
                raise UpstreamError("Failed to fetch charts", details=str(db_err)) from db_err
            source = "database"

        if page and charts and source == "s3_scan":
            self._save_batch(page, charts)

        self._pages.set(key, charts)
        return charts, source

    def _from_batch(self, page: str) -> list[ChartConfig]:
        try:
            batch = self._store.get(batch_key(page))
        except StorageError as e:
            logger.warning("Batch file for page {} unreadable: {}", page, e.message)
            return []
        if not batch:
            return []
        charts = [c for c in (complete_chart(d) for d in batch.get("charts", [])) if c is not None]
        logger.debug("Batch file hit for page {}: {} charts", page, len(charts))
        return charts

    def _save_batch(self, page: str, charts: list[ChartConfig]) -> None:
        payload = {"pageId": page, "charts": [c.to_json() for c in charts], "updatedAt": self._now()}
        try:
            self._store.save(batch_key(page), payload)
        except StorageError as e:
            logger.warning("Could not write batch file for page {}: {}", page, e.message)

    def _scan(self, page: str | None) -> list[ChartConfig]:
        keys = [k for k in self._store.list(CHARTS_PREFIX) if k.endswith(".json") and not k.startswith(BATCH_PREFIX)]
        charts = []
        for key in keys:
            chart = complete_chart(self._store.get(key))
            if chart is not None and (page is None or chart.page == page):
                charts.append(chart)
        logger.info("Scanned {} chart objects, {} matched page {}", len(keys), len(charts), page or "*")
        return charts

    # Writes

    def create(self, payload: dict) -> dict:
        chart = parse_chart(payload)
        now = self._now()
        chart.updated_at = now
        chart.created_at = chart.created_at or now

        backup_saved = self._write(chart)
        logger.info("Chart {} saved (page {})", chart.id, chart.page)
        return {"message": "Chart saved successfully", "chartId": chart.id, "backupSaved": backup_saved}

    def update(self, chart_id: str, payload: dict) -> dict:
        existing = self.get(chart_id)
        chart = parse_chart({**(payload or {}), "id": chart_id})
        now = self._now()
        chart.created_at = existing.created_at or now
        chart.updated_at = now

        backup_saved = self._write(chart)
        if existing.page != chart.page:
            self._invalidate_page(existing.page)
        logger.info("Chart {} updated", chart_id)
        return {"message": "Chart updated successfully", "chart": chart.to_json(), "backupSaved": backup_saved}

    def delete(self, chart_id: str) -> dict:
        chart = self.get(chart_id)
        try:
            self._store.delete(chart_key(chart_id))
        except StorageError as e:
            raise UpstreamError("Failed to delete chart from S3", details=e.message) from e

        self._cache.delete(chart_id)
        self._invalidate_page(chart.page)
        backup_saved = self._backup(lambda: self._repo.delete(chart_id), chart_id)
        logger.info("Chart {} deleted", chart_id)
        return {"message": "Chart deleted successfully", "chartId": chart_id, "backupSaved": backup_saved}

    def _write(self, chart: ChartConfig) -> bool:
        """S3 first (failure aborts), then best-effort DB. Returns whether the DB write succeeded."""
        try:
            self._store.save(chart_key(chart.id), chart.to_json())
        except StorageError as e:
            raise UpstreamError("Failed to save chart to S3", details=e.message) from e

        self._cache.set(chart.id, chart)
        self._invalidate_page(chart.page)
        return self._backup(lambda: self._repo.upsert(chart), chart.id)

    def _backup(self, write: Callable[[], object], chart_id: str) -> bool:
        try:
            write()
        except duckdb.Error as e:
            logger.warning("DB backup failed for chart {}: {}", chart_id, e)
            return False
        return True

    def _invalidate_page(self, page: str) -> None:
        self._pages.delete(page)
        self._pages.delete(ALL_CHARTS)
        try:
            self._store.delete(batch_key(page))
        except StorageError as e:
            logger.warning("Could not drop batch file for page {}: {}", page, e.message)

    def clear_cache(self) -> None:
        self._cache.clear()
        self._pages.clear()
