"""Blog view / read-time tracking with conditional S3 writes."""

from collections.abc import Callable

from loguru import logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random

from app.errors import PreconditionFailedError, StorageError, UpstreamError, ValidationError
from app.models.blog import AnalyticsSession, BlogAnalytics
from app.repositories.storage import ObjectStore
from app.services.charts.configs import utc_now_iso
from settings import S3_CONDITIONAL_WRITES

ANALYTICS_PREFIX = "blog-analytics/"
MAX_WRITE_ATTEMPTS = 5


def analytics_key(slug: str) -> str:
    return f"{ANALYTICS_PREFIX}{slug}.json"


def _half_up(value: float) -> int:
    return int(value + 0.5)


def format_duration(seconds: float) -> str:
    """42 -> "42s", 150 -> "2m 30s", 120 -> "2m", 3900 -> "1h 5m"."""
    if seconds < 60:
        return f"{_half_up(seconds)}s"
    minutes, remaining = divmod(_half_up(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {remaining}s" if remaining > 0 else f"{minutes}m"
    return f"{minutes // 60}h {minutes % 60}m"


class BlogAnalyticsService:
    """Per-slug read-modify-write guarded by ETag preconditions."""

    def __init__(
        self,
        store: ObjectStore,
        conditional: bool = S3_CONDITIONAL_WRITES,
        now: Callable[[], str] = utc_now_iso,
    ):
        self._store = store
        self._conditional = conditional
        self._now = now

    def track(self, slug: str | None, session_id: str | None, read_time: float | None = 0) -> dict:
        if not slug or not session_id:
            raise ValidationError("Missing required fields")

        try:
            analytics, is_new_view = self._track_once(slug, session_id, read_time or 0)
        except PreconditionFailedError as e:
            raise UpstreamError("Failed to track analytics", details="too many concurrent updates") from e
        except StorageError as e:
            raise UpstreamError("Failed to track analytics", details=e.message) from e

        return {
            "success": True,
            "totalViews": analytics.total_views,
            "totalReadTime": analytics.total_read_time,
            "averageReadTime": analytics.average_read_time,
            "isNewView": is_new_view,
        }

    @retry(
        stop=stop_after_attempt(MAX_WRITE_ATTEMPTS),
        wait=wait_random(0, 0.1),
        retry=retry_if_exception_type(PreconditionFailedError),
        reraise=True,
    )
    def _track_once(self, slug: str, session_id: str, read_time: float) -> tuple[BlogAnalytics, bool]:
        key = analytics_key(slug)
        data, etag = self._store.get_versioned(key)
        analytics = BlogAnalytics.from_json({"slug": slug, **data}) if data else BlogAnalytics(slug=slug)

        session = analytics.find(session_id)
        is_new_view = session is None
        if is_new_view:
            analytics.total_views += 1
            analytics.sessions.append(
                AnalyticsSession(session_id=session_id, timestamp=self._now(), read_time=read_time)
            )
        else:
            session.read_time = read_time
        analytics.recompute()

        if self._conditional:
            try:
                self._store.save_if(key, analytics.to_json(), etag)
            except PreconditionFailedError:
                logger.debug("Concurrent update on {}, retrying", key)
                raise
        else:
            self._store.save(key, analytics.to_json())

        return analytics, is_new_view

    def summary(self, slug: str) -> dict:
        """Totals and human-readable durations; zeros when nothing was tracked."""
        try:
            data = self._store.get(analytics_key(slug))
        except StorageError as e:
            raise UpstreamError("Failed to fetch analytics", details=e.message) from e

        if not data:
            return {
                "totalViews": 0,
                "totalReadTime": 0,
                "averageReadTime": 0,
                "formattedTotalReadTime": "0m",
                "formattedAverageReadTime": "0m",
            }

        analytics = BlogAnalytics.from_json({"slug": slug, **data})
        average = analytics.average_read_time
        return {
            "totalViews": analytics.total_views,
            "totalReadTime": analytics.total_read_time,
            "averageReadTime": average,
            "formattedTotalReadTime": format_duration(analytics.total_read_time),
            "formattedAverageReadTime": format_duration(average),
        }
