"""Blog view / read-time analytics entities."""

from dataclasses import dataclass, field
from typing import Any

from app.models.common.base import BaseEntity


@dataclass
class AnalyticsSession(BaseEntity):
    """One reader session on one article."""

    session_id: str
    timestamp: str
    read_time: float = 0
    is_new_view: bool = True

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AnalyticsSession":
        return cls(
            session_id=data["sessionId"],
            timestamp=data.get("timestamp", ""),
            read_time=data.get("readTime") or 0,
            is_new_view=data.get("isNewView", True),
        )


@dataclass
class BlogAnalytics(BaseEntity):
    """Per-article aggregate persisted as `blog-analytics/{slug}.json`."""

    slug: str
    total_views: int = 0
    total_read_time: float = 0
    sessions: list[AnalyticsSession] = field(default_factory=list)

    def find(self, session_id: str) -> AnalyticsSession | None:
        return next((s for s in self.sessions if s.session_id == session_id), None)

    def recompute(self) -> None:
        """Total read time is always the sum over sessions."""
        self.total_read_time = sum(s.read_time for s in self.sessions)

    @property
    def average_read_time(self) -> float:
        return self.total_read_time / self.total_views if self.total_views > 0 else 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "BlogAnalytics":
        return cls(
            slug=data["slug"],
            total_views=data.get("totalViews", 0),
            total_read_time=data.get("totalReadTime", 0),
            sessions=[AnalyticsSession.from_json(s) for s in data.get("sessions", [])],
        )
