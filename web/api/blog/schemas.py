"""Blog API schemas."""

import math
from typing import Any

from pydantic import BaseModel, field_validator


class ToggleHeroRequest(BaseModel):
    slug: str | None = None
    isHero: bool = False


class ArticleListResponse(BaseModel):
    blogPosts: list[dict[str, Any]]
    count: int


class TrackRequest(BaseModel):
    """Tracking beacon; read time arrives as a number or a numeric string."""

    slug: str | None = None
    sessionId: str | None = None
    readTime: float = 0

    @field_validator("readTime", mode="before")
    @classmethod
    def _read_time(cls, value: Any) -> float:
        """null, blank, non-numeric or negative read times count as 0."""
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return 0
        return seconds if math.isfinite(seconds) and seconds > 0 else 0


class TrackResponse(BaseModel):
    success: bool
    totalViews: int
    totalReadTime: float
    averageReadTime: float
    isNewView: bool


class AnalyticsSummaryResponse(BaseModel):
    totalViews: int
    totalReadTime: float
    averageReadTime: float
    formattedTotalReadTime: str
    formattedAverageReadTime: str
