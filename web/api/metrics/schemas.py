"""Metrics API response schemas."""

from typing import Any

from pydantic import BaseModel


class MetricListResponse(BaseModel):
    metrics: list[str]


class MetricResponse(BaseModel):
    """Rows of one named metric, ascending by date."""

    metric: str
    data: list[dict[str, Any]]
    fromCache: bool
    stale: bool | None = None


class VolumeCounterResponse(BaseModel):
    cumulativeVolume: float
    percentChange: float
    isPositive: bool
