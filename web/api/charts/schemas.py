"""Charts API response schemas."""

from typing import Any

from pydantic import BaseModel


class ChartListResponse(BaseModel):
    """Charts of one page (or all pages)."""

    charts: list[dict[str, Any]]
    source: str
    count: int
    pageId: str | None = None
    timestamp: str


class ChartSavedResponse(BaseModel):
    message: str
    chartId: str
    backupSaved: bool


class ChartUpdatedResponse(BaseModel):
    message: str
    chart: dict[str, Any]
    backupSaved: bool
