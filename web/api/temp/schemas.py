"""Temp file API schemas."""

from pydantic import BaseModel


class TempFilesCheckResponse(BaseModel):
    """Inventory of temp/chart-data and temp/chart-configs."""

    chartDataExists: bool
    chartConfigsExists: bool
    chartDataFiles: int
    chartConfigFiles: int
    pages: list[str]
    totalSize: str
    timestamp: str
