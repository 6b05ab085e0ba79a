"""Chart configuration model and its relational backup table."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CHART_DDL = """
CREATE TABLE IF NOT EXISTS chart (
    id VARCHAR PRIMARY KEY,
    title VARCHAR NOT NULL,
    page VARCHAR NOT NULL,
    config JSON NOT NULL,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
)
"""

CHART_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_chart_page ON chart(page)",
]

CHART_TYPES = ("bar", "line", "stacked-bar", "area", "stacked-area")

# Fields a public (non-admin) reader must never see
PRIVATE_FIELDS = ("apiEndpoint", "apiKey")


class DataMapping(BaseModel):
    """Which row fields feed the axes."""

    x_axis: str | list[str] = Field(alias="xAxis", default="")
    y_axis: str | list[str] | list[dict] = Field(alias="yAxis", default="")
    group_by: str | None = Field(alias="groupBy", default=None)

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def y_fields(self) -> list[str]:
        """Y axis as a flat list of field names."""
        if isinstance(self.y_axis, str):
            return [self.y_axis] if self.y_axis else []
        return [y["field"] if isinstance(y, dict) else y for y in self.y_axis]

    def x_field(self) -> str:
        return self.x_axis[0] if isinstance(self.x_axis, list) else self.x_axis


class ChartConfig(BaseModel):
    """Admin-owned chart definition, stored as camelCase JSON."""

    id: str
    title: str
    page: str
    chart_type: str = Field(alias="chartType")
    subtitle: str | None = None
    section: str | None = None
    api_endpoint: str | None = Field(alias="apiEndpoint", default=None)
    api_key: str | None = Field(alias="apiKey", default=None)
    is_stacked: bool | None = Field(alias="isStacked", default=None)
    color_scheme: str | None = Field(alias="colorScheme", default=None)
    data_mapping: DataMapping = Field(alias="dataMapping", default_factory=DataMapping)
    additional_options: dict[str, Any] | None = Field(alias="additionalOptions", default=None)
    created_at: str | None = Field(alias="createdAt", default=None)
    updated_at: str | None = Field(alias="updatedAt", default=None)

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_json(self) -> dict[str, Any]:
        """Storage form (camelCase, no nulls)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def public_json(self) -> dict[str, Any]:
        """Storage form minus endpoint and key."""
        data = self.to_json()
        for field in PRIVATE_FIELDS:
            data.pop(field, None)
        return data
