"""Chart repository - relational backup of chart configs."""

import json
from datetime import datetime, timezone

from loguru import logger

from app.models.charts import ChartConfig
from app.repositories.base import BaseRepository


def _ts(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class ChartRepository(BaseRepository):
    """Repository for the `chart` table (id, title, page, serialized config)."""

    def get(self, chart_id: str) -> ChartConfig | None:
        """Reconstruct a chart config from its stored JSON."""
        row = self.fetchone("SELECT config FROM chart WHERE id = ?", [chart_id])
        if not row:
            return None
        logger.debug("DB hit: chart {}", chart_id)
        return ChartConfig.model_validate(json.loads(row[0]))

    def list_charts(self, page: str | None = None) -> list[ChartConfig]:
        """All charts, or the charts of one page."""
        if page:
            rows = self.fetchall("SELECT config FROM chart WHERE page = ? ORDER BY created_at", [page])
        else:
            rows = self.fetchall("SELECT config FROM chart ORDER BY created_at")
        return [ChartConfig.model_validate(json.loads(r[0])) for r in rows]

    def upsert(self, chart: ChartConfig) -> None:
        """Insert or replace a chart row."""
        self.execute(
            """
            INSERT OR REPLACE INTO chart (id, title, page, config, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                chart.id,
                chart.title,
                chart.page,
                json.dumps(chart.to_json()),
                _ts(chart.created_at),
                _ts(chart.updated_at),
            ],
        )
        logger.debug("DB saved: chart {}", chart.id)

    def delete(self, chart_id: str) -> bool:
        """Delete a chart row; False if it did not exist."""
        existed = self.fetchone("SELECT COUNT(*) FROM chart WHERE id = ?", [chart_id])[0] > 0
        self.execute("DELETE FROM chart WHERE id = ?", [chart_id])
        return existed

    def count(self) -> int:
        return self.fetchone("SELECT COUNT(*) FROM chart")[0]
