"""Auto-updater state and trigger outcome."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.models.common.base import BaseEntity


def iso_ms(epoch_ms: int) -> str:
    """Epoch milliseconds as an ISO-8601 UTC string."""
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class AutoUpdateState(BaseEntity):
    """Process-wide updater state; times are epoch ms."""

    interval_ms: int
    is_running: bool = False
    is_updating: bool = False
    last_update_time: int = 0

    def next_update_time(self) -> int:
        return self.last_update_time + self.interval_ms

    def time_remaining_ms(self, now_ms: int) -> int:
        return max(0, self.interval_ms - (now_ms - self.last_update_time))


@dataclass
class UpdateResult(BaseEntity):
    """Outcome of one trigger call."""

    success: bool
    message: str
    status_code: int = 200
    last_update: str | None = None
    next_update: str | None = None
    time_remaining_ms: int | None = None
    output: str | None = None
    error: str | None = None

    def to_json(self) -> dict[str, Any]:
        """Response body; the status code travels on the HTTP response instead."""
        data = super().to_json(drop_none=True)
        data.pop("statusCode")
        return data
