"""Auto-updater models."""

from app.models.updater.state import AutoUpdateState, UpdateResult, iso_ms

__all__ = [
    "AutoUpdateState",
    "UpdateResult",
    "iso_ms",
]
