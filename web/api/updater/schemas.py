"""Auto-updater API schemas."""

from pydantic import BaseModel


class TriggerRequest(BaseModel):
    """`force` accepts JSON booleans and the usual string forms ("true", "false", "1", "0")."""

    force: bool | None = None


class UpdaterStatusResponse(BaseModel):
    isRunning: bool
    isUpdating: bool
    lastUpdate: str | None = None
    nextUpdate: str | None = None
    timeUntilNextMs: int
    timeUntilNextMinutes: int
    updateIntervalMinutes: float


class InitResponse(BaseModel):
    message: str
    isRunning: bool
