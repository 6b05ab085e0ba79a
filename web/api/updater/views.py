"""Auto-updater API views."""

import pydantic
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.container import container
from web.api.errors import ValidationError

from .schemas import InitResponse, TriggerRequest, UpdaterStatusResponse

router = APIRouter(tags=["updater"])


async def _force_flag(request: Request) -> bool:
    """A missing or unreadable body means no force; a malformed flag is a 400."""
    try:
        body = await request.json()
    except ValueError:
        return False
    if not isinstance(body, dict):
        return False
    try:
        return TriggerRequest.model_validate(body).force is True
    except pydantic.ValidationError:
        raise ValidationError("Invalid force flag") from None


@router.post("/api/auto-update-temp-data")
async def trigger_update(request: Request) -> JSONResponse:
    result = await container.updater.trigger(force=await _force_flag(request))
    return JSONResponse(status_code=result.status_code, content=result.to_json())


@router.get("/api/auto-update-temp-data", response_model=UpdaterStatusResponse)
def update_status() -> UpdaterStatusResponse:
    return UpdaterStatusResponse(**container.updater.status())


@router.post("/api/init-auto-updater", response_model=InitResponse)
async def init_updater() -> InitResponse:
    started = container.updater.start()
    message = "Auto-updater initialized" if started else "Auto-updater already running"
    return InitResponse(message=message, isRunning=container.updater.is_running)


@router.get("/api/init-auto-updater", response_model=InitResponse)
def updater_running() -> InitResponse:
    running = container.updater.is_running
    return InitResponse(
        message="Auto-updater is running" if running else "Auto-updater is not running",
        isRunning=running,
    )
