"""Auth, newsletter, status and health views."""

from fastapi import APIRouter, Depends

from app.container import container
from app.services.charts.configs import utc_now_iso
from web.api.errors import require_status_key

from .schemas import (
    AuthRequest,
    AuthResponse,
    ChangePasswordRequest,
    StatusResponse,
    SubscribeRequest,
    SubscribeResponse,
)

router = APIRouter(tags=["system"])


@router.post("/api/auth", response_model=AuthResponse)
def login(body: AuthRequest) -> AuthResponse:
    return AuthResponse(**container.auth.login(body.password))


@router.post("/api/auth/change-password", response_model=AuthResponse)
def change_password(body: ChangePasswordRequest) -> AuthResponse:
    return AuthResponse(**container.auth.change_password(body.currentPassword, body.newPassword))


@router.post("/api/newsletter/subscribe", response_model=SubscribeResponse)
async def subscribe(body: SubscribeRequest) -> SubscribeResponse:
    return SubscribeResponse(**await container.newsletter.subscribe(body.email))


@router.get("/api/status", response_model=StatusResponse, dependencies=[Depends(require_status_key)])
def status() -> StatusResponse:
    return StatusResponse(
        status="ok",
        uptimeSeconds=round(container.uptime_seconds(), 1),
        caches=container.cache_sizes(),
        apiRequestCount=container.api_request_count(),
        autoUpdater=container.updater.status(),
        timestamp=utc_now_iso(),
    )


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
