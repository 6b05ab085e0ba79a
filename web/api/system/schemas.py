"""Auth, newsletter and status API schemas."""

from typing import Any

from pydantic import BaseModel


class AuthRequest(BaseModel):
    password: str | None = None


class ChangePasswordRequest(BaseModel):
    currentPassword: str | None = None
    newPassword: str | None = None


class AuthResponse(BaseModel):
    success: bool
    message: str


class SubscribeRequest(BaseModel):
    email: str | None = None


class SubscribeResponse(BaseModel):
    message: str
    email: str


class StatusResponse(BaseModel):
    """Process health for monitoring."""

    status: str
    uptimeSeconds: float
    caches: dict[str, int]
    apiRequestCount: int
    autoUpdater: dict[str, Any]
    timestamp: str
