"""Config collection API schemas."""

from typing import Any

from pydantic import BaseModel


class ConfigListResponse(BaseModel):
    items: list[dict[str, Any]]
    source: str
    pageId: str | None = None


class ConfigSavedResponse(BaseModel):
    message: str
    id: str
