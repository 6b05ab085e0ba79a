"""Table and counter config APIs - same routes over two collections."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from app.container import container
from app.services.configs import ConfigCollection
from web.api.errors import require_admin

from .schemas import ConfigListResponse, ConfigSavedResponse


def collection_router(name: str) -> APIRouter:
    """Routes for `/api/{name}`; `name` is also the container attribute."""
    router = APIRouter(prefix=f"/api/{name}", tags=[name])

    def collection() -> ConfigCollection:
        return getattr(container, name)

    @router.get("", response_model=ConfigListResponse, response_model_exclude_none=True)
    def list_items(pageId: str | None = None, id: str | None = None) -> ConfigListResponse:
        if id:
            return ConfigListResponse(items=[collection().get(id)], source="id", pageId=pageId)
        items, source = collection().list_items(pageId)
        return ConfigListResponse(items=items, source=source, pageId=pageId)

    @router.post("", response_model=ConfigSavedResponse, dependencies=[Depends(require_admin)])
    def save_item(payload: dict[str, Any] = Body(...)) -> ConfigSavedResponse:
        return ConfigSavedResponse(**collection().save(payload))

    @router.delete("", response_model=ConfigSavedResponse, dependencies=[Depends(require_admin)])
    def delete_item(id: str | None = None) -> ConfigSavedResponse:
        return ConfigSavedResponse(**collection().delete(id))

    return router


tables_router = collection_router("tables")
counters_router = collection_router("counters")
