"""Charts API views - thin layer over services."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from app.container import container
from app.services.charts.configs import utc_now_iso
from web.api.errors import is_admin, require_admin

from .schemas import ChartListResponse, ChartSavedResponse, ChartUpdatedResponse

router = APIRouter(tags=["charts"])


@router.get("/api/charts", response_model=ChartListResponse)
def list_charts(request: Request, page: str | None = None, skipCache: bool = False) -> ChartListResponse:
    """Complete chart configs of a page; sanitized unless admin."""
    charts, source = container.chart_configs.list_charts(page, skip_cache=skipCache)
    admin = is_admin(request)
    return ChartListResponse(
        charts=[c.to_json() if admin else c.public_json() for c in charts],
        source=source,
        count=len(charts),
        pageId=page,
        timestamp=utc_now_iso(),
    )


@router.post("/api/charts", response_model=ChartSavedResponse, dependencies=[Depends(require_admin)])
def create_chart(payload: dict[str, Any] = Body(...)) -> ChartSavedResponse:
    return ChartSavedResponse(**container.chart_configs.create(payload))


@router.get("/api/charts/{chart_id}")
def get_chart(chart_id: str, request: Request) -> dict:
    chart = container.chart_configs.get(chart_id)
    if is_admin(request):
        return {**chart.to_json(), "sanitized": False}
    return {**chart.public_json(), "sanitized": True}


@router.put(
    "/api/charts/{chart_id}",
    response_model=ChartUpdatedResponse,
    dependencies=[Depends(require_admin)],
)
def update_chart(chart_id: str, payload: dict[str, Any] = Body(...)) -> ChartUpdatedResponse:
    return ChartUpdatedResponse(**container.chart_configs.update(chart_id, payload))


@router.delete(
    "/api/charts/{chart_id}",
    response_model=ChartSavedResponse,
    dependencies=[Depends(require_admin)],
)
def delete_chart(chart_id: str) -> ChartSavedResponse:
    return ChartSavedResponse(**container.chart_configs.delete(chart_id))


@router.get("/api/admin/charts/{chart_id}", dependencies=[Depends(require_admin)])
def get_admin_chart(chart_id: str) -> dict:
    """Full config including endpoint and key."""
    return container.chart_configs.get(chart_id).to_json()


@router.get("/api/chart-data/{chart_id}")
async def get_chart_data(chart_id: str, request: Request) -> dict:
    """Proxy rows for a chart; query params are the filter values."""
    filters = dict(request.query_params)
    return await container.chart_data.get_rows(chart_id, filters or None)
