"""Fixed-metric API views."""

from fastapi import APIRouter, Request

from app.container import container

from .schemas import MetricListResponse, MetricResponse, VolumeCounterResponse

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get("", response_model=MetricListResponse)
def list_metrics() -> MetricListResponse:
    return MetricListResponse(metrics=container.metrics.names())


@router.get("/counters/volume", response_model=VolumeCounterResponse)
async def volume_counter() -> VolumeCounterResponse:
    return VolumeCounterResponse(**await container.metrics.volume_counter())


@router.get("/{name}", response_model=MetricResponse, response_model_exclude_none=True)
async def get_metric(name: str, request: Request) -> MetricResponse:
    """Query params (e.g. `vote_account`, `date_part`) go to the adapter."""
    return MetricResponse(**await container.metrics.get(name, dict(request.query_params)))
