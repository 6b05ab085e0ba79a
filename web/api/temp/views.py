"""File-backed chart data API views (output of sync_data.py)."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from app.container import container
from etl.aggregation import aggregate_page
from web.api.errors import NotFoundError, validate_period

from .schemas import TempFilesCheckResponse

router = APIRouter(tags=["temp"])

CACHE_HEADERS = {"Cache-Control": "public, max-age=300, s-maxage=600"}


@router.get("/api/temp-data-compressed/{page_id}")
def get_page_data(page_id: str) -> JSONResponse:
    data, compressed = container.files.read_page_data(page_id)
    headers = {**CACHE_HEADERS, "X-Data-Source": "compressed" if compressed else "uncompressed"}
    return JSONResponse(content=data, headers=headers)


@router.get("/api/temp-data-aggregated/{page_id}")
def get_aggregated_page_data(page_id: str, period: str | None = None) -> JSONResponse:
    """Page data re-bucketed by W/M/Q/Y; raw rows when no period is given."""
    data, compressed = container.files.read_page_data(page_id)
    if not period:
        return JSONResponse(content=data, headers=CACHE_HEADERS)

    period = validate_period(period)
    try:
        configs = container.files.read_page_configs(page_id).get("charts", [])
    except NotFoundError:
        logger.warning("No exported configs for page {}, serving raw rows", page_id)
        configs = []

    return JSONResponse(content=aggregate_page(data, period, configs), headers=CACHE_HEADERS)


@router.get("/api/temp-files-check", response_model=TempFilesCheckResponse)
def check_temp_files() -> TempFilesCheckResponse:
    return TempFilesCheckResponse(**container.files.check())
