"""Main refresh orchestration: export configs -> fetch data -> compress."""

import asyncio

import httpx
from loguru import logger

from app.repositories.storage import TempFileStore
from app.services.charts import ChartConfigService
from etl.configs import export_chart_configs
from etl.fetch import fetch_all
from settings import FETCH_BATCH_SIZE


def sync_all(
    configs: ChartConfigService | None,
    files: TempFileStore,
    fetch: bool = True,
    compress: bool = True,
    batch_size: int = FETCH_BATCH_SIZE,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict:
    """Run the refresh steps; `configs=None` reuses the configs already on disk."""
    result: dict = {}

    if configs is not None:
        result["pages"] = export_chart_configs(configs, files)
    else:
        logger.info("Skipping config export, using {}", files.configs_dir)

    if fetch:
        result["summary"] = asyncio.run(fetch_all(files, transport=transport, batch_size=batch_size))

    if compress:
        result["compressed"] = len(files.compress_all(level=9))
        logger.info("Compressed {} files", result["compressed"])

    logger.info("Refresh complete!")
    return result
