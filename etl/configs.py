"""Export stored chart configs to per-page temp files."""

from collections import defaultdict

from loguru import logger

from app.repositories.storage import TempFileStore
from app.services.charts import ChartConfigService


def export_chart_configs(configs: ChartConfigService, files: TempFileStore) -> dict[str, int]:
    """Write `chart-configs/{page}.json` for every page; returns charts per page."""
    charts, source = configs.list_charts(skip_cache=True)
    logger.info("Exporting {} chart configs (source: {})", len(charts), source)

    by_page: dict[str, list[dict]] = defaultdict(list)
    for chart in charts:
        by_page[chart.page].append(chart.to_json())

    for page, items in by_page.items():
        files.write_page_configs(page, items)
        logger.debug("Page {}: {} charts", page, len(items))

    return {page: len(items) for page, items in by_page.items()}
