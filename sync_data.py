#!/usr/bin/env python3
"""
Refresh the temp chart data served by the file-backed endpoints.

Usage:
    python sync_data.py                 # Export configs, fetch all charts, compress
    python sync_data.py --skip-export   # Reuse temp/chart-configs as they are
    python sync_data.py --no-fetch      # Export configs only
    python sync_data.py --compress      # Only gzip existing files
    python sync_data.py --summary       # Print the last run summary
"""

import json
import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from app.container import container  # noqa: E402
from etl import sync_all  # noqa: E402
from settings import FETCH_BATCH_SIZE, MAX_CONCURRENT, TEMP_DIR  # noqa: E402
from settings.logging import setup_logging  # noqa: E402

logger = setup_logging(to_file=True, name="sync")


def show_summary() -> bool:
    """Print the last run summary."""
    summary_path = TEMP_DIR / "chart-data" / "_summary.json"
    if not summary_path.exists():
        print("\n⚠️  No summary found. Run 'python sync_data.py' first.\n")
        return False

    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    print("\n" + "=" * 60)
    print("CHART DATA SUMMARY")
    print("=" * 60)
    for key, value in summary.items():
        print(f"  {key}: {value}")
    print("=" * 60 + "\n")
    return True


def main():
    args = sys.argv[1:]

    if "--summary" in args:
        sys.exit(0 if show_summary() else 1)

    container.init()
    try:
        run(args)
    finally:
        container.shutdown()


def run(args: list[str]):
    if "--compress" in args:
        count = len(container.files.compress_all(level=9))
        logger.info("Compressed {} files", count)
        return

    skip_export = "--skip-export" in args
    fetch = "--no-fetch" not in args
    logger.info("Mode: {}{}", "reuse configs" if skip_export else "export configs", " + fetch" if fetch else "")
    logger.info("Throttling: {} concurrent, {} charts/batch", MAX_CONCURRENT, FETCH_BATCH_SIZE)

    result = sync_all(
        configs=None if skip_export else container.chart_configs,
        files=container.files,
        fetch=fetch,
        compress=True,
    )

    summary = result.get("summary")
    if summary and summary["totalCharts"] and not summary["successfulFetches"]:
        logger.error("Every chart fetch failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
