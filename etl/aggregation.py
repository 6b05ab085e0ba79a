"""Time-period re-aggregation of chart rows."""

import polars as pl
from loguru import logger

from app.models.charts import ChartConfig

# Period code -> polars truncate interval (weeks start on Monday)
PERIODS = {
    "W": "1w",
    "M": "1mo",
    "Q": "1q",
    "Y": "1y",
}


def aggregate_rows(
    rows: list[dict],
    x_field: str,
    y_fields: list[str],
    period: str,
    group_by: str | None = None,
) -> list[dict]:
    """Sum y fields per period bucket (and per group); bucket keys are ISO dates."""
    if not rows or period not in PERIODS:
        return rows

    df = pl.DataFrame(rows, infer_schema_length=None)
    if x_field not in df.columns:
        return rows

    y_cols = [f for f in y_fields if f in df.columns]
    if not y_cols:
        return rows
    keys = ["_bucket"]
    if group_by and group_by in df.columns:
        keys.append(group_by)

    df = (
        df.with_columns(
            pl.col(x_field).cast(pl.Utf8).str.slice(0, 10).str.to_date("%Y-%m-%d", strict=False).alias("_date")
        )
        .filter(pl.col("_date").is_not_null())
        .with_columns(pl.col("_date").dt.truncate(PERIODS[period]).alias("_bucket"))
    )
    if df.is_empty():
        return rows

    out = (
        df.group_by(keys)
        .agg([pl.col(f).cast(pl.Float64, strict=False).fill_null(0).sum() for f in y_cols])
        .sort(keys)
        .with_columns(pl.col("_bucket").dt.strftime("%Y-%m-%d").alias(x_field))
    )
    return out.select([x_field, *keys[1:], *y_cols]).to_dicts()


def aggregate_page(page_data: dict, period: str, configs: list[dict]) -> dict:
    """Page data with each chart's primary rows re-bucketed by `period`."""
    by_id = {c.get("id"): c for c in configs}
    charts = []
    for result in page_data.get("charts", []):
        config = by_id.get(result.get("chartId"))
        if not config or not result.get("data"):
            charts.append(result)
            continue

        chart = ChartConfig.model_validate(config)
        mapping = chart.data_mapping
        group_by = mapping.group_by if chart.is_stacked else None
        rows = aggregate_rows(result["data"], mapping.x_field(), mapping.y_fields(), period, group_by)
        charts.append({**result, "data": rows})

    logger.debug("Aggregated {} charts of page {} by {}", len(charts), page_data.get("pageId"), period)
    return {**page_data, "charts": charts, "aggregation": {"period": period}}
