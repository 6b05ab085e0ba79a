"""Plotly renderers keyed by chart type."""

from collections.abc import Callable

import plotly.graph_objects as go

from app.models.charts import ChartConfig

PALETTE = [
    "#9945FF",
    "#14F195",
    "#00C2FF",
    "#F97316",
    "#FACC15",
    "#EC4899",
    "#6366F1",
    "#22C55E",
]


def color(i: int) -> str:
    return PALETTE[i % len(PALETTE)]


def series(rows: list[dict], x_field: str, y_fields: list[str], group_by: str | None = None) -> dict[str, tuple]:
    """name -> (xs, ys). Grouped charts get one series per group value of the first y field."""
    if group_by and y_fields:
        out: dict[str, tuple[list, list]] = {}
        for row in rows:
            name = str(row.get(group_by, ""))
            xs, ys = out.setdefault(name, ([], []))
            xs.append(row.get(x_field))
            ys.append(row.get(y_fields[0]))
        return out

    xs = [row.get(x_field) for row in rows]
    return {y: (xs, [row.get(y) for row in rows]) for y in y_fields}


def _layout(fig: go.Figure, chart: ChartConfig, **kwargs) -> go.Figure:
    return fig.update_layout(
        title=chart.subtitle or "",
        xaxis_title="",
        yaxis_title="",
        margin=dict(t=40, b=40, l=40, r=20),
        height=380,
        legend=dict(orientation="h", y=-0.15),
        **kwargs,
    )


def bar_chart(chart: ChartConfig, data: dict[str, tuple]) -> go.Figure:
    fig = go.Figure([go.Bar(name=n, x=xs, y=ys, marker_color=color(i)) for i, (n, (xs, ys)) in enumerate(data.items())])
    return _layout(fig, chart, barmode="group")


def stacked_bar_chart(chart: ChartConfig, data: dict[str, tuple]) -> go.Figure:
    fig = go.Figure([go.Bar(name=n, x=xs, y=ys, marker_color=color(i)) for i, (n, (xs, ys)) in enumerate(data.items())])
    return _layout(fig, chart, barmode="stack")


def line_chart(chart: ChartConfig, data: dict[str, tuple]) -> go.Figure:
    fig = go.Figure(
        [
            go.Scatter(name=n, x=xs, y=ys, mode="lines", line=dict(color=color(i), width=2))
            for i, (n, (xs, ys)) in enumerate(data.items())
        ]
    )
    return _layout(fig, chart)


def area_chart(chart: ChartConfig, data: dict[str, tuple]) -> go.Figure:
    fig = go.Figure(
        [
            go.Scatter(name=n, x=xs, y=ys, mode="lines", fill="tozeroy", line=dict(color=color(i)))
            for i, (n, (xs, ys)) in enumerate(data.items())
        ]
    )
    return _layout(fig, chart)


def stacked_area_chart(chart: ChartConfig, data: dict[str, tuple]) -> go.Figure:
    fig = go.Figure(
        [
            go.Scatter(name=n, x=xs, y=ys, mode="lines", stackgroup="one", line=dict(color=color(i)))
            for i, (n, (xs, ys)) in enumerate(data.items())
        ]
    )
    return _layout(fig, chart)


RENDERERS: dict[str, Callable[[ChartConfig, dict[str, tuple]], go.Figure]] = {
    "bar": bar_chart,
    "stacked-bar": stacked_bar_chart,
    "line": line_chart,
    "area": area_chart,
    "stacked-area": stacked_area_chart,
}


def render(chart: ChartConfig, rows: list[dict]) -> go.Figure:
    """Figure for a chart config; unknown types fall back to a bar chart."""
    mapping = chart.data_mapping
    stacked = chart.is_stacked or chart.chart_type.startswith("stacked")
    data = series(rows, mapping.x_field(), mapping.y_fields(), mapping.group_by if stacked else None)
    return RENDERERS.get(chart.chart_type, bar_chart)(chart, data)
