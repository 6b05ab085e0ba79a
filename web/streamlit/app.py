"""State of Solana Dashboard."""

import asyncio
import sys
from pathlib import Path

# Add project root to path (for streamlit which runs this file directly)
_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(_root))

import streamlit as st  # noqa: E402
from loguru import logger  # noqa: E402

from app.container import container  # noqa: E402
from app.errors import NotFoundError, UpstreamError, ValidationError  # noqa: E402
from app.models.charts import ChartConfig  # noqa: E402
from settings import GA_TRACKING_ID  # noqa: E402
from web.streamlit.charts import render  # noqa: E402

# Ensure container is initialized
container.init()

st.set_page_config(page_title="State of Solana", page_icon="◎", layout="wide")

GA_SNIPPET = """
<script async src="https://www.googletagmanager.com/gtag/js?id={id}"></script>
<script>
window.dataLayer = window.dataLayer || [];
function gtag(){{dataLayer.push(arguments);}}
gtag("js", new Date());
gtag("config", "{id}");
</script>
"""

if GA_TRACKING_ID:
    st.html(GA_SNIPPET.format(id=GA_TRACKING_ID))


@st.cache_data(ttl=300, show_spinner=False)
def get_pages() -> list[str]:
    charts, _ = container.chart_configs.list_charts()
    return sorted({c.page for c in charts})


@st.cache_data(ttl=300, show_spinner=False)
def get_page_charts(page: str) -> list[dict]:
    charts, source = container.chart_configs.list_charts(page)
    logger.info("Loaded {} charts for {} from {}", len(charts), page, source)
    return [c.to_json() for c in charts]


@st.cache_data(ttl=300, show_spinner=False)
def get_rows(chart_id: str) -> list[dict]:
    body = asyncio.run(container.chart_data.get_rows(chart_id))
    return body["query_result"]["data"]["rows"]


@st.cache_data(ttl=300, show_spinner=False)
def get_metric(name: str) -> list[dict]:
    return asyncio.run(container.metrics.get(name))["data"]


@st.cache_data(ttl=300, show_spinner=False)
def get_volume_counter() -> dict:
    return asyncio.run(container.metrics.volume_counter())


def counters():
    """Headline numbers from the fixed queries."""
    cols = st.columns(3)

    volume = get_volume_counter()
    cols[0].metric(
        "Cumulative DEX Volume",
        f"${volume['cumulativeVolume'] / 1e9:,.1f}B",
        f"{volume['percentChange']:+.2f}%" if volume["cumulativeVolume"] else None,
    )

    tps = get_metric("tps")
    cols[1].metric("Real TPS", f"{tps[-1]['real_tps']:,.0f}" if tps else "-")

    fees = get_metric("txn_fees")
    cols[2].metric("Avg Transaction Fee (SOL)", f"{fees[-1]['average_fees']:.6f}" if fees else "-")


def chart_panel(config: dict):
    chart = ChartConfig.model_validate(config)
    st.subheader(chart.title)
    try:
        rows = get_rows(chart.id)
    except (NotFoundError, ValidationError, UpstreamError) as e:
        st.warning(f"{chart.title}: {e.message}")
        return

    if not rows:
        st.info("No data available.")
        return
    st.plotly_chart(render(chart, rows), width="stretch")


def main():
    st.title("◎ State of Solana")
    st.markdown("*Network, DEX and stablecoin analytics powered by TopLedger*")

    counters()

    pages = get_pages()
    if not pages:
        st.info("No charts configured yet.")
        return

    page = st.sidebar.selectbox("Dashboard", pages, index=0)

    with st.spinner("Loading charts..."):
        configs = get_page_charts(page)

    cols = st.columns(2)
    for i, config in enumerate(configs):
        with cols[i % 2]:
            chart_panel(config)

    # Footer
    st.sidebar.markdown("---")
    st.sidebar.markdown("**Data Source:** [TopLedger](https://topledger.xyz)")


if __name__ == "__main__":
    main()
