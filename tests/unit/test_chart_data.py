"""Tests for the chart data proxy (cache + stale-on-error)."""

import asyncio

import pytest

from app.errors import NotFoundError, UpstreamError, ValidationError

ENDPOINT = "https://analytics.topledger.xyz/tl/api/queries/1/results.json"


@pytest.fixture
def chart(container):
    container.chart_configs.create(
        {"id": "c1", "title": "Fees", "page": "network", "chartType": "line", "apiEndpoint": ENDPOINT, "apiKey": "k"}
    )
    return "c1"


class TestChartData:
    def test_fetch_then_cache(self, container, upstream, chart):
        upstream.rows = [{"date": "2024-01-01", "fees": 1}]

        first = asyncio.run(container.chart_data.get_rows(chart))
        second = asyncio.run(container.chart_data.get_rows(chart))

        assert first == {"query_result": {"data": {"rows": upstream.rows}}, "fromCache": False}
        assert second["fromCache"] is True
        assert len(upstream.calls) == 1
        assert upstream.calls[0].url.params["api_key"] == "k"

    def test_filters_are_separate_entries(self, container, upstream, chart):
        upstream.rows = [{"a": 1}]
        asyncio.run(container.chart_data.get_rows(chart, {"timeFilter": "M"}))
        asyncio.run(container.chart_data.get_rows(chart, {"timeFilter": "Y"}))
        assert [c.url.params["days"] for c in upstream.calls] == ["30", "365"]

    def test_expired_entry_is_refetched(self, container, upstream, clock, chart):
        upstream.rows = [{"a": 1}]
        asyncio.run(container.chart_data.get_rows(chart))
        clock.advance(301)
        body = asyncio.run(container.chart_data.get_rows(chart))
        assert body["fromCache"] is False
        assert len(upstream.calls) == 2

    def test_stale_on_error_uses_same_key(self, container, upstream, clock, chart):
        upstream.rows = [{"a": 1}]
        asyncio.run(container.chart_data.get_rows(chart, {"timeFilter": "M"}))
        clock.advance(301)
        upstream.status = 500

        body = asyncio.run(container.chart_data.get_rows(chart, {"timeFilter": "M"}))
        assert body == {"query_result": {"data": {"rows": [{"a": 1}]}}, "fromCache": True, "stale": True}

    def test_error_without_cache(self, container, upstream, chart):
        upstream.status = 500
        with pytest.raises(UpstreamError, match="Failed to fetch chart data") as exc:
            asyncio.run(container.chart_data.get_rows(chart, {"timeFilter": "M"}))
        assert exc.value.details

    def test_error_with_only_other_filter_cached(self, container, upstream, chart):
        upstream.rows = [{"a": 1}]
        asyncio.run(container.chart_data.get_rows(chart))
        upstream.status = 500
        with pytest.raises(UpstreamError):
            asyncio.run(container.chart_data.get_rows(chart, {"timeFilter": "Y"}))

    def test_missing_chart(self, container):
        with pytest.raises(NotFoundError):
            asyncio.run(container.chart_data.get_rows("nope"))

    def test_chart_without_endpoint(self, container):
        container.chart_configs.create({"id": "c2", "title": "T", "page": "p", "chartType": "bar"})
        with pytest.raises(ValidationError, match="no API endpoint"):
            asyncio.run(container.chart_data.get_rows("c2"))
