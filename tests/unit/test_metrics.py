"""Tests for the named fixed-query metrics."""

import asyncio

import httpx
import pytest

from app.errors import NotFoundError, UpstreamError, ValidationError


def rows(data):
    return {"query_result": {"data": {"rows": data}}}


class TestMetrics:
    def test_names(self, container):
        assert "dex_volume" in container.metrics.names()
        assert "validator_performance" in container.metrics.names()

    def test_unknown_metric(self, container):
        with pytest.raises(NotFoundError):
            asyncio.run(container.metrics.get("nope"))

    def test_fetch_sorted_and_cached(self, container, upstream):
        upstream.routes["queries/13249"] = rows(
            [
                {"block_date": "2024-01-02", "Average_Transaction_Fees": 0.2},
                {"block_date": "2024-01-01", "Average_Transaction_Fees": None},
            ]
        )
        first = asyncio.run(container.metrics.get("txn_fees"))
        second = asyncio.run(container.metrics.get("txn_fees"))

        assert [p["block_date"] for p in first["data"]] == ["2024-01-01", "2024-01-02"]
        assert first["data"][0]["average_fees"] == 0.0
        assert first["fromCache"] is False
        assert second["fromCache"] is True
        assert len(upstream.calls) == 1

    def test_failure_degrades_to_empty(self, container, upstream):
        upstream.status = 500
        assert asyncio.run(container.metrics.get("tps")) == {"metric": "tps", "data": [], "fromCache": False}

    def test_stale_on_error(self, container, upstream, clock):
        upstream.routes["queries/12905"] = rows([{"block_date": "2024-01-01", "Amount_in_Pool": 5}])
        asyncio.run(container.metrics.get("stablecoin_tvl"))
        clock.advance(301)
        upstream.routes["queries/12905"] = httpx.Response(502)

        result = asyncio.run(container.metrics.get("stablecoin_tvl"))
        assert result["stale"] is True
        assert result["data"][0]["amount_in_pool"] == 5

    def test_validator_requires_vote_account(self, container):
        with pytest.raises(ValidationError):
            asyncio.run(container.metrics.get("validator_performance"))

    def test_validator_failure_propagates(self, container, upstream):
        upstream.status = 500
        with pytest.raises(UpstreamError):
            asyncio.run(container.metrics.get("validator_performance", {"vote_account": "Vote111"}))


class TestVolumeCounter:
    def test_percent_change(self, container, upstream):
        upstream.routes["queries/12253"] = rows(
            [
                {"year": "2023", "volume": 100, "cumulative_volume": 200},
                {"year": "2024", "volume": 100, "cumulative_volume": 300},
            ]
        )
        assert asyncio.run(container.metrics.volume_counter()) == {
            "cumulativeVolume": 300,
            "percentChange": 50.0,
            "isPositive": True,
        }

    def test_fewer_than_two_rows(self, container, upstream):
        upstream.routes["queries/12253"] = rows([{"year": "2024", "volume": 1, "cumulative_volume": 1}])
        assert asyncio.run(container.metrics.volume_counter()) == {
            "cumulativeVolume": 0,
            "percentChange": 0,
            "isPositive": False,
        }
