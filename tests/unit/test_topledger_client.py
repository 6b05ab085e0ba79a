"""Tests for the TopLedger client helpers and adapters."""

import asyncio
import json

import httpx
import pytest

from settings import TL_QUERIES
from topledger_client import ChartClient, DexClient, NetworkClient, QueryError, extract_rows, split_api_key
from topledger_client.charts.client import build_query_params


def rows_payload(rows):
    return {"query_result": {"data": {"rows": rows}}}


def transport(handler):
    return httpx.MockTransport(handler)


class TestExtractRows:
    def test_strict_envelope(self):
        assert extract_rows(rows_payload([{"a": 1}])) == [{"a": 1}]

    def test_strict_rejects_other_shapes(self):
        with pytest.raises(QueryError):
            extract_rows([{"a": 1}], strict=True)

    def test_lenient_bare_array(self):
        assert extract_rows([{"a": 1}], strict=False) == [{"a": 1}]

    def test_lenient_completed_job(self):
        payload = {"job": {"status": 3, "query_result": {"data": {"rows": [{"a": 2}]}}}}
        assert extract_rows(payload, strict=False) == [{"a": 2}]

    def test_lenient_failed_job(self):
        with pytest.raises(QueryError, match="Query error"):
            extract_rows({"job": {"status": 4, "error": "bad sql"}}, strict=False)

    def test_lenient_running_job(self):
        with pytest.raises(QueryError, match="still running"):
            extract_rows({"job": {"status": 2}}, strict=False)

    def test_lenient_flat_fields(self):
        assert extract_rows({"results": [{"a": 3}]}, strict=False) == [{"a": 3}]

    def test_lenient_error_field(self):
        with pytest.raises(QueryError):
            extract_rows({"error": "nope"}, strict=False)

    def test_lenient_unknown_shape(self):
        assert extract_rows({"foo": "bar"}, strict=False) == []


class TestApiKey:
    def test_plain(self):
        assert split_api_key("abc") == {"api_key": "abc"}

    def test_max_age(self):
        assert split_api_key("abc&max_age=300") == {"api_key": "abc", "max_age": "300"}

    def test_empty(self):
        assert split_api_key(None) == {}


class TestQueryParams:
    def test_time_filter_to_days(self):
        assert build_query_params("k", {"timeFilter": "Q"}) == {"api_key": "k", "days": "90"}

    def test_unknown_time_filter_passes_through(self):
        assert build_query_params(None, {"timeFilter": "14"}) == {"days": "14"}

    def test_other_filters_forwarded(self):
        assert build_query_params(None, {"currency": "USD"}) == {"currency": "USD"}


class TestChartClient:
    def test_get_without_parameters(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[{"x": 1}])

        async def run():
            async with ChartClient(transport=transport(handler)) as client:
                return await client.fetch_with_parameters("https://example.test/q", "k&max_age=0")

        assert asyncio.run(run()) == [{"x": 1}]
        assert seen[0].method == "GET"
        assert seen[0].url.params["api_key"] == "k"
        assert seen[0].url.params["max_age"] == "0"

    def test_post_with_parameters(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=rows_payload([{"x": 2}]))

        async def run():
            async with ChartClient(transport=transport(handler)) as client:
                return await client.fetch_with_parameters("https://example.test/q", None, {"currency": "SOL"})

        assert asyncio.run(run()) == [{"x": 2}]
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"parameters": {"currency": "SOL"}}

    def test_http_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        async def run():
            async with ChartClient(transport=transport(handler)) as client:
                await client.fetch("https://example.test/q", None)

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(run())
        assert len(calls) == 1


class TestAdapters:
    def test_volume_sorted_by_year(self):
        def handler(request):
            rows = [
                {"year": 2024, "volume": 10, "cumulative_volume": 30},
                {"year": 2023, "volume": 20, "cumulative_volume": 20},
            ]
            return httpx.Response(200, json=rows_payload(rows))

        async def run():
            async with DexClient(TL_QUERIES, transport=transport(handler)) as client:
                return await client.volume_by_year()

        points = asyncio.run(run())
        assert [p.year for p in points] == ["2023", "2024"]

    def test_tvl_velocity_drops_undated_rows(self):
        seen = []

        def handler(request):
            seen.append(request)
            rows = [
                {"block_date": "2024-01-02", "TVL": 5, "Velocity": None},
                {"block_date": None, "TVL": 1},
                {"block_date": "2024-01-01", "TVL": 4, "Velocity": 2},
            ]
            return httpx.Response(200, json=rows_payload(rows))

        async def run():
            async with DexClient(TL_QUERIES, transport=transport(handler)) as client:
                return await client.tvl_velocity("W")

        points = asyncio.run(run())
        assert [p.date for p in points] == ["2024-01-01", "2024-01-02"]
        assert points[1].velocity == 0.0
        assert json.loads(seen[0].content) == {"parameters": {"Date Part": "W"}}

    def test_validator_performance_uses_research_base(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=rows_payload([{"epoch": 600, "skip_rate": 1}, {"epoch": 599}]))

        async def run():
            async with NetworkClient(
                TL_QUERIES, research_url="https://research.test/api", transport=transport(handler)
            ) as client:
                return await client.validator_performance("Vote111")

        points = asyncio.run(run())
        assert [p.epoch for p in points] == [599, 600]
        assert str(seen[0].url).startswith("https://research.test/api/queries/14256/results")
        assert json.loads(seen[0].content) == {"parameters": {"vote_account": "Vote111"}}

    def test_strict_adapter_rejects_bad_envelope(self):
        def handler(request):
            return httpx.Response(200, json={"unexpected": True})

        async def run():
            async with NetworkClient(TL_QUERIES, transport=transport(handler)) as client:
                return await client.tps()

        with pytest.raises(QueryError):
            asyncio.run(run())
