"""Tests for the offline refresh: config export, fetching, aggregation."""

import asyncio
import gzip
import json

import httpx
import pytest

from app.repositories.storage import TempFileStore
from etl import aggregate_page, aggregate_rows, export_chart_configs, fetch_all, parameter_combinations, sync_all
from etl.fetch import build_parameters

ENDPOINT = "https://example.test/api/queries/7/results"


def chart(**extra):
    return {"id": "c1", "title": "T", "page": "dex", "chartType": "bar", "apiEndpoint": ENDPOINT, **extra}


def with_filters(filters, **options):
    return chart(additionalOptions={"filters": filters, **options})


class TestParameterCombinations:
    def test_no_filters(self):
        assert parameter_combinations(chart()) == [{}]

    def test_currency_options(self):
        c = with_filters({"currencyFilter": {"options": ["USD", "SOL"], "paramName": "currency"}})
        assert parameter_combinations(c) == [{"currency": "USD"}, {"currency": "SOL"}]

    def test_field_switcher_currency_is_not_fetched(self):
        c = with_filters({"currencyFilter": {"options": ["USD", "SOL"], "type": "field_switcher"}})
        assert parameter_combinations(c) == [{}]

    def test_time_options(self):
        c = with_filters({"timeFilter": {"options": ["W", "M"]}})
        assert parameter_combinations(c) == [{"timeFilter": "W"}, {"timeFilter": "M"}]

    def test_time_aggregation_fetches_first_option(self):
        c = with_filters({"timeFilter": {"options": ["D", "W", "M"]}}, enableTimeAggregation=True)
        assert parameter_combinations(c) == [{"timeFilter": "D"}]

    def test_build_parameters_defaults_to_first_option(self):
        c = with_filters(
            {
                "timeFilter": {"options": ["W", "M"], "paramName": "Date Part"},
                "displayModeFilter": {"options": ["absolute", "percent"], "paramName": "mode"},
            }
        )
        assert build_parameters(c, {"timeFilter": "M"}) == {"Date Part": "M", "mode": "absolute"}


class TestFetchAll:
    @pytest.fixture
    def files(self, tmp_path):
        files = TempFileStore(tmp_path / "temp")
        files.write_page_configs("dex", [chart(id="c1"), chart(id="c2", apiEndpoint="https://example.test/broken")])
        return files

    def test_writes_page_and_summary(self, files):
        def handler(request):
            if "broken" in str(request.url):
                return httpx.Response(500)
            return httpx.Response(200, json={"query_result": {"data": {"rows": [{"x": 1}]}}})

        summary = asyncio.run(
            fetch_all(files, transport=httpx.MockTransport(handler), batch_delay=0, param_delay=0)
        )

        assert summary["totalCharts"] == 2
        assert summary["successfulFetches"] == 1
        assert summary["failedFetches"] == 1
        assert summary["successRate"] == "50.00%"

        page, _ = files.read_page_data("dex")
        assert page["pageId"] == "dex"
        assert page["summary"] == {"totalCharts": 2, "successfulFetches": 1, "failedFetches": 1}
        ok, failed = page["charts"]
        assert ok["success"] is True and ok["data"] == [{"x": 1}]
        assert failed["success"] is False and failed["error"]

    def test_parameterized_chart_keeps_every_dataset(self, tmp_path):
        files = TempFileStore(tmp_path / "temp")
        files.write_page_configs(
            "dex", [with_filters({"currencyFilter": {"options": ["USD", "SOL"], "paramName": "currency"}})]
        )

        def handler(request):
            currency = json.loads(request.content)["parameters"]["currency"]
            return httpx.Response(200, json=[{"currency": currency}])

        asyncio.run(fetch_all(files, transport=httpx.MockTransport(handler), batch_delay=0, param_delay=0))

        result = files.read_page_data("dex")[0]["charts"][0]
        assert result["successfulCombinations"] == 2
        assert result["data"] == [{"currency": "USD"}]
        assert [d["parameters"] for d in result["datasets"]] == [{"currency": "USD"}, {"currency": "SOL"}]

    def test_empty_run(self, tmp_path):
        summary = asyncio.run(fetch_all(TempFileStore(tmp_path / "temp")))
        assert summary["totalCharts"] == 0
        assert summary["successRate"] == "0%"


class TestExportAndSync:
    def test_export_groups_by_page(self, container):
        container.chart_configs.create(chart(id="c1"))
        container.chart_configs.create(chart(id="c2", page="network"))

        assert export_chart_configs(container.chart_configs, container.files) == {"dex": 1, "network": 1}
        assert container.files.read_page_configs("network")["charts"][0]["id"] == "c2"

    def test_sync_compresses_files(self, container, upstream):
        container.chart_configs.create(chart(id="c1"))
        upstream.rows = [{"x": 1}]

        result = sync_all(container.chart_configs, container.files, transport=httpx.MockTransport(upstream))

        assert result["pages"] == {"dex": 1}
        assert result["summary"]["successfulFetches"] == 1
        gz = container.files.data_dir / "dex.json.gz"
        assert json.loads(gzip.decompress(gz.read_bytes()))["pageId"] == "dex"
        assert container.files.read_page_data("dex")[1] is True


class TestAggregation:
    ROWS = [
        {"date": "2024-01-01", "volume": 1, "dex": "a"},
        {"date": "2024-01-03T12:00:00", "volume": 2, "dex": "b"},
        {"date": "2024-01-10", "volume": 4, "dex": "a"},
        {"date": "2024-02-15", "volume": 8, "dex": "a"},
    ]

    def test_weekly_buckets_start_monday(self):
        out = aggregate_rows(self.ROWS, "date", ["volume"], "W")
        assert out == [
            {"date": "2024-01-01", "volume": 3.0},
            {"date": "2024-01-08", "volume": 4.0},
            {"date": "2024-02-12", "volume": 8.0},
        ]

    def test_monthly(self):
        out = aggregate_rows(self.ROWS, "date", ["volume"], "M")
        assert out == [{"date": "2024-01-01", "volume": 7.0}, {"date": "2024-02-01", "volume": 8.0}]

    def test_quarterly_and_yearly(self):
        assert aggregate_rows(self.ROWS, "date", ["volume"], "Q") == [{"date": "2024-01-01", "volume": 15.0}]
        assert aggregate_rows(self.ROWS, "date", ["volume"], "Y") == [{"date": "2024-01-01", "volume": 15.0}]

    def test_group_by_kept(self):
        out = aggregate_rows(self.ROWS, "date", ["volume"], "M", group_by="dex")
        assert out == [
            {"date": "2024-01-01", "dex": "a", "volume": 5.0},
            {"date": "2024-01-01", "dex": "b", "volume": 2.0},
            {"date": "2024-02-01", "dex": "a", "volume": 8.0},
        ]

    def test_unknown_period_returns_rows(self):
        assert aggregate_rows(self.ROWS, "date", ["volume"], "X") is self.ROWS

    def test_missing_x_field_returns_rows(self):
        assert aggregate_rows(self.ROWS, "day", ["volume"], "M") is self.ROWS

    def test_page_uses_chart_mapping(self):
        configs = [
            chart(id="c1", isStacked=True, dataMapping={"xAxis": "date", "yAxis": ["volume"], "groupBy": "dex"}),
        ]
        page = {"pageId": "dex", "charts": [{"chartId": "c1", "success": True, "data": self.ROWS}]}

        out = aggregate_page(page, "Y", configs)
        assert out["aggregation"] == {"period": "Y"}
        assert out["charts"][0]["data"] == [
            {"date": "2024-01-01", "dex": "a", "volume": 13.0},
            {"date": "2024-01-01", "dex": "b", "volume": 2.0},
        ]
