"""Tests for chart config storage (S3 primary, DuckDB backup)."""

import duckdb
import pytest

from app.errors import NotFoundError, UpstreamError, ValidationError
from app.repositories.common import CacheRepository
from app.repositories.storage import ObjectStore
from app.services.charts import ChartConfigService, parse_chart

CHART = {"title": "DEX Volume", "page": "dex", "chartType": "bar", "apiEndpoint": "https://x.test/q", "apiKey": "k"}


class BrokenRepo:
    """DuckDB backup that always fails."""

    def get(self, chart_id):
        raise duckdb.Error("db down")

    def list_charts(self, page=None):
        raise duckdb.Error("db down")

    def upsert(self, chart):
        raise duckdb.Error("db down")

    def delete(self, chart_id):
        raise duckdb.Error("db down")


def service(s3, repo):
    return ChartConfigService(
        store=ObjectStore(bucket="test", client=s3),
        chart_repo=repo,
        cache=CacheRepository(300),
        page_cache=CacheRepository(300),
    )


class TestParseChart:
    @pytest.mark.parametrize("missing", ["title", "page", "chartType"])
    def test_required_fields(self, missing):
        payload = {k: v for k, v in CHART.items() if k != missing}
        with pytest.raises(ValidationError, match="Invalid chart configuration"):
            parse_chart(payload)

    def test_generates_id(self):
        assert parse_chart(CHART).id.startswith("chart_")

    def test_keeps_id(self):
        assert parse_chart({**CHART, "id": "c1"}).id == "c1"


class TestChartWrites:
    def test_create_writes_s3_and_db(self, container, s3):
        result = container.chart_configs.create({**CHART, "id": "c1"})
        assert result == {"message": "Chart saved successfully", "chartId": "c1", "backupSaved": True}
        assert s3.json("charts/c1.json")["title"] == "DEX Volume"
        assert container._chart_repo.get("c1").title == "DEX Volume"

    def test_create_sets_timestamps(self, container, s3):
        container.chart_configs.create({**CHART, "id": "c1"})
        stored = s3.json("charts/c1.json")
        assert stored["createdAt"] == stored["updatedAt"]

    def test_s3_failure_aborts_before_db(self, container, s3):
        s3.fail_on.add("PutObject")
        with pytest.raises(UpstreamError, match="Failed to save chart to S3"):
            container.chart_configs.create({**CHART, "id": "c1"})
        assert container._chart_repo.get("c1") is None

    def test_db_failure_is_reported(self, s3):
        result = service(s3, BrokenRepo()).create({**CHART, "id": "c1"})
        assert result["backupSaved"] is False
        assert "charts/c1.json" in s3.objects

    def test_update_preserves_created_at(self, container, s3):
        container.chart_configs.create({**CHART, "id": "c1", "createdAt": "2024-01-01T00:00:00Z"})
        result = container.chart_configs.update("c1", {**CHART, "title": "Renamed"})
        assert result["chart"]["createdAt"] == "2024-01-01T00:00:00Z"
        assert result["chart"]["title"] == "Renamed"
        assert container.chart_configs.get("c1").title == "Renamed"

    def test_update_missing_chart(self, container):
        with pytest.raises(NotFoundError):
            container.chart_configs.update("nope", CHART)

    def test_delete(self, container, s3):
        container.chart_configs.create({**CHART, "id": "c1"})
        result = container.chart_configs.delete("c1")
        assert result["chartId"] == "c1"
        assert "charts/c1.json" not in s3.objects
        assert container._chart_repo.get("c1") is None
        with pytest.raises(NotFoundError):
            container.chart_configs.get("c1")

    def test_delete_missing_chart(self, container):
        with pytest.raises(NotFoundError, match="Chart not found"):
            container.chart_configs.delete("nope")


class TestChartReads:
    def test_cache_then_s3(self, container, s3):
        s3.put_json("charts/c1.json", {**CHART, "id": "c1"})
        assert container.chart_configs.get("c1").title == "DEX Volume"
        del s3.objects["charts/c1.json"]
        assert container.chart_configs.get("c1").title == "DEX Volume"

    def test_db_hit_repairs_s3(self, container, s3):
        container.chart_configs.create({**CHART, "id": "c1"})
        del s3.objects["charts/c1.json"]
        container.chart_configs.clear_cache()

        assert container.chart_configs.get("c1").id == "c1"
        assert s3.json("charts/c1.json")["id"] == "c1"

    def test_s3_read_error_falls_through_to_db(self, container, s3):
        container.chart_configs.create({**CHART, "id": "c1"})
        container.chart_configs.clear_cache()
        s3.fail_on.add("GetObject")
        assert container.chart_configs.get("c1").title == "DEX Volume"

    def test_missing_everywhere(self, s3):
        with pytest.raises(NotFoundError):
            service(s3, BrokenRepo()).get("nope")


class TestPageListing:
    def test_scan_writes_batch_file(self, container, s3):
        s3.put_json("charts/c1.json", {**CHART, "id": "c1"})
        s3.put_json("charts/c2.json", {**CHART, "id": "c2", "page": "network"})
        s3.put_json("charts/partial.json", {"id": "partial", "page": "dex"})

        charts, source = container.chart_configs.list_charts("dex")
        assert source == "s3_scan"
        assert [c.id for c in charts] == ["c1"]
        assert [c["id"] for c in s3.json("charts/batches/page_dex.json")["charts"]] == ["c1"]

    def test_memory_cache_then_batch_file(self, container, s3):
        s3.put_json("charts/c1.json", {**CHART, "id": "c1"})
        container.chart_configs.list_charts("dex")

        _, source = container.chart_configs.list_charts("dex")
        assert source == "memory_cache"

        container.chart_configs.clear_cache()
        _, source = container.chart_configs.list_charts("dex")
        assert source == "batch_file"

    def test_write_invalidates_page(self, container, s3):
        container.chart_configs.create({**CHART, "id": "c1"})
        container.chart_configs.list_charts("dex")
        assert "charts/batches/page_dex.json" in s3.objects

        container.chart_configs.create({**CHART, "id": "c2"})
        assert "charts/batches/page_dex.json" not in s3.objects
        charts, source = container.chart_configs.list_charts("dex")
        assert source == "s3_scan"
        assert {c.id for c in charts} == {"c1", "c2"}

    def test_listing_failure_falls_back_to_db(self, container, s3):
        container.chart_configs.create({**CHART, "id": "c1"})
        container.chart_configs.clear_cache()
        s3.fail_on.update({"ListObjectsV2", "GetObject"})

        charts, source = container.chart_configs.list_charts("dex")
        assert source == "database"
        assert [c.id for c in charts] == ["c1"]

    def test_listing_and_db_failure(self, s3):
        s3.fail_on.add("ListObjectsV2")
        with pytest.raises(UpstreamError, match="Failed to fetch charts"):
            service(s3, BrokenRepo()).list_charts()
