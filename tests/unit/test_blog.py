"""Tests for blog articles and read-time analytics."""

import pytest

from app.errors import NotFoundError, UpstreamError, ValidationError
from app.repositories.storage import ObjectStore
from app.services.blog import BlogAnalyticsService, BlogArticleService, format_duration


@pytest.fixture
def store(s3):
    return ObjectStore(bucket="test", client=s3)


class TestFormatDuration:
    @pytest.mark.parametrize(
        "seconds,expected",
        [(42, "42s"), (150, "2m 30s"), (120, "2m"), (3900, "1h 5m"), (119.6, "2m")],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestTracking:
    def test_same_session_counts_once(self, store):
        service = BlogAnalyticsService(store, conditional=True)
        first = service.track("a", "s1", 10)
        second = service.track("a", "s1", 25)

        assert first["isNewView"] is True
        assert second["isNewView"] is False
        assert second["totalViews"] == 1
        assert second["totalReadTime"] == 25

    def test_new_session_adds_view(self, store):
        service = BlogAnalyticsService(store, conditional=True)
        service.track("a", "s1", 10)
        result = service.track("a", "s2", 30)
        assert result["totalViews"] == 2
        assert result["totalReadTime"] == 40
        assert result["averageReadTime"] == 20

    def test_missing_fields(self, store):
        with pytest.raises(ValidationError, match="Missing required fields"):
            BlogAnalyticsService(store).track("a", None, 10)

    def test_conflicting_write_is_retried(self, store, s3):
        service = BlogAnalyticsService(store, conditional=True)
        service.track("a", "s1", 10)

        put = s3.put_object
        raced = []

        def racing_put(**kwargs):
            if not raced:
                raced.append(True)
                other = BlogAnalyticsService(ObjectStore(bucket="test", client=s3), conditional=False)
                other.track("a", "s2", 5)
            return put(**kwargs)

        s3.put_object = racing_put
        result = service.track("a", "s3", 7)

        assert result["totalViews"] == 3
        assert {s["sessionId"] for s in s3.json("blog-analytics/a.json")["sessions"]} == {"s1", "s2", "s3"}

    def test_gives_up_after_repeated_conflicts(self, store, s3):
        service = BlogAnalyticsService(store, conditional=True)
        service.track("a", "s1", 10)

        put = s3.put_object

        def always_racing(**kwargs):
            if kwargs.get("IfMatch"):
                put(Bucket="test", Key=kwargs["Key"], Body=b"{}")
            return put(**kwargs)

        s3.put_object = always_racing
        with pytest.raises(UpstreamError, match="Failed to track analytics"):
            service.track("a", "s2", 5)

    def test_summary(self, store):
        service = BlogAnalyticsService(store)
        service.track("a", "s1", 100)
        service.track("a", "s2", 200)
        assert service.summary("a") == {
            "totalViews": 2,
            "totalReadTime": 300,
            "averageReadTime": 150,
            "formattedTotalReadTime": "5m",
            "formattedAverageReadTime": "2m 30s",
        }

    def test_summary_without_data(self, store):
        summary = BlogAnalyticsService(store).summary("nothing")
        assert summary["totalViews"] == 0
        assert summary["formattedTotalReadTime"] == "0m"


class TestArticles:
    def post(self, slug, **extra):
        return {"blogPost": {"slug": slug, "title": slug.title(), "date": "2024-01-01", **extra}}

    def test_save_and_get(self, store, s3):
        service = BlogArticleService(store)
        result = service.save(self.post("hello"))
        assert result["key"] == "blog-articles/hello.json"
        assert s3.metadata["blog-articles/hello.json"]["article-title"] == "Hello"
        assert service.get("hello")["blogPost"]["title"] == "Hello"

    def test_slug_required(self, store):
        with pytest.raises(ValidationError, match="Slug is required"):
            BlogArticleService(store).save({"blogPost": {"title": "x"}})

    def test_get_missing(self, store):
        with pytest.raises(NotFoundError):
            BlogArticleService(store).get("nope")

    def test_list_newest_first(self, store):
        service = BlogArticleService(store)
        service.save(self.post("old", date="2023-01-01"))
        service.save(self.post("new", date="2024-06-01"))
        assert [a["slug"] for a in service.list_articles()] == ["new", "old"]

    def test_toggle_hero_clears_others(self, store):
        service = BlogArticleService(store)
        service.save(self.post("a", isHero=True))
        service.save(self.post("b"))

        service.toggle_hero("b", True)
        assert service.get("a")["blogPost"]["isHero"] is False
        assert service.get("b")["blogPost"]["isHero"] is True

    def test_delete(self, store, s3):
        service = BlogArticleService(store)
        service.save(self.post("a"))
        service.delete("a")
        assert "blog-articles/a.json" not in s3.objects
