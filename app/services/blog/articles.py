"""Blog article storage - `blog-articles/{slug}.json` as `{blogPost, savedAt}`."""

from loguru import logger

from app.errors import NotFoundError, StorageError, UpstreamError, ValidationError
from app.repositories.storage import ObjectStore
from app.services.charts.configs import utc_now_iso

ARTICLES_PREFIX = "blog-articles/"


def article_key(slug: str) -> str:
    return f"{ARTICLES_PREFIX}{slug}.json"


class BlogArticleService:
    """CRUD plus the single-hero rule."""

    def __init__(self, store: ObjectStore):
        self._store = store

    def save(self, payload: dict) -> dict:
        post = (payload or {}).get("blogPost") or {}
        slug = post.get("slug")
        if not slug:
            raise ValidationError("Slug is required")

        record = {"blogPost": post, "savedAt": payload.get("savedAt") or utc_now_iso()}
        metadata = {
            "article-title": str(post.get("title", "")),
            "article-author": str(post.get("author", "")),
            "article-category": str(post.get("category", "")),
            "saved-at": record["savedAt"],
        }
        key = article_key(slug)
        try:
            self._store.save(key, record, metadata=metadata)
        except StorageError as e:
            raise UpstreamError("Failed to save to S3", details=e.message) from e

        logger.info("Blog article {} saved", slug)
        return {"message": "Blog article saved successfully", "key": key, "saved": True}

    def list_articles(self) -> list[dict]:
        """`blogPost` of every stored article, newest first."""
        try:
            keys = [k for k in self._store.list(ARTICLES_PREFIX) if k.endswith(".json")]
        except StorageError as e:
            raise UpstreamError("Failed to list articles from S3", details=e.message) from e

        articles = []
        for key in keys:
            try:
                record = self._store.get(key)
            except StorageError as e:
                logger.warning("Skipping unreadable article {}: {}", key, e.message)
                continue
            if record and record.get("blogPost"):
                articles.append(record["blogPost"])

        return sorted(articles, key=lambda a: str(a.get("date") or ""), reverse=True)

    def get(self, slug: str) -> dict:
        try:
            record = self._store.get(article_key(slug))
        except StorageError as e:
            raise UpstreamError("Failed to get article from S3", details=e.message) from e
        if not record:
            raise NotFoundError("Article not found")
        return record

    def delete(self, slug: str | None) -> dict:
        if not slug:
            raise ValidationError("Slug is required")
        key = article_key(slug)
        try:
            self._store.delete(key)
        except StorageError as e:
            raise UpstreamError("Failed to delete from S3", details=e.message) from e
        return {"message": "Blog article deleted successfully", "key": key, "deleted": True}

    def toggle_hero(self, slug: str | None, is_hero: bool) -> dict:
        """Set or clear `isHero`; setting it clears the flag on every other article."""
        if not slug:
            raise ValidationError("Slug is required")

        record = self.get(slug)
        if is_hero:
            self._clear_other_heroes(slug)

        record["blogPost"]["isHero"] = is_hero
        record["savedAt"] = utc_now_iso()
        try:
            self._store.save(article_key(slug), record)
        except StorageError as e:
            raise UpstreamError("Failed to update article", details=e.message) from e

        logger.info("Blog article {} hero={}", slug, is_hero)
        return {"message": "Hero status updated", "slug": slug, "isHero": is_hero}

    def _clear_other_heroes(self, slug: str) -> None:
        target = article_key(slug)
        for key in self._store.list(ARTICLES_PREFIX):
            if key == target or not key.endswith(".json"):
                continue
            record = self._store.get(key)
            if record and (record.get("blogPost") or {}).get("isHero"):
                record["blogPost"]["isHero"] = False
                record["savedAt"] = utc_now_iso()
                self._store.save(key, record)
                logger.debug("Cleared hero flag on {}", key)
