"""Generic S3-backed config collections (tables, counters)."""

import uuid

from loguru import logger

from app.errors import NotFoundError, StorageError, UpstreamError, ValidationError
from app.repositories.storage import ObjectStore
from app.services.charts.configs import utc_now_iso

REQUIRED_FIELDS = ("title", "page", "apiEndpoint")


class ConfigCollection:
    """Configs stored one object per id under `{prefix}`, with per-page batch files."""

    def __init__(self, store: ObjectStore, prefix: str, kind: str):
        self._store = store
        self._prefix = prefix.rstrip("/") + "/"
        self._kind = kind

    @property
    def kind(self) -> str:
        return self._kind

    def _key(self, item_id: str) -> str:
        return f"{self._prefix}{item_id}.json"

    def _batch_key(self, page: str) -> str:
        return f"{self._prefix}batches/page_{page}.json"

    def _is_item_key(self, key: str) -> bool:
        rest = key[len(self._prefix) :]
        return key.endswith(".json") and "/" not in rest

    def list_items(self, page: str | None = None) -> tuple[list[dict], str]:
        """(configs, source) - batch file first when a page is given."""
        if page:
            try:
                batch = self._store.get(self._batch_key(page))
            except StorageError as e:
                logger.warning("{} batch for page {} unreadable: {}", self._kind, page, e.message)
                batch = None
            if batch and batch.get("items"):
                return batch["items"], "batch"

        try:
            keys = [k for k in self._store.list(self._prefix) if self._is_item_key(k)]
            items = [item for item in (self._store.get(k) for k in keys) if isinstance(item, dict)]
        except StorageError as e:
            raise UpstreamError(f"Failed to fetch {self._kind}s", details=e.message) from e

        if page:
            items = [i for i in items if i.get("page") == page]
            if items:
                self._save_batch(page, items)
        logger.debug("Listed {} {}s (page {})", len(items), self._kind, page or "*")
        return items, "scan"

    def get(self, item_id: str) -> dict:
        try:
            item = self._store.get(self._key(item_id))
        except StorageError as e:
            raise UpstreamError(f"Failed to fetch {self._kind}", details=e.message) from e
        if not item:
            raise NotFoundError(f"{self._kind.capitalize()} not found")
        return item

    def save(self, payload: dict) -> dict:
        if not isinstance(payload, dict) or not all(payload.get(f) for f in REQUIRED_FIELDS):
            raise ValidationError(f"Invalid {self._kind} configuration")

        item = dict(payload)
        item["id"] = item.get("id") or f"{self._kind}_{uuid.uuid4().hex[:12]}"
        now = utc_now_iso()
        item["updatedAt"] = now
        item.setdefault("createdAt", now)

        try:
            self._store.save(self._key(item["id"]), item)
        except StorageError as e:
            raise UpstreamError(f"Failed to save {self._kind} to S3", details=e.message) from e

        self._drop_batch(item["page"])
        logger.info("{} {} saved (page {})", self._kind.capitalize(), item["id"], item["page"])
        return {"message": f"{self._kind.capitalize()} saved successfully", "id": item["id"]}

    def delete(self, item_id: str | None) -> dict:
        if not item_id:
            raise ValidationError(f"{self._kind.capitalize()} ID is required")

        item = self.get(item_id)
        try:
            self._store.delete(self._key(item_id))
        except StorageError as e:
            raise UpstreamError(f"Failed to delete {self._kind}", details=e.message) from e

        if item.get("page"):
            self._drop_batch(item["page"])
        logger.info("{} {} deleted", self._kind.capitalize(), item_id)
        return {"message": f"{self._kind.capitalize()} deleted successfully", "id": item_id}

    def _save_batch(self, page: str, items: list[dict]) -> None:
        try:
            self._store.save(self._batch_key(page), {"pageId": page, "items": items})
        except StorageError as e:
            logger.warning("Could not write {} batch for page {}: {}", self._kind, page, e.message)

    def _drop_batch(self, page: str) -> None:
        try:
            self._store.delete(self._batch_key(page))
        except StorageError as e:
            logger.warning("Could not drop {} batch for page {}: {}", self._kind, page, e.message)
