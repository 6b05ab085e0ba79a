"""Admin password check backed by `config/admin-auth.json`."""

import hmac
from datetime import datetime, timezone

from loguru import logger

from app.errors import AuthError, StorageError, UpstreamError, ValidationError
from app.repositories.common import CacheRepository
from app.repositories.storage import ObjectStore
from settings import ADMIN_PASSWORD, INTERNAL_AUTH_PASSWORD

AUTH_KEY = "config/admin-auth.json"
MIN_PASSWORD_LENGTH = 8


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode(), b.encode())


class AuthService:
    """Stored password (seeded from the default) plus an optional internal password."""

    def __init__(
        self,
        store: ObjectStore,
        cache: CacheRepository,
        default_password: str = ADMIN_PASSWORD,
        internal_password: str = INTERNAL_AUTH_PASSWORD,
    ):
        self._store = store
        self._cache = cache
        self._default = default_password
        self._internal = internal_password

    def _stored_password(self) -> str:
        entry = self._cache.get(AUTH_KEY)
        if entry is not None:
            return entry.data

        try:
            config = self._store.get(AUTH_KEY)
        except StorageError as e:
            logger.warning("Auth config unreadable, using default password: {}", e.message)
            return self._default

        if config and config.get("password"):
            password = config["password"]
        else:
            password = self._default
            self._seed()

        self._cache.set(AUTH_KEY, password)
        return password

    def _seed(self) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            self._store.save(AUTH_KEY, {"password": self._default, "created": now, "lastUpdated": now})
            logger.info("Seeded admin auth config")
        except StorageError as e:
            logger.warning("Could not seed admin auth config: {}", e.message)

    def is_valid(self, password: str | None) -> bool:
        if not password:
            return False
        if self._internal and _same(password, self._internal):
            return True
        return _same(password, self._stored_password())

    def login(self, password: str | None) -> dict:
        if not password:
            raise ValidationError("Password is required")
        if not self.is_valid(password):
            logger.info("Rejected admin login")
            raise AuthError("Invalid password")
        return {"success": True, "message": "Authentication successful"}

    def require_admin(self, password: str | None) -> None:
        if not self.is_valid(password):
            raise AuthError("Unauthorized")

    def change_password(self, current: str | None, new: str | None) -> dict:
        if not current or not new:
            raise ValidationError("Current password and new password are required")
        if len(new) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if not _same(current, self._stored_password()):
            raise AuthError("Current password is incorrect")

        now = datetime.now(timezone.utc).isoformat()
        try:
            config = self._store.get(AUTH_KEY) or {"created": now}
            self._store.save(AUTH_KEY, {**config, "password": new, "lastUpdated": now})
        except StorageError as e:
            raise UpstreamError("Failed to save new password to S3", details=e.message) from e

        self._cache.set(AUTH_KEY, new)
        logger.info("Admin password changed")
        return {"success": True, "message": "Password updated successfully"}
