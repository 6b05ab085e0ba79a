"""Repositories package - data access for S3, DuckDB, temp files and memory caches."""

from app.repositories.base import BaseRepository
from app.repositories.charts import ChartRepository
from app.repositories.common import CacheRepository, cache_key
from app.repositories.db import connect, db_exists, init_tables
from app.repositories.storage import ObjectStore, TempFileStore

__all__ = [
    # DB
    "connect",
    "db_exists",
    "init_tables",
    # Base
    "BaseRepository",
    # Common
    "CacheRepository",
    "cache_key",
    # Charts
    "ChartRepository",
    # Storage
    "ObjectStore",
    "TempFileStore",
]
