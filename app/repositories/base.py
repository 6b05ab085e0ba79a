"""Base repository class."""

from typing import Any

from loguru import logger

from app.repositories.db import connect
from settings import CHARTS_DB_PATH


class BaseRepository:
    """Base repository with common functionality.

    Nothing is opened at construction; each call takes its own connection.
    """

    def __init__(self, db_path: str = CHARTS_DB_PATH):
        self._db_path = db_path
        logger.debug("{} initialized ({})", self.__class__.__name__, db_path)

    def execute(self, query: str, params: list | None = None) -> None:
        """Execute SQL statement."""
        with connect(self._db_path) as conn:
            if params:
                conn.execute(query, params)
            else:
                conn.execute(query)

    def fetchall(self, query: str, params: list | None = None) -> list:
        """Execute and fetch all rows."""
        with connect(self._db_path) as conn:
            return conn.execute(query, params or []).fetchall()

    def fetchone(self, query: str, params: list | None = None) -> Any:
        """Execute and fetch one row."""
        with connect(self._db_path) as conn:
            return conn.execute(query, params or []).fetchone()
