"""DuckDB connection management.

DuckDB locks the database file for the whole process that opens it, and the
sync job runs as a child process next to the API. Connections are therefore
opened per operation and closed straight after.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import duckdb
from loguru import logger

from app.models import ALL_DDL
from settings import CHARTS_DB_PATH


def db_exists(db_path: str = CHARTS_DB_PATH) -> bool:
    """Check if database file exists."""
    return Path(db_path).exists()


def _tables_exist(conn: duckdb.DuckDBPyConnection) -> bool:
    """Check if the chart table already exists."""
    try:
        result = conn.execute("SELECT COUNT(*) FROM information_schema.tables WHERE table_name = 'chart'").fetchone()
        return result[0] > 0
    except duckdb.Error:
        return False


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Initialize all tables from DDL statements (idempotent - uses IF NOT EXISTS)."""
    if _tables_exist(conn):
        return

    for ddl in ALL_DDL:
        conn.execute(ddl)
    logger.info("DB tables initialized")


@contextmanager
def connect(db_path: str = CHARTS_DB_PATH) -> Iterator[duckdb.DuckDBPyConnection]:
    """Connection for one operation; the file lock is released on exit."""
    if not db_exists(db_path):
        logger.warning("DB not found: {}. Creating empty DB.", db_path)
    conn = duckdb.connect(db_path)
    try:
        init_tables(conn)
        yield conn
    finally:
        conn.close()
