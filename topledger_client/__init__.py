"""TopLedger analytics API client package."""

from topledger_client.base import BaseClient, QueryError, extract_rows, set_api_config, split_api_key
from topledger_client.charts import ChartClient
from topledger_client.dex import DexClient
from topledger_client.network import NetworkClient

__all__ = [
    # Base
    "BaseClient",
    "QueryError",
    "extract_rows",
    "split_api_key",
    "set_api_config",
    # Clients
    "ChartClient",
    "DexClient",
    "NetworkClient",
]
