"""Application settings."""

import os
from pathlib import Path

# Storage
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME", "tl-state-of-solana")
S3_CONDITIONAL_WRITES = os.getenv("S3_CONDITIONAL_WRITES", "true").lower() == "true"

# Database (chart backup store)
CHARTS_DB_PATH = os.getenv("CHARTS_DB_PATH", "charts.duckdb")

# Local temp data served by file-backed endpoints
TEMP_DIR = Path(os.getenv("TEMP_DIR", "temp"))

# Logging
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# API
TOPLEDGER_BASE_URL = os.getenv("TOPLEDGER_BASE_URL", "https://analytics.topledger.xyz/tl/api")
TOPLEDGER_RESEARCH_URL = os.getenv("TOPLEDGER_RESEARCH_URL", "https://analytics.topledger.xyz/tl-research/api")
API_TIMEOUT = 60
API_MAX_ATTEMPTS = int(os.getenv("API_MAX_ATTEMPTS", "1"))
MAX_CONCURRENT = 20

# Caches (seconds)
CHART_DATA_TTL = 5 * 60
CHART_CONFIG_TTL = 5 * 60
AUTH_TTL = 5 * 60

# Auto-update
AUTO_UPDATE_ENABLED = os.getenv("AUTO_UPDATE_ENABLED", "true").lower() == "true"
UPDATE_INTERVAL = 10 * 60
UPDATE_INITIAL_DELAY = 30

# Refresh script
FETCH_TIMEOUT = 15
FETCH_BATCH_SIZE = 3
FETCH_BATCH_DELAY = 1.0
FETCH_PARAM_DELAY = 0.2

# Auth / integrations
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "solana2024")
INTERNAL_AUTH_PASSWORD = os.getenv("INTERNAL_AUTH_PASSWORD", "")
STATUS_API_KEY = os.getenv("STATUS_API_KEY", "dev-status-key")
BREVO_API_KEY = os.getenv("BREVO_API_KEY", "")
BREVO_LIST_ID = int(os.getenv("BREVO_LIST_ID", "0"))
BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")
GA_TRACKING_ID = os.getenv("GA_TRACKING_ID", "")

# Fixed TopLedger queries: name -> (query id, api key)
TL_QUERIES = {
    "txn_fees": (13249, os.getenv("TL_KEY_TXN_FEES", "")),
    "tps": (13335, os.getenv("TL_KEY_TPS", "")),
    "validator_performance": (14256, os.getenv("TL_KEY_VALIDATOR_PERFORMANCE", "")),
    "dex_volume": (12253, os.getenv("TL_KEY_DEX_VOLUME", "")),
    "tvl_velocity": (12459, os.getenv("TL_KEY_TVL_VELOCITY", "")),
    "stablecoin_tvl": (12905, os.getenv("TL_KEY_STABLECOIN_TVL", "")),
}
