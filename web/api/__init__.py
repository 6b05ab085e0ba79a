"""HTTP API - FastAPI routers per domain."""
