"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = Path(os.getenv("SLIP_OUTPUT_DIR", str(PROJECT_ROOT / "output")))
MOCK_ORDERS_PATH = DATA_DIR / "orders.json"

# Ensure directories exist
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Order API (orders query, line items, routes, slip status)
ORDER_API_BASE_URL = os.getenv("ORDER_API_BASE_URL", "http://localhost:8090").rstrip("/")
ORDER_API_TOKEN = os.getenv("ORDER_API_TOKEN", "")
ORDER_API_TIMEOUT_SECONDS = float(os.getenv("ORDER_API_TIMEOUT_SECONDS", "30"))

# Per-order line-item fetches run with at most this many in flight.
LINE_ITEM_FETCH_CONCURRENCY = max(1, min(int(os.getenv("LINE_ITEM_FETCH_CONCURRENCY", "4")), 64))

# What to do when one product name shows up with different categories: last | first | strict
CATEGORY_CONFLICT_POLICY = os.getenv("CATEGORY_CONFLICT_POLICY", "last").strip().lower()

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# OpenTelemetry
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTEL_EXPORTER_ENDPOINT = os.getenv("OTEL_EXPORTER_ENDPOINT", "http://localhost:4318/v1/traces")
OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "dispatch-slips")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# HTTP server
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))
