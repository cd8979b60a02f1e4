# centralized configuration loader
# runs load_dotenv() to read .env
# every value is resolved once per process; tests reload() this module or monkeypatch attributes

import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y"}


# Provider
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "").strip()
GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com").rstrip("/")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# Generation caps
MAX_OUTPUT_TOKENS = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Retry
RETRY_MAX_ATTEMPTS = int(os.getenv("RETRY_MAX_ATTEMPTS", "3"))
RETRY_BASE_DELAY_MS = int(os.getenv("RETRY_BASE_DELAY_MS", "1000"))

# Environment / offline mode
APP_ENV = os.getenv("APP_ENV", "production").strip().lower()
USE_MOCK_RESPONSES = _as_bool(os.getenv("USE_MOCK_RESPONSES", "false"))

# Diagnostics
DIAGNOSTICS_AUTOSTART = _as_bool(os.getenv("DIAGNOSTICS_AUTOSTART", "true"))
DIAGNOSTICS_INTERVAL_HOURS = float(os.getenv("DIAGNOSTICS_INTERVAL_HOURS", "12"))
CONNECTIVITY_CHECK_URL = os.getenv("CONNECTIVITY_CHECK_URL", "https://httpbin.org/get")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def use_mock_responses() -> bool:
    # both flags are required so mocking never switches on in production
    return USE_MOCK_RESPONSES and APP_ENV == "development"
