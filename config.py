"""
config.py — environment configuration for the rain checker.

Values come from the process environment, optionally seeded from a local
.env file (python-dotenv).
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# OpenWeatherMap
# ---------------------------------------------------------------------------

OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY")
OPENWEATHER_BASE = os.getenv("OPENWEATHER_BASE", "https://api.openweathermap.org")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))  # seconds, per call

# Value shipped in .env.example; treated the same as a missing key
PLACEHOLDER_API_KEY = "your_api_key_here"

# ---------------------------------------------------------------------------
# Web server
# ---------------------------------------------------------------------------

PORT = int(os.getenv("PORT", "5000"))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "0") == "1"
APP_ENV = os.getenv("APP_ENV", "development")
TRUST_PROXY = os.getenv("TRUST_PROXY", "0") == "1"

# Per-IP limit on /check-weather
RATE_LIMIT_MAX = int(os.getenv("RATE_LIMIT_MAX", "100"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))

SERVICE_NAME = "weather-rain-checker"


def api_key_configured(api_key: str | None) -> bool:
    """True when *api_key* looks like a real key."""
    return bool(api_key) and api_key != PLACEHOLDER_API_KEY
