"""
Configuration Settings for the Post Content Gateway

This module centralizes all configuration settings for the gateway,
including environment variables, upstream API details, and token
lifecycle constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to the default if unset or malformed."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_list(name: str, default: str) -> list:
    """Read a comma-separated environment variable into a list of stripped values."""
    value = os.getenv(name) or default
    return [item.strip() for item in value.split(",") if item.strip()]


# =============================================================================
# Server Settings
# =============================================================================

PORT_RAW = os.getenv("PORT", "")
PORT = _env_int("PORT", 8080)
HOST = os.getenv("HOST", "0.0.0.0")
API_BASE_PATH = os.getenv("API_BASE_PATH", "/api/v1")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS Settings
CORS_ALLOWED_ORIGINS = _env_list("CORS_ALLOWED_ORIGINS", "*")
CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Accept", "Authorization", "Content-Type"]
CORS_EXPOSED_HEADERS = ["Link"]
CORS_MAX_AGE = 300

# Optional shared secret for the /token endpoints (open when unset)
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY")
ADMIN_KEY_HEADER = "X-Admin-Key"

# =============================================================================
# Upstream (Content Platform) Settings
# =============================================================================

UPSTREAM_API_URL = os.getenv("UPSTREAM_API_URL", "https://api.bettermode.com/")
NETWORK_DOMAIN = os.getenv("NETWORK_DOMAIN", "www.gpters.org")
USER_AGENT = os.getenv("USER_AGENT", "GPTers-Scraper/1.0")
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 30)   # Seconds per upstream call

REQUEST_HEADERS = {
    'Content-Type': 'application/json',
    'Accept': '*/*',
    'User-Agent': USER_AGENT,
}

# =============================================================================
# Token Lifecycle Settings
# =============================================================================

TOKEN_EXPIRY_BUFFER = _env_int("TOKEN_EXPIRY_BUFFER", 300)            # Treat token as expired 5 min early
TOKEN_FALLBACK_LIFETIME = _env_int("TOKEN_FALLBACK_LIFETIME", 86400)  # Assumed lifetime, real expiry is opaque
MAX_AUTH_RETRIES = 1                  # Refresh-and-retry attempts after a 401
TOKEN_PREVIEW_LENGTH = 10             # Characters of the token shown by /token/status

# =============================================================================
# Content Settings
# =============================================================================

CONTENT_FIELD_KEY = "content"
DEFAULT_FORMAT = "html"
SUPPORTED_FORMATS = ["html", "text"]

# Validation helpers live in config.validators; re-exported here for convenience
from config.validators import ConfigurationError, validate_settings, get_config_summary  # noqa: E402
