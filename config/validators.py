"""
Configuration Validation for the Post Content Gateway

This module contains configuration validation logic.
Kept apart from settings.py so the checks can run against patched settings in tests.
"""

import logging
from urllib.parse import urlparse

from utils.exceptions import ConfigurationError


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []
    logger = logging.getLogger(__name__)

    # Port must be numeric if it was given at all
    if settings.PORT_RAW and not settings.PORT_RAW.strip().isdigit():
        errors.append(f"PORT must be an integer, got {settings.PORT_RAW!r}")

    # Upstream endpoint
    parsed = urlparse(settings.UPSTREAM_API_URL or "")
    if not (parsed.scheme and parsed.netloc):
        errors.append(f"UPSTREAM_API_URL must be an absolute URL, got {settings.UPSTREAM_API_URL!r}")

    if not settings.NETWORK_DOMAIN:
        errors.append("Missing required environment variable: NETWORK_DOMAIN")

    if not settings.API_BASE_PATH.startswith("/"):
        errors.append(f"API_BASE_PATH must start with '/', got {settings.API_BASE_PATH!r}")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("PORT", settings.PORT, 1, 65535),
        ("MAX_AUTH_RETRIES", settings.MAX_AUTH_RETRIES, 0, 5),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    # Validate timeout values are positive
    timeout_settings = [
        ("REQUEST_TIMEOUT", settings.REQUEST_TIMEOUT),
        ("TOKEN_EXPIRY_BUFFER", settings.TOKEN_EXPIRY_BUFFER),
        ("TOKEN_FALLBACK_LIFETIME", settings.TOKEN_FALLBACK_LIFETIME),
    ]

    for name, value in timeout_settings:
        if value <= 0:
            errors.append(f"{name} must be positive, got {value}")

    # A buffer as long as the lifetime would make every fresh token look expired
    if settings.TOKEN_EXPIRY_BUFFER >= settings.TOKEN_FALLBACK_LIFETIME:
        errors.append(
            f"TOKEN_EXPIRY_BUFFER ({settings.TOKEN_EXPIRY_BUFFER}s) must be shorter than "
            f"TOKEN_FALLBACK_LIFETIME ({settings.TOKEN_FALLBACK_LIFETIME}s)"
        )

    if not settings.ADMIN_API_KEY:
        logger.warning("ADMIN_API_KEY is not set. The /token endpoints are unauthenticated.")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "server": {
            "host": settings.HOST,
            "port": settings.PORT,
            "base_path": settings.API_BASE_PATH,
            "cors_origins": settings.CORS_ALLOWED_ORIGINS,
            "admin_auth": "configured" if settings.ADMIN_API_KEY else "disabled",
        },
        "upstream": {
            "url": settings.UPSTREAM_API_URL,
            "network_domain": settings.NETWORK_DOMAIN,
            "timeout": f"{settings.REQUEST_TIMEOUT}s",
        },
        "token": {
            "expiry_buffer": f"{settings.TOKEN_EXPIRY_BUFFER}s",
            "fallback_lifetime": f"{settings.TOKEN_FALLBACK_LIFETIME}s",
            "max_auth_retries": settings.MAX_AUTH_RETRIES,
        },
    }
