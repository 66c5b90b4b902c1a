"""
Custom Exception Classes for the Post Content Gateway

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for all gateway application errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(GatewayError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Token Errors
# =============================================================================

class TokenError(GatewayError):
    """Base exception for access-token errors."""
    pass


class TokenRefreshError(TokenError):
    """Raised when a new access token cannot be obtained from the upstream."""
    pass


# =============================================================================
# Upstream API Errors
# =============================================================================

class UpstreamError(GatewayError):
    """Base exception for content platform API errors."""
    pass


class UpstreamRequestError(UpstreamError):
    """Raised when a request to the upstream cannot be sent or its body cannot be read."""
    pass


class UpstreamAuthError(UpstreamError):
    """Raised when the upstream keeps rejecting the bearer token."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class UpstreamResponseError(UpstreamError):
    """Raised when the upstream answers with an error status or an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContentNotFoundError(UpstreamError):
    """Raised when a post has no content mapping field. The title is kept when it parsed."""

    def __init__(self, message: str, title: str = ""):
        super().__init__(message)
        self.title = title
