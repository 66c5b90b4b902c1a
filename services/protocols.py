"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the services the gateway
depends on. These protocols enable loose coupling, dependency injection,
and easier testing.

Protocols defined:
- TokenProvider: Interface for handing out and renewing the bearer token
- ContentFetcher: Interface for retrieving a post's raw content
"""

from typing import Protocol

from data.models import PostContent, TokenStatus


class TokenProvider(Protocol):
    """Protocol defining the interface for access-token management.

    Implementations should provide methods for:
    - Returning a currently valid token, refreshing it first if needed
    - Forcing a refresh against the upstream
    - Reporting the current token state
    """

    def get_token(self) -> str:
        """Return a token that is valid for at least the expiry buffer.

        Returns:
            The bearer token.

        Raises:
            TokenRefreshError: If a needed refresh failed.
        """
        ...

    def refresh_token(self) -> None:
        """Unconditionally fetch a new token from the upstream.

        Raises:
            TokenRefreshError: If the upstream call or its response was unusable.
                The previously stored token is left untouched.
        """
        ...

    def status(self) -> TokenStatus:
        """Return a consistent snapshot of the current token state."""
        ...


class ContentFetcher(Protocol):
    """Protocol defining the interface for post content retrieval."""

    def fetch_content(self, post_id: str) -> PostContent:
        """Fetch the raw content and title of a post.

        Args:
            post_id: The upstream post identifier.

        Returns:
            PostContent with the un-normalized content string and title.

        Raises:
            GatewayError: A subclass describing which step failed.
        """
        ...
