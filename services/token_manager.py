"""
Token Manager Module

This module owns the single shared access token for the content platform.
It hands out a valid bearer token to concurrent request threads and renews
it when it is missing, about to expire, or rejected by the upstream.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from config import settings
from data.models import Credential, TokenStatus
from services.graphql_client import GraphQLClient
from utils.exceptions import TokenRefreshError, UpstreamRequestError
from utils.helpers import mask_token, safe_get
from utils.locks import ReadWriteLock
from utils.logger import get_logger

logger = get_logger(__name__)

TOKEN_QUERY = """
query GetGuestToken($networkDomain: String!) {
    tokens(networkDomain: $networkDomain) {
        accessToken
    }
}
"""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenManager:
    """
    Service that manages the guest access token of the content platform.

    Reads share a reader/writer lock; a refresh holds the write lock for its
    whole duration, network call included, so at most one refresh is in
    flight. Callers that queued behind a refresh re-check the credential
    once they get the lock and reuse the fresh token instead of refreshing again.
    """

    def __init__(
        self,
        network_domain: Optional[str] = None,
        graphql_client: Optional[GraphQLClient] = None,
        expiry_buffer: Optional[timedelta] = None,
        token_lifetime: Optional[timedelta] = None,
        clock: Callable[[], datetime] = _utc_now,
        initial_refresh: bool = True
    ):
        """
        Initialize the token manager.

        Args:
            network_domain: Network whose guest token is requested, defaults to settings.NETWORK_DOMAIN
            graphql_client: Transport to the upstream, a default client is created if omitted
            expiry_buffer: How long before expiry a token counts as expired
            token_lifetime: Lifetime assumed for every new token
            clock: Returns the current UTC time
            initial_refresh: Fetch a token right away. Failure is logged, not raised.
        """
        self.network_domain = network_domain or settings.NETWORK_DOMAIN
        self.graphql = graphql_client or GraphQLClient()
        self.expiry_buffer = expiry_buffer if expiry_buffer is not None else timedelta(seconds=settings.TOKEN_EXPIRY_BUFFER)
        self.token_lifetime = token_lifetime if token_lifetime is not None else timedelta(seconds=settings.TOKEN_FALLBACK_LIFETIME)
        self._clock = clock
        self._lock = ReadWriteLock()
        self._credential = Credential()

        if initial_refresh:
            try:
                self.refresh_token()
            except TokenRefreshError as e:
                logger.warning(f"Initial token fetch failed: {e}. Will retry on first request.")

    def get_token(self) -> str:
        """
        Get a valid access token, refreshing it first if needed.

        Returns:
            str: A token that is not within the expiry buffer

        Raises:
            TokenRefreshError: If a refresh was needed and failed
        """
        with self._lock.read_locked():
            credential = self._credential
        if credential.is_usable(self._clock(), self.expiry_buffer):
            return credential.token

        with self._lock.write_locked():
            # Another thread may have refreshed while we waited for the lock
            credential = self._credential
            if credential.is_usable(self._clock(), self.expiry_buffer):
                return credential.token

            self._refresh_locked()
            return self._credential.token

    def refresh_token(self) -> None:
        """
        Fetch a new guest token from the upstream and store it.

        Raises:
            TokenRefreshError: If the request failed or returned no token.
                The stored credential is left unchanged.
        """
        with self._lock.write_locked():
            self._refresh_locked()

    def status(self) -> TokenStatus:
        """
        Get a consistent snapshot of the current token state.

        Returns:
            TokenStatus: Masked preview, expiry, validity and remaining time
        """
        with self._lock.read_locked():
            credential = self._credential

        now = self._clock()
        if credential.expiry is None:
            return TokenStatus(
                token_preview=mask_token(credential.token, settings.TOKEN_PREVIEW_LENGTH),
                expiry=None,
                is_valid=False,
                expires_in=timedelta(0)
            )

        return TokenStatus(
            token_preview=mask_token(credential.token, settings.TOKEN_PREVIEW_LENGTH),
            expiry=credential.expiry,
            is_valid=now < credential.expiry,
            expires_in=credential.expiry - now
        )

    def _refresh_locked(self) -> None:
        """Request a token and swap it in. Caller must hold the write lock."""
        try:
            response = self.graphql.execute(TOKEN_QUERY, {"networkDomain": self.network_domain})
        except UpstreamRequestError as e:
            logger.error(f"Token refresh failed: {e}")
            raise TokenRefreshError(f"error sending token request: {e}") from e

        if response.status_code != 200:
            logger.error(f"Token refresh failed with HTTP {response.status_code}")
            raise TokenRefreshError(f"token request failed with status {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Token refresh returned malformed JSON: {e}")
            raise TokenRefreshError(f"error parsing token response: {e}") from e

        token = safe_get(body, "data", "tokens", "accessToken", default="")
        if not isinstance(token, str) or not token:
            logger.error("Token refresh returned no token")
            raise TokenRefreshError("no token returned from API")

        # The token is opaque, so its real expiry is unknown
        expiry = self._clock() + self.token_lifetime
        self._credential = Credential(token=token, expiry=expiry)
        logger.info(f"Token refreshed successfully, valid until {expiry.isoformat()}")
