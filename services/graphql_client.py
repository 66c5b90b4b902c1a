"""
GraphQL Client Module

Thin transport for the content platform's single GraphQL endpoint.
Both the token manager and the content client send their queries through it.
"""

from typing import Any, Dict, Optional

import requests

from config import settings
from utils.exceptions import UpstreamRequestError
from utils.logger import get_logger

logger = get_logger(__name__)


class GraphQLClient:
    """POSTs {query, variables} documents to the upstream GraphQL endpoint."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            endpoint: GraphQL URL, defaults to settings.UPSTREAM_API_URL
            timeout: Seconds per request, defaults to settings.REQUEST_TIMEOUT
            headers: Default headers, defaults to settings.REQUEST_HEADERS
            session: requests.Session to reuse; a new one is created if omitted
        """
        self.endpoint = endpoint or settings.UPSTREAM_API_URL
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.headers = dict(headers if headers is not None else settings.REQUEST_HEADERS)
        self.session = session or requests.Session()

    def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None
    ) -> requests.Response:
        """
        Send a GraphQL document.

        Args:
            query: The GraphQL query text
            variables: Query variables, omitted from the body when None
            token: Bearer token for the Authorization header, if any

        Returns:
            requests.Response: The raw response; status handling is left to the caller

        Raises:
            UpstreamRequestError: If the request could not be sent
        """
        payload: Dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables

        headers = dict(self.headers)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            return self.session.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Request to {self.endpoint} failed: {e}")
            raise UpstreamRequestError(f"error sending request: {e}") from e

    def close(self):
        """Close the underlying HTTP session."""
        self.session.close()
