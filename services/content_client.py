"""
Content Client Module

This module fetches post content from the content platform's GraphQL API.
It authenticates with the token manager's bearer token and, when the
upstream rejects that token, refreshes it and retries once.
"""

from typing import Any, List, Optional

import requests

from config import settings
from data.models import MappingField, PostContent
from services.graphql_client import GraphQLClient
from services.protocols import TokenProvider
from utils.exceptions import (
    ContentNotFoundError, TokenError, TokenRefreshError, UpstreamAuthError, UpstreamResponseError
)
from utils.helpers import safe_get
from utils.logger import get_logger

logger = get_logger(__name__)

POST_QUERY = """
query GetPost($id: ID!) {
    post(id: $id) {
        mappingFields {
            key
            type
            value
        }
        title
    }
}
"""

AUTH_FAILURE_STATUS = 401


class ContentClient:
    """Client for retrieving post content from the content platform."""

    def __init__(
        self,
        token_provider: TokenProvider,
        graphql_client: Optional[GraphQLClient] = None,
        max_auth_retries: Optional[int] = None
    ):
        """
        Initialize the content client.

        Args:
            token_provider: Source of bearer tokens (usually the shared TokenManager)
            graphql_client: Transport to the upstream, a default client is created if omitted
            max_auth_retries: Refresh-and-retry attempts after a 401, defaults to settings.MAX_AUTH_RETRIES
        """
        self.token_provider = token_provider
        self.graphql = graphql_client or GraphQLClient()
        self.max_auth_retries = max_auth_retries if max_auth_retries is not None else settings.MAX_AUTH_RETRIES

    def fetch_content(self, post_id: str) -> PostContent:
        """
        Fetch the raw content and title of a post.

        Args:
            post_id: The upstream post ID

        Returns:
            PostContent: The un-normalized content value and the post title

        Raises:
            TokenRefreshError: If no usable token could be obtained
            UpstreamRequestError: If the request could not be sent
            UpstreamAuthError: If the token was still rejected after the retry
            UpstreamResponseError: If the response was an error or unparseable
            ContentNotFoundError: If the post has no content field
        """
        token = self._get_token()

        for attempt in range(self.max_auth_retries + 1):
            response = self.graphql.execute(POST_QUERY, {"id": post_id}, token=token)

            if response.status_code != AUTH_FAILURE_STATUS:
                return self._parse_post(post_id, response)

            if attempt == self.max_auth_retries:
                break

            logger.warning(f"Token rejected while fetching post {post_id}, refreshing and retrying...")
            try:
                self.token_provider.refresh_token()
            except TokenError as e:
                raise TokenRefreshError(f"failed to refresh token: {e}") from e
            token = self._get_token()

        logger.error(f"Upstream rejected the access token for post {post_id} after {self.max_auth_retries} retry")
        raise UpstreamAuthError(
            f"upstream rejected the access token (HTTP {AUTH_FAILURE_STATUS}) after "
            f"{self.max_auth_retries} refresh attempt(s)",
            status_code=AUTH_FAILURE_STATUS
        )

    def _get_token(self) -> str:
        try:
            return self.token_provider.get_token()
        except TokenError as e:
            raise TokenRefreshError(f"error getting access token: {e}") from e

    def _parse_post(self, post_id: str, response: requests.Response) -> PostContent:
        """
        Turn a post query response into PostContent.

        Args:
            post_id: The requested post ID
            response: The upstream response (any status but 401)

        Returns:
            PostContent: Content of the first non-empty "content" mapping field
        """
        if not 200 <= response.status_code < 300:
            logger.error(f"Post {post_id} request failed with HTTP {response.status_code}")
            raise UpstreamResponseError(
                f"upstream returned status {response.status_code}",
                status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamResponseError(f"error parsing response: {e}", status_code=response.status_code) from e

        if not isinstance(body, dict):
            raise UpstreamResponseError("error parsing response: expected a JSON object",
                                        status_code=response.status_code)

        post = safe_get(body, "data", "post")
        errors = body.get("errors") or []
        if not post and errors:
            messages = "; ".join(str(safe_get(err, "message", default=err)) for err in errors)
            raise UpstreamResponseError(f"upstream returned errors: {messages}", status_code=response.status_code)

        title = safe_get(body, "data", "post", "title", default="")
        if not isinstance(title, str):
            raise UpstreamResponseError(
                f"error parsing response: title is {type(title).__name__}, expected string",
                status_code=response.status_code
            )
        fields = self._parse_mapping_fields(safe_get(body, "data", "post", "mappingFields", default=[]))

        content = next((f.value for f in fields if f.key == settings.CONTENT_FIELD_KEY), "")
        if not content:
            logger.warning(f"Post {post_id} has no content field")
            raise ContentNotFoundError("content field not found", title=title)

        return PostContent(post_id=post_id, content=content, title=title, mapping_fields=fields)

    @staticmethod
    def _parse_mapping_fields(raw_fields: Any) -> List[MappingField]:
        if not isinstance(raw_fields, list):
            raise UpstreamResponseError("error parsing response: mappingFields is not a list")
        try:
            return [MappingField.from_dict(item) for item in raw_fields if isinstance(item, dict)]
        except ValueError as e:
            raise UpstreamResponseError(f"error parsing response: {e}") from e
