"""
Shared Test Fixtures for the Post Content Gateway

This module provides common fixtures used across all test modules.
Fixtures include mock HTTP responses, GraphQL payload factories, a
controllable clock, log capture, and a fake token provider.
"""

import pytest
from unittest.mock import MagicMock
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import TokenStatus
from services.graphql_client import GraphQLClient
from utils.exceptions import TokenRefreshError


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    root_logger = logging.getLogger()
    original_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(handler)

    yield handler.records

    root_logger.removeHandler(handler)
    root_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(
                status_code=200,
                json_data={'key': 'value'}
            )

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        text: str = '',
        json_data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> MagicMock:
        """
        Create a mock HTTP response object.

        Args:
            status_code: HTTP status code (default 200).
            text: Text content (will be auto-generated from json_data if not provided).
            json_data: Value to return from response.json().
            headers: Response headers dictionary.

        Returns:
            MagicMock: A mock response object mimicking requests.Response.
        """
        import json

        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.headers = headers or {'Content-Type': 'application/json'}
        mock_response.ok = 200 <= status_code < 300

        if text:
            mock_response.text = text
        elif json_data is not None:
            mock_response.text = json.dumps(json_data)
        else:
            mock_response.text = ''

        # Configure json() method
        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")

        return mock_response

    return _create_response


# =============================================================================
# GraphQL Payload Factories
# =============================================================================

@pytest.fixture
def token_payload():
    """Factory for token issuance response bodies."""
    def _create(access_token: Optional[str] = "guest-token-abcdefghijklmnop") -> Dict[str, Any]:
        return {"data": {"tokens": {"accessToken": access_token}}}
    return _create


@pytest.fixture
def post_payload():
    """
    Factory for post query response bodies.

    Usage:
        body = post_payload(content="<p>Hi</p>", title="Hello")
        body = post_payload(fields=[{"key": "summary", "type": "text", "value": "x"}])
    """
    def _create(
        content: Optional[str] = '"<p>Hello &amp; welcome</p>"',
        title: Optional[str] = "Test Post Title",
        fields: Optional[List[Dict[str, str]]] = None
    ) -> Dict[str, Any]:
        if fields is None:
            fields = [{"key": "cover", "type": "image", "value": "cover.png"}]
            if content is not None:
                fields.append({"key": "content", "type": "html", "value": content})
        return {"data": {"post": {"mappingFields": fields, "title": title}}}
    return _create


@pytest.fixture
def mock_graphql():
    """A GraphQLClient mock; set execute.return_value or side_effect per test."""
    return MagicMock(spec=GraphQLClient)


# =============================================================================
# Clock
# =============================================================================

class FakeClock:
    """Controllable UTC clock for token expiry tests."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


# =============================================================================
# Fake Token Provider
# =============================================================================

class FakeTokenProvider:
    """In-memory TokenProvider for testing the content client and the gateway.

    Each refresh hands out the next token from `tokens`. Set `fail_refresh`
    to make refreshes raise TokenRefreshError.
    """

    def __init__(self, tokens: Optional[List[str]] = None):
        self.tokens = list(tokens or ["token-one-0123456789", "token-two-0123456789", "token-three-0123456"])
        self.current = self.tokens.pop(0)
        self.refresh_calls = 0
        self.get_calls = 0
        self.fail_refresh = False
        self.fail_get = False

    def get_token(self) -> str:
        self.get_calls += 1
        if self.fail_get:
            raise TokenRefreshError("token request failed with status 503")
        return self.current

    def refresh_token(self) -> None:
        self.refresh_calls += 1
        if self.fail_refresh:
            raise TokenRefreshError("token request failed with status 503")
        if self.tokens:
            self.current = self.tokens.pop(0)

    def status(self) -> TokenStatus:
        return TokenStatus(
            token_preview=self.current[:10] + "...",
            expiry=datetime(2025, 1, 2, 12, 0, 0, tzinfo=timezone.utc),
            is_valid=True,
            expires_in=timedelta(hours=23, minutes=59, seconds=58)
        )


@pytest.fixture
def fake_token_provider():
    return FakeTokenProvider()
