"""
Request and response models for the HTTP API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ContentRequest(BaseModel):
    post_id: str = Field("", description="ID of the post to retrieve")
    format: Optional[str] = Field(None, description="Output format: 'html' (default) or 'text'")


class ContentResponse(BaseModel):
    content: str
    format: str
    post_id: str
    title: Optional[str] = None
    char_count: int = Field(..., description="Number of characters in the normalized content")


class TokenRefreshResponse(BaseModel):
    status: str
    message: str


class TokenStatusResponse(BaseModel):
    status: str
    token_preview: str
    expiry: Optional[datetime] = None
    is_valid: bool
    expires_in: str
