"""
Data Models for the Post Content Gateway

This module contains the data classes passed between the token manager,
the upstream client and the HTTP layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Credential:
    """The shared access token. Replaced wholesale on every refresh, never mutated."""
    token: str = ""
    expiry: Optional[datetime] = None       # UTC, None until the first refresh

    def is_usable(self, now: datetime, buffer: timedelta) -> bool:
        """True when the token is set and not within `buffer` of its expiry."""
        if not self.token or self.expiry is None:
            return False
        return now + buffer < self.expiry


@dataclass
class MappingField:
    """Key/type/value triple the content platform attaches to a post."""
    key: str
    type: str
    value: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MappingField":
        """
        Build a field from its JSON object; missing or null entries become "".

        Raises:
            ValueError: If key, type or value is present but not a string
        """
        values = {}
        for name in ("key", "type", "value"):
            raw = data.get(name)
            if raw is None:
                raw = ""
            if not isinstance(raw, str):
                raise ValueError(f"mapping field {name} is {type(raw).__name__}, expected string")
            values[name] = raw
        return cls(**values)


@dataclass
class PostContent:
    """Raw (un-normalized) content of a post plus its title."""
    post_id: str
    content: str
    title: str = ""
    mapping_fields: List[MappingField] = field(default_factory=list)


@dataclass
class TokenStatus:
    """Point-in-time view of the credential for the status endpoint."""
    token_preview: str
    expiry: Optional[datetime]
    is_valid: bool
    expires_in: timedelta
