"""Authenticated handle - an immutable GitLab API capability"""

from dataclasses import dataclass, field
from typing import Any

PRIVATE_TOKEN = "private"
OAUTH_TOKEN = "oauth"


@dataclass(frozen=True)
class GitLabHandle:
    """API handle bound to one host and one token.

    Never mutated; a session replaces the whole handle on connect and drops
    it on disconnect.
    """

    host: str
    token: str = field(repr=False)  # Never shown in logs
    token_type: str = PRIVATE_TOKEN  # "private" or "oauth"
    api: Any = field(default=None, repr=False, compare=False)  # gitlab.Gitlab

    def __post_init__(self):
        """Validate handle data"""
        if self.token_type not in (PRIVATE_TOKEN, OAUTH_TOKEN):
            raise ValueError(f"Unknown token type: {self.token_type}")

    @property
    def is_oauth(self) -> bool:
        """Check if handle authenticates with an OAuth bearer token"""
        return self.token_type == OAUTH_TOKEN
