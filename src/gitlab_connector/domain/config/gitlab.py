"""GitLab configuration model."""

from typing import Optional

from pydantic import BaseModel


class GitLabConfig(BaseModel):
    """Configuration for the GitLab instance.

    The host is validated at connect time, not here, so a bad host surfaces
    as a connection failure rather than a load failure.

    Attributes:
        host: GitLab instance URL, has to begin with http:// or https://
        private_token: Personal access token (None = obtain from username/password)
        oauth_token: OAuth access token, filled in after a password exchange
    """

    host: str = "https://gitlab.com"
    private_token: Optional[str] = None
    oauth_token: Optional[str] = None
