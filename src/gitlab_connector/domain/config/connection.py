"""Connect-time parameters model."""

from typing import Optional

from pydantic import BaseModel, Field


class ConnectionConfig(BaseModel):
    """Parameters passed to connect.

    Attributes:
        username: GitLab username (only needed without a stored token)
        password: GitLab password (only needed without a stored token)
        ignore_certificate_errors: Skip TLS verification (None = library default)
        request_timeout: Request timeout in seconds (None = library default)
    """

    username: Optional[str] = None
    password: Optional[str] = None
    ignore_certificate_errors: Optional[bool] = None
    request_timeout: Optional[float] = Field(None, gt=0)
