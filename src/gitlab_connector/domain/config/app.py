"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from gitlab_connector.domain.config.connection import ConnectionConfig
from gitlab_connector.domain.config.gitlab import GitLabConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation is performed
    at load time to fail fast on configuration errors.

    Attributes:
        gitlab: GitLab host and token
        connection: Connect-time parameters
    """

    gitlab: GitLabConfig = Field(default_factory=GitLabConfig)
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "gitlab": {
                    "host": "https://gitlab.example.com",
                    "private_token": None,
                },
                "connection": {
                    "username": "bob",
                    "password": None,
                    "ignore_certificate_errors": False,
                    "request_timeout": 30,
                },
            }
        },
    )
