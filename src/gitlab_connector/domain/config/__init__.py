"""Configuration models with Pydantic validation."""

from gitlab_connector.domain.config.app import AppConfig
from gitlab_connector.domain.config.connection import ConnectionConfig
from gitlab_connector.domain.config.gitlab import GitLabConfig

__all__ = [
    "AppConfig",
    "ConnectionConfig",
    "GitLabConfig",
]
