"""Configuration manager for loading and validating .gitlab-connector.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from gitlab_connector.domain.config import AppConfig, ConnectionConfig, GitLabConfig
from gitlab_connector.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gitlab-connector.yml"


class ConfigManager:
    """Manages configuration from .gitlab-connector.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .gitlab-connector.yml file (searched from current directory upwards)
    3. Environment variables (GITLAB_URL, GITLAB_TOKEN, GITLAB_USERNAME, GITLAB_PASSWORD)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "gitlab": {
            "host": "https://gitlab.com",
            "private_token": None,
            "oauth_token": None,
        },
        "connection": {
            "username": None,
            "password": None,
            "ignore_certificate_errors": None,
            "request_timeout": None,
        },
    }

    ENV_OVERRIDES = {
        "GITLAB_URL": ("gitlab", "host"),
        "GITLAB_TOKEN": ("gitlab", "private_token"),
        "GITLAB_USERNAME": ("connection", "username"),
        "GITLAB_PASSWORD": ("connection", "password"),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .gitlab-connector.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {field}: {error['msg']}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find config file starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Returns:
            Validated AppConfig instance

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file is not valid YAML
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.error(f"Failed to parse {self.config_path}: {e}")
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping")
            for section, value in list(file_config.items()):
                # "gitlab:" with nothing below it loads as None
                if value is None:
                    file_config[section] = {}
                elif section in self.DEFAULT_CONFIG and not isinstance(value, dict):
                    logger.error(f"Section '{section}' in {self.config_path} is not a mapping")
                    raise ConfigurationError(f"Section '{section}' in {self.config_path} must be a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied
        """
        for env_name, (section, key) in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config.setdefault(section, {})[key] = value
        return config

    def get_gitlab_config(self) -> GitLabConfig:
        """Get GitLab configuration

        Returns:
            GitLab configuration model
        """
        return self.config.gitlab

    def get_connection_config(self) -> ConnectionConfig:
        """Get connect-time parameters

        Returns:
            Connection configuration model
        """
        return self.config.connection

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "gitlab.host" or "gitlab")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
