"""GitLab session lifecycle: connect, disconnect, validate, test"""

import logging
import threading
from typing import Optional

import gitlab
import requests
from gitlab.exceptions import GitlabAuthenticationError, GitlabError

from gitlab_connector.domain.config import GitLabConfig
from gitlab_connector.domain.errors import (
    AuthenticationError,
    ConfigurationError,
    ConnectivityError,
    CredentialError,
    NotConnectedError,
)
from gitlab_connector.domain.models.handle import OAUTH_TOKEN, PRIVATE_TOKEN, GitLabHandle
from gitlab_connector.infrastructure.http_client import exchange_password_for_token

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class GitLabSession:
    """Connection to one GitLab host

    Two states: disconnected (initial) and connected. The authenticated
    handle is immutable and published under a lock, so connect/disconnect
    from different threads never leave a half-built handle visible.
    """

    def __init__(self, config: Optional[GitLabConfig] = None):
        """Initialize session

        Args:
            config: GitLab host and token configuration (defaults to gitlab.com)
        """
        self.config = config or GitLabConfig()
        self._lock = threading.Lock()
        self._handle: Optional[GitLabHandle] = None

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def handle(self) -> GitLabHandle:
        """Current authenticated handle

        Raises:
            NotConnectedError: If the session is disconnected
        """
        with self._lock:
            handle = self._handle
        if handle is None:
            raise NotConnectedError("Not connected to GitLab. Call connect() first.")
        return handle

    def _validate_host(self) -> None:
        logger.debug("Checking Gitlab host...")
        if _is_blank(self.config.host):
            logger.error("Host cannot be empty.")
            raise ConfigurationError("Host cannot be empty.")
        if not (self.config.host.startswith("https://") or self.config.host.startswith("http://")):
            logger.error("Host has to begin with protocol \"https\" or \"http\".")
            raise ConfigurationError("Host has to begin with protocol \"https\" or \"http\".")

    def _resolve_token(
        self,
        username: Optional[str],
        password: Optional[str],
        verify: bool,
        timeout: Optional[float],
    ) -> tuple:
        """Return (token, token_type), exchanging credentials if no token is stored"""
        if not _is_blank(self.config.private_token):
            logger.debug("Using configured private token")
            return self.config.private_token, PRIVATE_TOKEN
        if not _is_blank(self.config.oauth_token):
            logger.debug("Using cached OAuth token")
            return self.config.oauth_token, OAUTH_TOKEN

        logger.debug("No token configured, username and password will be used to obtain one")
        if _is_blank(username):
            logger.error("Username cannot be empty.")
            raise CredentialError("Username cannot be empty.")
        if _is_blank(password):
            logger.error("Password cannot be empty.")
            raise CredentialError("Password cannot be empty.")

        token = exchange_password_for_token(
            self.config.host, username, password, verify=verify, timeout=timeout
        )
        self.config.oauth_token = token
        return token, OAUTH_TOKEN

    def connect(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        ignore_certificate_errors: Optional[bool] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        """Connect to the GitLab API

        A token is obtained from username/password if none is configured.
        The handle keeps python-gitlab defaults otherwise: transient 5xx errors
        are not retried, while HTTP 429 answers are still retried by the
        library (obey_rate_limit).

        Args:
            username: GitLab username (ignored when a token is configured)
            password: GitLab password (ignored when a token is configured)
            ignore_certificate_errors: Skip TLS verification (None = default)
            request_timeout: Request timeout in seconds (None = default)

        Raises:
            ConfigurationError: If host is empty or lacks http(s) scheme
            CredentialError: If token is missing and username/password are blank
            ConnectivityError: If the token exchange cannot reach the host
            AuthenticationError: If the token exchange yields no token
        """
        self._validate_host()

        verify = not ignore_certificate_errors
        token, token_type = self._resolve_token(username, password, verify, request_timeout)

        kwargs = {}
        if token_type == OAUTH_TOKEN:
            kwargs["oauth_token"] = token
        else:
            kwargs["private_token"] = token
        if ignore_certificate_errors is not None:
            kwargs["ssl_verify"] = verify
            logger.debug(f"Ignore certificate errors is set to: {ignore_certificate_errors}")
        if request_timeout is not None:
            kwargs["timeout"] = request_timeout
            logger.debug(f"Request timeout is set to: {request_timeout}")

        api = gitlab.Gitlab(self.config.host, **kwargs)
        handle = GitLabHandle(host=self.config.host, token=token, token_type=token_type, api=api)
        with self._lock:
            self._handle = handle
        logger.info(f"Connected to {self.config.host}")

    def disconnect(self) -> None:
        """Drop the API handle. Safe to call when already disconnected."""
        with self._lock:
            self._handle = None
        logger.debug("API handler is set to None.")

    def is_connected(self) -> bool:
        """Check if connection is established"""
        with self._lock:
            return self._handle is not None

    def test_connectivity(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        ignore_certificate_errors: Optional[bool] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        """Connect, verify the token against GitLab, then disconnect

        The session is disconnected afterwards on every path; failures are
        re-raised after cleanup.

        Raises:
            ConfigurationError, CredentialError, ConnectivityError, AuthenticationError
        """
        logger.debug("Trying to connect to the Gitlab...")
        try:
            self.connect(username, password, ignore_certificate_errors, request_timeout)
            api = self.handle.api
            try:
                api.auth()
            except GitlabAuthenticationError as e:
                raise AuthenticationError(f"GitLab rejected the token: {e}") from e
            except GitlabError as e:
                raise ConnectivityError(f"GitLab at \"{self.config.host}\" answered with an error: {e}") from e
            except requests.exceptions.RequestException as e:
                raise ConnectivityError(f"Cannot connect to the \"{self.config.host}\".") from e
            logger.info("Connection test successful.")
        except Exception as e:
            logger.error(f"Connection error: {e}")
            raise
        finally:
            self.disconnect()

    # State-machine vocabulary, independent of any host framework
    open = connect
    close = disconnect
    is_open = is_connected
    check_reachable = test_connectivity
