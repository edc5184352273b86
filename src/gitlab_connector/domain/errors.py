"""Connector error hierarchy"""

from typing import Optional


class ConnectorError(Exception):
    """Base class for all connector errors."""

    pass


class ConfigurationError(ConnectorError):
    """Configuration is missing or malformed (e.g. host without scheme)."""

    pass


class CredentialError(ConnectorError):
    """Username or password missing when no token is configured."""

    pass


class ConnectivityError(ConnectorError):
    """GitLab host cannot be reached."""

    pass


class AuthenticationError(ConnectorError):
    """GitLab rejected the credentials or returned no usable token."""

    pass


class NotConnectedError(ConnectorError):
    """Operation attempted without a live session."""

    pass


class UnknownOperationError(ConnectorError):
    """Requested processor name is not registered."""

    pass


class OperationError(ConnectorError):
    """Remote call failed.

    Attributes:
        status_code: HTTP status code returned by GitLab (None if unknown)
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundOrEmptyResult(OperationError):
    """Remote call returned nothing where a resource was expected."""

    pass
