"""Raw HTTP calls that python-gitlab does not cover.

Only the password-for-token exchange lives here; every other request goes
through the python-gitlab handle.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from gitlab_connector.domain.errors import AuthenticationError, ConnectivityError

logger = logging.getLogger(__name__)

OAUTH_TOKEN_PATH = "/oauth/token"


def exchange_password_for_token(
    host: str,
    username: str,
    password: str,
    *,
    verify: bool = True,
    timeout: Optional[float] = None,
) -> str:
    """Exchange username/password for an OAuth access token.

    Uses the resource owner password credentials grant. One request, no retry.

    Args:
        host: GitLab base URL
        username: GitLab username
        password: GitLab password
        verify: Verify TLS certificates
        timeout: Request timeout in seconds

    Returns:
        Access token

    Raises:
        ConnectivityError: If the host cannot be reached or answers with 5xx
        AuthenticationError: If credentials are rejected or no token is returned
    """
    url = host.rstrip("/") + OAUTH_TOKEN_PATH
    payload: Dict[str, Any] = {
        "grant_type": "password",
        "username": username,
        "password": password,
    }

    logger.debug(f"HTTP POST {url}")
    try:
        resp = requests.post(url, data=payload, verify=verify, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        if status_code is not None and 400 <= status_code < 500:
            logger.error(f"GitLab rejected credentials for {username} ({status_code})")
            raise AuthenticationError(f"GitLab rejected the credentials ({status_code}).") from e
        logger.error(f"Token exchange with {host} failed: {e}")
        raise ConnectivityError(f"Cannot connect to the \"{host}\".") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Connection to {host} failed: {e}")
        raise ConnectivityError(f"Cannot connect to the \"{host}\".") from e

    try:
        body = resp.json()
    except ValueError as e:
        logger.error(f"Token response from {host} is not valid JSON")
        raise AuthenticationError("Token response is not valid JSON.") from e

    token = body.get("access_token") if isinstance(body, dict) else None
    if not token or not str(token).strip():
        logger.error("Token exchange succeeded but returned no access token")
        raise AuthenticationError("Private token is blank.")

    logger.debug("Access token obtained")
    return token
