"""Processor plumbing shared by all GitLab operations"""

import datetime
import logging
from typing import Any, Callable, Dict, List, Optional, Union

import requests
from gitlab.const import AccessLevel
from gitlab.exceptions import GitlabAuthenticationError, GitlabError

from gitlab_connector.domain.errors import (
    AuthenticationError,
    ConnectivityError,
    NotFoundOrEmptyResult,
    OperationError,
)
from gitlab_connector.infrastructure.gitlab.session import GitLabSession

logger = logging.getLogger(__name__)

PROCESSOR_ATTR = "__gitlab_processor__"

VISIBILITY_LEVELS = {0: "private", 10: "internal", 20: "public"}


def processor(func: Callable) -> Callable:
    """Mark a connector method as an invocable processor"""
    setattr(func, PROCESSOR_ATTR, True)
    return func


def is_processor(obj: Any) -> bool:
    return bool(getattr(obj, PROCESSOR_ATTR, False))


def payload(**fields: Any) -> Dict[str, Any]:
    """Build request data, leaving out unset (None) fields"""
    return {key: value for key, value in fields.items() if value is not None}


def apply_changes(obj: Any, **fields: Any) -> Any:
    """Set non-None attributes on a python-gitlab object before save()"""
    for key, value in fields.items():
        if value is not None:
            setattr(obj, key, value)
    return obj


def to_access_level(value: Union[int, str, None], default: AccessLevel = AccessLevel.DEVELOPER) -> int:
    """Normalize access level given as int, numeric string or role name

    Raises:
        ValueError: If the role name is unknown
    """
    if value is None:
        return int(default)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    try:
        return int(AccessLevel[text.upper()])
    except KeyError:
        raise ValueError(f"Unknown access level: {value}") from None


def visibility(public: Optional[bool], visibility_level: Optional[int]) -> Optional[str]:
    """Map legacy public flag / visibility level to GitLab visibility name"""
    if visibility_level is not None:
        if visibility_level not in VISIBILITY_LEVELS:
            raise ValueError(f"Unknown visibility level: {visibility_level}")
        return VISIBILITY_LEVELS[visibility_level]
    if public is None:
        return None
    return "public" if public else "private"


def iso_date(value: Union[datetime.date, str, None]) -> Optional[str]:
    """Format a due date as YYYY-MM-DD"""
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return datetime.date.fromisoformat(str(value).strip()[:10]).isoformat()


def _is_empty(result: Any) -> bool:
    if result is None:
        return True
    if isinstance(result, (bytes, str, dict, list, tuple)):
        return len(result) == 0
    return False


class ProcessorBase:
    """Base for the operation façade

    Every processor goes through _call, which takes one handle snapshot from
    the session, runs the delegated request and maps python-gitlab/requests
    failures into connector errors.
    """

    def __init__(self, session: GitLabSession):
        self.session = session

    @staticmethod
    def _require(**params: Any) -> None:
        """Check that required identifiers are present

        Raises:
            ValueError: If a parameter is None or a blank string
        """
        for name, value in params.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                logger.error(f"Parameter '{name}' cannot be empty.")
                raise ValueError(f"Parameter '{name}' cannot be empty.")

    def _call(self, action: str, func: Callable[[Any], Any]) -> Any:
        """Run func(api) and translate failures

        Args:
            action: Human readable description (e.g. "load project 5")
            func: Callable receiving the gitlab.Gitlab instance

        Returns:
            Whatever func returned

        Raises:
            NotConnectedError: If the session is disconnected
            AuthenticationError: On 401 from GitLab
            NotFoundOrEmptyResult: On 404 from GitLab
            OperationError: On any other GitLab error
            ConnectivityError: If GitLab cannot be reached
        """
        api = self.session.handle.api
        logger.debug(f"Trying to {action}...")
        try:
            result = func(api)
        except GitlabAuthenticationError as e:
            logger.error(f"Failed to {action}: authentication rejected")
            raise AuthenticationError(f"Failed to {action}: {e}") from e
        except GitlabError as e:
            status_code = getattr(e, "response_code", None)
            if status_code == 404:
                logger.error(f"Failed to {action}: not found")
                raise NotFoundOrEmptyResult(f"Failed to {action}: not found.", status_code) from e
            logger.error(f"Failed to {action} ({status_code}): {e}")
            raise OperationError(f"Failed to {action}: {e}", status_code) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to {action}: cannot reach GitLab: {e}")
            raise ConnectivityError(f"Failed to {action}: cannot reach \"{self.session.host}\".") from e
        logger.debug(f"Done: {action}")
        return result

    def _fetch(self, action: str, func: Callable[[Any], Any]) -> Any:
        """Delegate a call whose result must exist"""
        result = self._call(action, func)
        if _is_empty(result):
            logger.error(f"Failed to {action} (empty result)")
            raise NotFoundOrEmptyResult(f"Failed to {action} (empty result).")
        return result

    def _list(self, action: str, func: Callable[[Any], Any]) -> List[Any]:
        """Delegate a collection query; an empty collection is a valid answer"""
        result = self._call(action, func)
        if result is None:
            logger.error(f"Failed to {action} (returned None)")
            raise NotFoundOrEmptyResult(f"Failed to {action} (returned None).")
        items = list(result)
        logger.debug(f"{action}: {len(items)} item(s)")
        return items

    def _execute(self, action: str, func: Callable[[Any], Any]) -> None:
        """Delegate a call without a result"""
        self._call(action, func)
