"""GitLab connector - the operation façade exposed to integration hosts"""

import inspect
import logging
from typing import Any, Dict, List, Optional, Union, get_args, get_origin

from gitlab_connector.domain.config import GitLabConfig
from gitlab_connector.domain.errors import UnknownOperationError
from gitlab_connector.infrastructure.gitlab.operations.groups import GroupOperations
from gitlab_connector.infrastructure.gitlab.operations.hooks import HookOperations
from gitlab_connector.infrastructure.gitlab.operations.issues import IssueOperations
from gitlab_connector.infrastructure.gitlab.operations.merge_requests import MergeRequestOperations
from gitlab_connector.infrastructure.gitlab.operations.projects import ProjectOperations
from gitlab_connector.infrastructure.gitlab.operations.repository import RepositoryOperations
from gitlab_connector.infrastructure.gitlab.operations.users import UserOperations
from gitlab_connector.infrastructure.gitlab.processor import is_processor
from gitlab_connector.infrastructure.gitlab.session import GitLabSession

logger = logging.getLogger(__name__)

BOOL_VALUES = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


class GitLabConnector(
    ProjectOperations,
    GroupOperations,
    UserOperations,
    HookOperations,
    IssueOperations,
    MergeRequestOperations,
    RepositoryOperations,
):
    """GitLab connector

    Thin façade over a GitLabSession: every processor validates its
    identifiers, delegates to python-gitlab through the session's current
    handle and normalizes empty results and failures into connector errors.

    Example:
        session = GitLabSession(GitLabConfig(host="https://gitlab.example.com", private_token="..."))
        session.connect()
        connector = GitLabConnector(session)
        project = connector.invoke("get_project", project_id=42)
    """

    def __init__(self, session: Optional[GitLabSession] = None, config: Optional[GitLabConfig] = None):
        """Initialize connector

        Args:
            session: Session to delegate to (created from config if None)
            config: GitLab configuration used when no session is given
        """
        super().__init__(session or GitLabSession(config))

    @classmethod
    def operations(cls) -> List[str]:
        """Names of all processors, sorted"""
        return sorted(name for name, member in inspect.getmembers(cls) if is_processor(member))

    def invoke(self, name: str, **params: Any) -> Any:
        """Invoke processor by name

        Args:
            name: Processor name (e.g. "get_project")
            **params: Processor parameters

        Returns:
            Processor result

        Raises:
            UnknownOperationError: If no processor has that name
            ValueError: If parameters do not match the processor signature
        """
        if name not in self.operations():
            available = ", ".join(self.operations())
            raise UnknownOperationError(f"Unknown operation: {name}. Available operations: {available}")

        method = getattr(self, name)
        try:
            inspect.signature(method).bind(**params)
        except TypeError as e:
            raise ValueError(f"Invalid parameters for {name}: {e}") from e

        logger.info(f"Invoking {name}")
        return method(**params)


def _convert(name: str, raw: Optional[str], annotation: Any) -> Any:
    """Convert one text value to the type its annotation asks for

    Parameters that accept str keep the text untouched, so tag names like
    "1.10" or SHAs like "0123456" reach GitLab as given.
    """
    if raw is None or annotation is inspect.Parameter.empty:
        return raw
    types = get_args(annotation) if get_origin(annotation) is Union else (annotation,)
    if str in types:
        return raw
    if bool in types:
        value = BOOL_VALUES.get(raw.strip().lower())
        if value is None:
            raise ValueError(f"Parameter '{name}' expects a boolean, got: {raw}")
        return value
    for target in (int, float):
        if target in types:
            try:
                return target(raw.strip())
            except ValueError:
                raise ValueError(f"Parameter '{name}' expects {target.__name__}, got: {raw}") from None
    return raw


def coerce_params(name: str, params: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Convert text parameters (e.g. from the command line) for processor name

    Only int, float and bool annotated parameters are converted. Unknown
    processors and unknown parameters are passed through for invoke() to
    reject.

    Raises:
        ValueError: If a value cannot be converted
    """
    method = getattr(GitLabConnector, name, None)
    if not is_processor(method):
        return dict(params)
    parameters = inspect.signature(method).parameters
    result = {}
    for key, raw in params.items():
        parameter = parameters.get(key)
        result[key] = _convert(key, raw, parameter.annotation) if parameter is not None else raw
    return result
