"""CLI interface for the GitLab connector"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from gitlab_connector.domain.errors import ConnectorError
from gitlab_connector.infrastructure.config.config_manager import ConfigManager
from gitlab_connector.infrastructure.gitlab.connector import GitLabConnector, coerce_params
from gitlab_connector.infrastructure.gitlab.session import GitLabSession

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_params(params: Tuple[str, ...]) -> Dict[str, Optional[str]]:
    """Parse key=value pairs; values stay text, an empty value means None

    Raises:
        click.BadParameter: If a pair has no "="
    """
    result: Dict[str, Optional[str]] = {}
    for item in params:
        if "=" not in item:
            raise click.BadParameter(f"Expected key=value, got: {item}", param_hint="--param")
        key, raw = item.split("=", 1)
        result[key.strip()] = raw if raw else None
    return result


def to_serializable(value: Any) -> Any:
    """Convert python-gitlab objects into plain JSON-compatible data"""
    if isinstance(value, (list, tuple)):
        return [to_serializable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_serializable(item) for key, item in value.items()}
    if hasattr(value, "asdict"):
        return value.asdict()
    if hasattr(value, "attributes"):
        return value.attributes
    return value


def _build_session(
    config_manager: ConfigManager,
    username: Optional[str],
    password: Optional[str],
    ignore_certificate_errors: Optional[bool],
    timeout: Optional[float],
) -> Tuple[GitLabSession, Dict[str, Any]]:
    """Create session and merge connect-time parameters (CLI wins over config)"""
    connection = config_manager.get_connection_config()
    connect_kwargs = {
        "username": username or connection.username,
        "password": password or connection.password,
        "ignore_certificate_errors": (
            ignore_certificate_errors
            if ignore_certificate_errors is not None
            else connection.ignore_certificate_errors
        ),
        "request_timeout": timeout if timeout is not None else connection.request_timeout,
    }
    return GitLabSession(config_manager.get_gitlab_config()), connect_kwargs


def _output_result(result: Any, output: Optional[Path]) -> None:
    """Write processor result: bytes verbatim, everything else as JSON"""
    if isinstance(result, bytes):
        if output:
            output.write_bytes(result)
            click.echo(f"Wrote {len(result)} bytes to {output}")
        else:
            click.echo(result, nl=False)
        return

    text = json.dumps(to_serializable(result), indent=2, default=str)
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        click.echo(f"Wrote result to {output}")
    else:
        click.echo(text)


connection_options = [
    click.option("--username", "-u", type=str, help="GitLab username (default: from GITLAB_USERNAME or config)"),
    click.option("--password", "-p", type=str, help="GitLab password (default: from GITLAB_PASSWORD or config)"),
    click.option(
        "--ignore-certificate-errors/--verify-certificates",
        default=None,
        help="Skip TLS certificate verification",
    ),
    click.option("--timeout", type=float, help="Request timeout in seconds"),
]


def with_connection_options(func):
    for option in reversed(connection_options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .gitlab-connector.yml config file",
)
@click.option("--host", type=str, help="GitLab host URL. Overrides config.")
@click.pass_context
def cli(ctx, verbose: bool, config: Path, host: str):
    """GitLab connector - call GitLab REST operations from the command line"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["host"] = host


def _load_config(ctx) -> ConfigManager:
    verbose = ctx.obj.get("verbose", False)
    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConnectorError as e:
        _die(str(e), verbose=verbose, exc=e)
    if ctx.obj.get("host"):
        config_manager.config.gitlab.host = ctx.obj["host"]
    return config_manager


@cli.command("test-connectivity")
@with_connection_options
@click.pass_context
def test_connectivity(ctx, username: str, password: str, ignore_certificate_errors: Optional[bool], timeout: float):
    """Connect, verify credentials and disconnect."""
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)
    session, connect_kwargs = _build_session(
        config_manager, username, password, ignore_certificate_errors, timeout
    )
    try:
        session.test_connectivity(**connect_kwargs)
    except ConnectorError as e:
        _die(f"Connection test failed: {e}", verbose=verbose, exc=e)
    click.echo(f"Connection to {session.host} successful.")


@cli.command("operations")
def list_operations():
    """List available operations."""
    for name in GitLabConnector.operations():
        click.echo(name)


@cli.command()
@click.argument("operation", type=str)
@click.option("--param", "-P", "params", multiple=True, help="Operation parameter as key=value (repeatable)")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write result to file")
@with_connection_options
@click.pass_context
def invoke(
    ctx,
    operation: str,
    params: Tuple[str, ...],
    output: Optional[Path],
    username: str,
    password: str,
    ignore_certificate_errors: Optional[bool],
    timeout: float,
):
    """Invoke a GitLab operation.

    OPERATION: Operation name (see "operations" command), e.g. get_project
    """
    verbose = ctx.obj.get("verbose", False)
    kwargs = parse_params(params)
    try:
        kwargs = coerce_params(operation, kwargs)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--param") from e
    config_manager = _load_config(ctx)
    session, connect_kwargs = _build_session(
        config_manager, username, password, ignore_certificate_errors, timeout
    )

    try:
        session.connect(**connect_kwargs)
        connector = GitLabConnector(session)
        result = connector.invoke(operation, **kwargs)
    except (ConnectorError, ValueError) as e:
        _die(f"{operation} failed: {e}", verbose=verbose, exc=e)
    finally:
        session.disconnect()

    _output_result(result, output)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
