import json
import logging
import os
import traceback
from typing import Any

import click

from esconn.errors import ConnectionValidationError
from esconn.schema.resolver import Scope


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """True when the variable is "1", "true" or "yes" in any case, default when unset."""
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def resolve_scope(cli_scope: str | None) -> Scope:
    """Resolve the scope to resolve the connection model for.

    Priority order:
    1. CLI argument (--scope)
    2. Environment variable (ESCONN_SCOPE)
    3. Provider scope
    """
    if cli_scope:
        return Scope(cli_scope)

    env_scope = os.environ.get("ESCONN_SCOPE")
    if env_scope:
        try:
            return Scope(env_scope.lower())
        except ValueError:
            raise click.BadParameter(
                f"ESCONN_SCOPE must be one of: {', '.join(s.value for s in Scope)}"
            ) from None

    return Scope.PROVIDER


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging (overrides log_level if True)
        log_level: Log level string ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    """
    if not debug:
        debug = get_env_flag("ESCONN_DEBUG")
    if not log_level:
        log_level = os.environ.get("ESCONN_LOG_LEVEL")

    if debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root_logger.addHandler(stream_handler)

    logging.getLogger("esconn").setLevel(level)


def format_error(error: Exception, debug: bool = False) -> dict[str, Any]:
    """Format an error for output.

    Args:
        error: The exception that occurred
        debug: Whether to include debug information

    Returns:
        Dict containing error information
    """
    error_info: dict[str, Any] = {"error": str(error)}

    if isinstance(error, ConnectionValidationError):
        error_info["fields"] = error.field_names
        error_info["issues"] = error.issues

    if debug:
        error_info["traceback"] = traceback.format_exc()
        error_info["type"] = error.__class__.__name__

    return error_info


def output_result(result: Any) -> None:
    """Print a successful result inside the JSON status envelope."""
    click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Output an error in either JSON or human-readable format, then abort.

    Args:
        error: The exception that occurred
        json_output: Whether to output in JSON format
        debug: Whether to include debug information
    """
    error_info = format_error(error, debug)

    if json_output:
        click.echo(json.dumps({"status": "error", **error_info}, indent=2))
    else:
        click.echo(f"Error: {error_info['error']}", err=True)
        if debug and "traceback" in error_info:
            click.echo("\nTraceback:", err=True)
            click.echo(error_info["traceback"], err=True)

    raise click.Abort()
