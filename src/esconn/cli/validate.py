from pathlib import Path
from typing import Any

import click
import yaml

from esconn.cli.utils import configure_logging, output_error, output_result, resolve_scope
from esconn.errors import ConnectionConfigError
from esconn.schema.resolver import DEFAULT_KEY_NAME, Scope, build_effective_model
from esconn.schema.validation import (
    apply_defaults,
    mask_sensitive,
    unwrap_block,
    validate_connection_block,
)


def _load_block(path: Path, key_name: str) -> Any:
    """Read a YAML or JSON file holding either the block or ``{key_name: block}``."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConnectionConfigError(f"Failed to parse {path}: {e}") from e

    if isinstance(data, dict) and key_name in data:
        return data[key_name]
    return data


def _format_settings(settings: dict[str, Any], scope: Scope) -> str:
    output = [
        f"{click.style('✅ Connection block is valid!', fg='green', bold=True)} ({scope.value} scope)"
    ]
    if settings:
        output.append(f"\n{click.style('📋 Settings:', fg='cyan')}")
        for name, value in settings.items():
            output.append(f"  {name}: {value}")
    return "\n".join(output)


@click.command(name="validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--scope",
    type=click.Choice([s.value for s in Scope]),
    help="Usage context to validate for (default: $ESCONN_SCOPE or provider)",
)
@click.option(
    "--key-name", default=DEFAULT_KEY_NAME, show_default=True, help="Block attribute name"
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def validate(file: Path, scope: str | None, key_name: str, json_output: bool, debug: bool) -> None:
    """Validate a connection block file.

    Checks the block against the effective model for the scope and prints
    the resulting settings, with environment defaults applied and
    sensitive values masked.

    \b
    Examples:
        esconn validate conn.yml                    # Validate for provider scope
        esconn validate conn.yml --scope resource   # Validate a resource-level block
        esconn validate conn.yml --json-output      # Output results in JSON format
    """
    try:
        configure_logging(debug=debug)
        model = build_effective_model(resolve_scope(scope), key_name=key_name)

        block = _load_block(file, key_name)
        validate_connection_block(block, model).raise_for_issues()

        values, _ = unwrap_block(block, model)
        settings = mask_sensitive(apply_defaults(values, model), model)

        if json_output:
            output_result({"scope": model.scope.value, "settings": settings})
        else:
            click.echo(_format_settings(settings, model.scope))
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
