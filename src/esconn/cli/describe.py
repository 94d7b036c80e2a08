import click

from esconn.cli.table_renderer import render_table
from esconn.cli.utils import configure_logging, output_error, output_result, resolve_scope
from esconn.schema.resolver import DEFAULT_KEY_NAME, EffectiveModel, Scope, build_effective_model


def _field_rows(model: EffectiveModel) -> list[dict[str, str]]:
    return [
        {
            "field": f.name,
            "type": f.type,
            "sensitive": "yes" if f.sensitive else "",
            "default": f.default_directive,
            "requires": ", ".join(f.requires),
            "conflicts with": ", ".join(f.conflicts_with),
        }
        for f in model.fields
    ]


@click.command(name="describe")
@click.option(
    "--scope",
    type=click.Choice([s.value for s in Scope]),
    help="Usage context to resolve (default: $ESCONN_SCOPE or provider)",
)
@click.option(
    "--key-name", default=DEFAULT_KEY_NAME, show_default=True, help="Block attribute name"
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def describe(scope: str | None, key_name: str, json_output: bool, debug: bool) -> None:
    """Show the effective connection model for a scope.

    \b
    Examples:
        esconn describe                     # Provider-level model
        esconn describe --scope resource    # Resource-level model
        esconn describe --json-output       # Output the model as JSON
    """
    try:
        configure_logging(debug=debug)
        model = build_effective_model(resolve_scope(scope), key_name=key_name)

        if json_output:
            output_result(model.model_dump(mode="json"))
            return

        click.echo(f"{click.style('🔌 Scope:', fg='cyan')} {model.scope.value}")
        click.echo(f"{click.style('📝', fg='cyan')} {model.description}")
        if model.deprecated:
            click.echo(f"{click.style('⚠️  Deprecated:', fg='yellow')} {model.deprecation_message}")
        render_table(_field_rows(model), title=f"{model.key_name} fields")
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
