import click

from esconn.cli.describe import describe
from esconn.cli.validate import validate
from esconn.version import PACKAGE_VERSION


@click.group(invoke_without_command=True)
@click.version_option(PACKAGE_VERSION, prog_name="esconn")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """esconn CLI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(describe)
cli.add_command(validate)


if __name__ == "__main__":
    cli()
