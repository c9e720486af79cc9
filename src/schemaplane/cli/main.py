"""SchemaPlane CLI - schemaplane command."""

import click

from schemaplane import __version__
from schemaplane.cli.describe import describe_command, graph_command
from schemaplane.cli.extract import extract_command
from schemaplane.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="schemaplane")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """SchemaPlane - persistence schema extraction for JPA codebases."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(extract_command, name="extract")
cli.add_command(describe_command, name="describe")
cli.add_command(graph_command, name="graph")


if __name__ == "__main__":
    cli()
