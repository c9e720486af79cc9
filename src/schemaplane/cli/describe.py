"""schemaplane describe / graph commands - render a schema document."""

from pathlib import Path

import click

from schemaplane.core.errors import SchemaPlaneError
from schemaplane.describe import build_dot_graph, render_schema_listing
from schemaplane.schema import SchemaDocument, read_schema

_schema_file = click.argument(
    "schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


def _load(schema_file: Path) -> SchemaDocument:
    try:
        return read_schema(schema_file)
    except SchemaPlaneError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@_schema_file
def describe_command(schema_file: Path) -> None:
    """Print a compact table listing of SCHEMA_FILE."""
    click.echo(render_schema_listing(_load(schema_file)), nl=False)


@click.command()
@_schema_file
@click.option(
    "--max-columns",
    type=click.IntRange(min=1),
    default=12,
    show_default=True,
    help="Columns shown per table",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write DOT source to a file instead of stdout",
)
def graph_command(schema_file: Path, max_columns: int, output: Path | None) -> None:
    """Print a Graphviz DOT description of SCHEMA_FILE."""
    dot = build_dot_graph(_load(schema_file), max_columns=max_columns)
    if output is None:
        click.echo(dot, nl=False)
        return
    try:
        output.write_text(dot, encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot write {output}: {e}") from e
    click.echo(f"Wrote graph to {output}")
