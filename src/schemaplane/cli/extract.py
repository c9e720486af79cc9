"""schemaplane extract command - extract a schema document from a source tree."""

import json
from pathlib import Path

import click

from schemaplane.cache import SchemaCache
from schemaplane.config import load_config
from schemaplane.core.errors import CacheError, SchemaPlaneError
from schemaplane.core.logging import configure_logging
from schemaplane.schema import (
    Diagnostic,
    SchemaDocument,
    default_output_name,
    extract_schema,
    validate_root,
    write_schema,
)


@click.command()
@click.argument("root", type=click.Path(path_type=Path))
@click.option(
    "--source-id",
    default=None,
    help="Provenance tag recorded in the document (default: absolute root path)",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: ./schema-<source id>.json)",
)
@click.option("--no-cache", is_flag=True, help="Always re-extract, never read or write the cache")
@click.option("--json", "as_json", is_flag=True, help="Output a JSON summary")
@click.pass_context
def extract_command(
    ctx: click.Context,
    root: Path,
    source_id: str | None,
    output: Path | None,
    no_cache: bool,
    as_json: bool,
) -> None:
    """Extract the persistence schema of the Java sources under ROOT."""
    try:
        root = validate_root(root).resolve()
        config = load_config(root)
    except SchemaPlaneError as e:
        raise click.ClickException(str(e)) from e

    if not (ctx.obj or {}).get("verbose"):
        configure_logging(config=config.logging)

    source_id = source_id or root.as_posix()
    output = output or Path(default_output_name(source_id))
    cache = SchemaCache(config.cache.path) if config.cache.enabled and not no_cache else None

    document: SchemaDocument | None = None
    diagnostics: list[Diagnostic] = []
    version: str | None = None
    if cache is not None:
        version = cache.content_version(root, config.extraction)
        document = cache.get(source_id, version)
    cached = document is not None

    try:
        if document is None:
            result = extract_schema(root, source_id, config=config.extraction)
            document = result.document
            diagnostics = result.diagnostics
            if cache is not None and version is not None:
                try:
                    cache.put(source_id, version, document)
                except CacheError as e:
                    click.echo(f"Warning: {e}", err=True)
        write_schema(document, output)
    except SchemaPlaneError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                {
                    "output": str(output),
                    "source_id": source_id,
                    "cached": cached,
                    "entities": len(document.entities),
                    "embeddables": len(document.embeddables),
                    "diagnostics": [d.to_dict() for d in diagnostics],
                }
            )
        )
        return

    origin = " (from cache)" if cached else ""
    click.echo(
        f"Wrote {len(document.entities)} entities and {len(document.embeddables)} "
        f"embeddables to {output}{origin}"
    )
    for diagnostic in diagnostics:
        location = diagnostic.path or diagnostic.symbol or "-"
        if diagnostic.path and diagnostic.line is not None:
            location = f"{diagnostic.path}:{diagnostic.line}"
        click.echo(f"  {diagnostic.kind.value}: {location}: {diagnostic.message}", err=True)
