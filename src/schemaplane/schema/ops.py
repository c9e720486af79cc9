"""Schema extraction operations.

extract_schema runs the whole pipeline on one source root:

    discover -> symbol index -> templates -> entities -> SchemaDocument

Only a missing or non-directory root raises. Every other problem is a
diagnostic on the result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from schemaplane.config.models import ExtractionConfig
from schemaplane.core.errors import ExtractionError
from schemaplane.core.logging import get_logger, set_run_id
from schemaplane.index.discovery import discover_sources
from schemaplane.index.symbols import SymbolIndex
from schemaplane.schema.diagnostics import Diagnostic, DiagnosticKind, DiagnosticSink
from schemaplane.schema.entities import build_entities
from schemaplane.schema.models import SchemaDocument
from schemaplane.schema.templates import build_templates

log = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_UNDERSCORE_RUNS = re.compile(r"_+")
MAX_SAFE_NAME_LENGTH = 50


@dataclass
class ExtractionResult:
    """Result of extract_schema."""

    document: SchemaDocument
    diagnostics: list[Diagnostic] = field(default_factory=list)
    files_parsed: int = 0
    files_failed: int = 0

    def diagnostics_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]


def validate_root(root: Path | str) -> Path:
    """Check that a source root exists and is a directory.

    Raises:
        ExtractionError: If it does not.
    """
    root = Path(root)
    if not root.exists():
        raise ExtractionError.root_not_found(str(root))
    if not root.is_dir():
        raise ExtractionError.root_not_directory(str(root))
    return root


def extract_schema(
    root: Path | str,
    source_id: str,
    *,
    config: ExtractionConfig | None = None,
    analyzed_at: datetime | None = None,
) -> ExtractionResult:
    """Extract the persistence schema of all sources under root.

    Args:
        root: Source root (a local checkout)
        source_id: Provenance tag stored as the document's repository URL
        config: Discovery and parsing settings
        analyzed_at: Timestamp to record. Defaults to now (UTC, whole seconds);
                     pin it for reproducible output.

    Returns:
        ExtractionResult with the document and diagnostics.

    Raises:
        ExtractionError: If root does not exist or is not a directory.
    """
    root = validate_root(root)
    config = config or ExtractionConfig()
    run_id = set_run_id()
    log.info("extraction_started", root=str(root), source_id=source_id, run_id=run_id)

    diagnostics = DiagnosticSink()
    sources = discover_sources(root, config)
    index = SymbolIndex.build(
        sources, max_file_size_bytes=int(config.max_file_size_mb * 1024 * 1024)
    )
    for failure in index.failures:
        diagnostics.report(
            DiagnosticKind.PARSE_FAILURE,
            f"Skipped unparseable source: {failure.reason}",
            path=failure.rel_path,
        )
    for duplicate in index.duplicates:
        first = index.lookup(duplicate.fqn)
        diagnostics.report(
            DiagnosticKind.DUPLICATE_TYPE,
            f"Duplicate declaration of {duplicate.fqn} ignored; first declared in "
            f"{first.unit.rel_path if first else 'unknown'}",
            path=duplicate.unit.rel_path,
            symbol=duplicate.fqn,
            line=duplicate.line,
        )

    # Barrier: every template exists before the first entity is built
    registry = build_templates(index, diagnostics)
    entities = build_entities(index, registry, diagnostics)

    if analyzed_at is None:
        analyzed_at = datetime.now(UTC).replace(microsecond=0)

    document = SchemaDocument(
        repository_url=source_id,
        analysis_timestamp=analyzed_at,
        entities=entities,
        embeddables=list(registry.embeddables.values()),
    )
    log.info(
        "extraction_complete",
        entities=len(document.entities),
        embeddables=len(document.embeddables),
        diagnostics=len(diagnostics),
    )
    return ExtractionResult(
        document=document,
        diagnostics=list(diagnostics.items),
        files_parsed=len(index.units),
        files_failed=len(index.failures),
    )


def write_schema(document: SchemaDocument, path: Path | str) -> Path:
    """Write a document as indented JSON, creating parent directories.

    Raises:
        ExtractionError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document.to_json() + "\n", encoding="utf-8")
    except OSError as e:
        raise ExtractionError.write_failed(str(path), str(e)) from e
    log.info("schema_written", path=str(path))
    return path


def read_schema(path: Path | str) -> SchemaDocument:
    """Read a document written by write_schema.

    Raises:
        ExtractionError: If the file is missing or not a valid document.
    """
    path = Path(path)
    try:
        return SchemaDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ExtractionError.read_failed(str(path), str(e)) from e
    except ValidationError as e:
        raise ExtractionError.read_failed(str(path), f"invalid schema document: {e}") from e


def safe_source_name(source_id: str) -> str:
    """File-name-safe form of a source identifier.

    ``https://github.com/acme/blog`` -> ``https_github.com_acme_blog``
    """
    safe = _UNDERSCORE_RUNS.sub("_", _UNSAFE_CHARS.sub("_", source_id))
    return safe[:MAX_SAFE_NAME_LENGTH]


def default_output_name(source_id: str) -> str:
    return f"schema-{safe_source_name(source_id)}.json"
