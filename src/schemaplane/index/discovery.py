"""Source file discovery with directory pruning.

Tier 0 (HARDCODED_DIRS): VCS internals and our own data, never traversed.
Tier 1 (DEFAULT_PRUNABLE_DIRS): build outputs, dependency caches and IDE
metadata. Extra names come from ExtractionConfig.excluded_dirs.

Traversal is sorted so that every run visits files in the same order.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from schemaplane.config.models import ExtractionConfig
from schemaplane.core.logging import get_logger

log = get_logger(__name__)

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        ".schemaplane",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # JVM build outputs
        "target",
        "build",
        "out",
        "bin",
        ".gradle",
        ".mvn",
        # IDEs
        ".idea",
        ".vscode",
        ".settings",
        # Other ecosystems sharing the repo
        "node_modules",
        "__pycache__",
        ".venv",
        "venv",
    )
)


@dataclass(frozen=True)
class SourceFile:
    """A discovered source file."""

    path: Path  # Absolute path
    rel_path: str  # POSIX path relative to the source root
    size: int


def discover_sources(root: Path, config: ExtractionConfig | None = None) -> list[SourceFile]:
    """Find source files under root, sorted by relative path.

    Args:
        root: Source root (must exist and be a directory)
        config: Extraction config (extensions, extra exclusions)

    Returns:
        SourceFile entries in deterministic order.
    """
    config = config or ExtractionConfig()
    extensions = tuple(config.file_extensions)
    pruned = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS | frozenset(config.excluded_dirs)

    found: list[SourceFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place; sort for deterministic traversal
        dirnames[:] = sorted(d for d in dirnames if d not in pruned)
        for filename in sorted(filenames):
            if not filename.lower().endswith(extensions):
                continue
            path = Path(dirpath) / filename
            try:
                size = path.stat().st_size
            except OSError as e:
                log.warning("source_stat_failed", path=str(path), error=str(e))
                continue
            found.append(
                SourceFile(path=path, rel_path=path.relative_to(root).as_posix(), size=size)
            )

    found.sort(key=lambda f: f.rel_path)
    log.debug("sources_discovered", root=str(root), count=len(found))
    return found
