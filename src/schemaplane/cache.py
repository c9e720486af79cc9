"""Schema document cache keyed by (source identifier, content version).

The content version of a source root is:
- the HEAD commit id, when the root lies in a git worktree with no
  uncommitted or untracked changes
- otherwise ``sha256-<digest>`` over the sorted relative paths and bytes of
  the discovered source files

An unchanged checkout therefore maps to the same entry and skips extraction.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

import pygit2

from schemaplane.config.models import ExtractionConfig
from schemaplane.core.errors import CacheError, ExtractionError
from schemaplane.core.logging import get_logger
from schemaplane.index.discovery import discover_sources
from schemaplane.schema.models import SchemaDocument
from schemaplane.schema.ops import read_schema, safe_source_name

log = get_logger(__name__)


def _git_version(root: Path) -> str | None:
    """HEAD commit id for a clean worktree containing root, else None."""
    repo_path = pygit2.discover_repository(str(root))
    if repo_path is None:
        return None
    try:
        repo = pygit2.Repository(repo_path)
    except pygit2.GitError as e:
        log.debug("git_open_failed", root=str(root), error=str(e))
        return None
    if repo.is_bare or repo.head_is_unborn or repo.workdir is None:
        return None
    try:
        if repo.status():
            log.debug("worktree_dirty", root=str(root))
            return None
        version = str(repo.head.peel(pygit2.Commit).id)
    except pygit2.GitError as e:
        log.debug("git_status_failed", root=str(root), error=str(e))
        return None

    workdir = Path(repo.workdir).resolve()
    resolved = root.resolve()
    if resolved != workdir:
        # Same commit, different subtree
        subpath = resolved.relative_to(workdir).as_posix()
        version += "-" + hashlib.sha256(subpath.encode("utf-8")).hexdigest()[:12]
    return version


def _content_digest(root: Path, config: ExtractionConfig | None) -> str:
    digest = hashlib.sha256()
    for source in discover_sources(root, config):
        digest.update(source.rel_path.encode("utf-8"))
        digest.update(b"\0")
        try:
            digest.update(source.path.read_bytes())
        except OSError as e:
            # Extraction skips the same file; keep the version stable
            log.debug("source_unreadable", path=source.rel_path, error=str(e))
            digest.update(b"\0unreadable")
        digest.update(b"\0")
    return f"sha256-{digest.hexdigest()}"


class SchemaCache:
    """Directory of cached documents: ``<dir>/<safe source id>/<version>.json``."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory).expanduser()

    @staticmethod
    def content_version(root: Path | str, config: ExtractionConfig | None = None) -> str:
        root = Path(root)
        version = _git_version(root)
        if version is None:
            version = _content_digest(root, config)
        log.debug("content_version", root=str(root), version=version)
        return version

    def entry_path(self, source_id: str, version: str) -> Path:
        return self.directory / safe_source_name(source_id) / f"{safe_source_name(version)}.json"

    def get(self, source_id: str, version: str) -> SchemaDocument | None:
        """Cached document, or None on a miss or an unreadable entry."""
        path = self.entry_path(source_id, version)
        if not path.exists():
            log.debug("cache_miss", source_id=source_id, version=version)
            return None
        try:
            document = read_schema(path)
        except ExtractionError as e:
            log.warning("cache_entry_unreadable", path=str(path), error=e.message)
            return None
        log.info("cache_hit", source_id=source_id, version=version)
        return document

    def put(self, source_id: str, version: str, document: SchemaDocument) -> Path:
        """Store a document, replacing any previous entry atomically.

        Raises:
            CacheError: If the entry cannot be written.
        """
        path = self.entry_path(source_id, version)
        tmp = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(document.to_json() + "\n", encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise CacheError.write_failed(str(path), str(e)) from e
        log.debug("cache_stored", path=str(path))
        return path
