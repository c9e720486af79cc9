"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import os
import sys
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local schemaplane package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of schemaplane modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("schemaplane"):
        del sys.modules[module_name]

from schemaplane.schema import ExtractionResult, extract_schema  # noqa: E402

SourceWriter = Callable[[dict[str, str]], Path]


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Remove SCHEMAPLANE__* env vars for clean tests."""
    orig = {k: v for k, v in os.environ.items() if k.startswith("SCHEMAPLANE__")}
    for k in orig:
        del os.environ[k]
    yield
    for k in [k for k in os.environ if k.startswith("SCHEMAPLANE__")]:
        del os.environ[k]
    os.environ.update(orig)


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def write_sources(source_root: Path) -> SourceWriter:
    """Write Java sources (relative path -> dedented text) under the source root."""

    def _write(files: dict[str, str]) -> Path:
        for rel_path, text in files.items():
            path = source_root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
        return source_root

    return _write


@pytest.fixture
def extract(write_sources: SourceWriter) -> Callable[[dict[str, str]], ExtractionResult]:
    """Write sources and run extraction over them."""

    def _extract(files: dict[str, str]) -> ExtractionResult:
        root = write_sources(files)
        return extract_schema(root, "test://repo")

    return _extract
