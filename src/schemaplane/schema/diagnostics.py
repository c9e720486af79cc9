"""Recoverable extraction problems.

Nothing below the corpus level raises. Each problem becomes a Diagnostic on
the extraction result and a structlog warning, and extraction continues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from schemaplane.core.logging import get_logger

log = get_logger(__name__)


class DiagnosticKind(str, Enum):
    PARSE_FAILURE = "parse_failure"
    DUPLICATE_TYPE = "duplicate_type"
    UNRESOLVED_ENUM = "unresolved_enum"
    UNRESOLVED_TARGET = "unresolved_target"
    MISSING_EMBEDDABLE = "missing_embeddable"
    INHERITANCE_CYCLE = "inheritance_cycle"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    path: str | None = None  # Source file, relative to the root
    symbol: str | None = None  # Class, or Class.field
    line: int | None = None  # 1-based line of the declaration

    def to_dict(self) -> dict[str, str | int | None]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": self.path,
            "symbol": self.symbol,
            "line": self.line,
        }


@dataclass
class DiagnosticSink:
    """Collects diagnostics in the order they are reported."""

    items: list[Diagnostic] = field(default_factory=list)

    def report(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        path: str | None = None,
        symbol: str | None = None,
        line: int | None = None,
    ) -> None:
        log.warning(kind.value, detail=message, path=path, symbol=symbol, line=line)
        self.items.append(
            Diagnostic(kind=kind, message=message, path=path, symbol=symbol, line=line)
        )

    def __len__(self) -> int:
        return len(self.items)
