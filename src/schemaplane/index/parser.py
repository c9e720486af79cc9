"""Tree-sitter parsing of Java sources.

The parser only produces syntax trees. Declarations are read out of the
trees by the symbol index; nothing here knows about persistence annotations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_java


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    root_node: Any  # Tree-sitter Node
    error_count: int
    total_nodes: int

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


@dataclass(frozen=True)
class ParseFailure:
    """A source file that was skipped."""

    rel_path: str
    reason: str


@dataclass
class JavaParser:
    """
    Tree-sitter parser for Java sources.

    Usage::

        parser = JavaParser()
        result = parser.parse(Path("src/main/java/Post.java"))
        if not result.has_errors:
            walk(result.root_node)
    """

    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._language = tree_sitter.Language(tree_sitter_java.language())
        self._parser = tree_sitter.Parser(self._language)

    def parse(self, path: Path, content: bytes | None = None) -> ParseResult:
        """
        Parse a Java file.

        Args:
            path: Path to file
            content: File content as bytes. If None, reads from path.

        Returns:
            ParseResult with tree and error counts.
        """
        if content is None:
            content = path.read_bytes()

        tree = self._parser.parse(content)

        error_count = 0
        total_nodes = 0
        # Iterative walk; generated sources can nest deeper than the recursion limit
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            stack.extend(node.children)

        return ParseResult(
            tree=tree,
            root_node=tree.root_node,
            error_count=error_count,
            total_nodes=total_nodes,
        )
