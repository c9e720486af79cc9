"""Java source indexing: discovery, parsing, symbols and declared types."""

from schemaplane.index.discovery import SourceFile, discover_sources
from schemaplane.index.parser import JavaParser, ParseFailure, ParseResult
from schemaplane.index.symbols import FieldDecl, SourceUnit, SymbolIndex, TypeDecl

__all__ = [
    "FieldDecl",
    "JavaParser",
    "ParseFailure",
    "ParseResult",
    "SourceFile",
    "SourceUnit",
    "SymbolIndex",
    "TypeDecl",
    "discover_sources",
]
