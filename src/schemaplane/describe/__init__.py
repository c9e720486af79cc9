"""Human-readable renderings of an extracted schema."""

from schemaplane.describe.graph import build_dot_graph
from schemaplane.describe.listing import render_schema_listing

__all__ = ["build_dot_graph", "render_schema_listing"]
