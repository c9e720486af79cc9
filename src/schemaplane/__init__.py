"""SchemaPlane - persistence-schema extraction for JPA-annotated Java sources."""

__version__ = "0.1.0"
