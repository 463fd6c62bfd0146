"""Registries for named schemas."""

from .registry import BaseRegistry, SchemaRegistry, schema_registry

__all__ = ["BaseRegistry", "SchemaRegistry", "schema_registry"]
