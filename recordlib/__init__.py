"""Recordlib.

This package compiles declarative attribute lists into reusable record
schemas and converts loosely typed input (JSON-like mappings) into immutable,
strongly typed records.

Key features:
1. Declarative schemas with a builder or the ``structure`` decorator
2. Per-attribute coercion, defaults, source-key remapping and null checks
3. Self-referential and mutually circular schemas through lazily resolved names
4. Structured error handling across all components
"""

from recordlib.core.errors.errors import (
    AmbiguousAttributeDefinition,
    ArrayExpected,
    BaseError,
    CoercionFailure,
    DefinitionError,
    DuplicateAttribute,
    DuplicateSchema,
    InvalidAttributeName,
    InvalidTypeSpecifier,
    MappingExpected,
    MissingRequiredAttribute,
    NullNotAllowed,
    ParseError,
    RecordConstructionError,
    SchemaAlreadyBuilt,
    UnresolvedReference,
    ValidationError,
    ValueTypeMismatch,
)
from recordlib.core.registry import SchemaRegistry, schema_registry
from recordlib.core.settings import RecordlibSettings, configure_logging, get_settings
from recordlib.schema import (
    BOOLEAN,
    SELF,
    Record,
    SchemaBuilder,
    SchemaDefinition,
    contextual,
    structure,
)

__version__ = "0.1.0"

__all__ = [
    # Schemas
    "BOOLEAN",
    "SELF",
    "Record",
    "SchemaBuilder",
    "SchemaDefinition",
    "contextual",
    "structure",

    # Registry and settings
    "SchemaRegistry",
    "schema_registry",
    "RecordlibSettings",
    "configure_logging",
    "get_settings",

    # Errors
    "BaseError",
    "DefinitionError",
    "AmbiguousAttributeDefinition",
    "DuplicateAttribute",
    "InvalidAttributeName",
    "InvalidTypeSpecifier",
    "SchemaAlreadyBuilt",
    "ParseError",
    "MissingRequiredAttribute",
    "NullNotAllowed",
    "CoercionFailure",
    "ValueTypeMismatch",
    "ArrayExpected",
    "MappingExpected",
    "UnresolvedReference",
    "ValidationError",
    "RecordConstructionError",
    "DuplicateSchema",
]
