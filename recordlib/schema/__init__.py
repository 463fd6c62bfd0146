"""Schema definition, coercion and parsing."""

from .attributes import AttributeSpec
from .builder import SchemaBuilder, structure
from .cache import ResolutionCache
from .coercion import BOOLEAN_TRUTHY, CoercionResolver, coerce_boolean, reference_candidates
from .definition import SchemaDefinition
from .parser import Parser
from .record import Record, to_plain
from .signature import AttributeSignature, SchemaSignature
from .types import (
    BOOLEAN,
    SELF,
    ArrayOf,
    BooleanType,
    CustomFunction,
    NamedReference,
    NestedSchema,
    Primitive,
    SelfReference,
    TypeDescriptor,
    contextual,
    to_descriptor,
)

__all__ = [
    "ArrayOf",
    "AttributeSignature",
    "AttributeSpec",
    "BOOLEAN",
    "BOOLEAN_TRUTHY",
    "BooleanType",
    "CoercionResolver",
    "CustomFunction",
    "NamedReference",
    "NestedSchema",
    "Parser",
    "Primitive",
    "Record",
    "ResolutionCache",
    "SELF",
    "SchemaBuilder",
    "SchemaDefinition",
    "SchemaSignature",
    "SelfReference",
    "TypeDescriptor",
    "coerce_boolean",
    "contextual",
    "reference_candidates",
    "structure",
    "to_descriptor",
    "to_plain",
]
