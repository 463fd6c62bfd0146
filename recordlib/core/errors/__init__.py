"""Structured error types for recordlib."""

from .errors import (
    AmbiguousAttributeDefinition,
    ArrayExpected,
    BaseError,
    CoercionFailure,
    DefinitionError,
    DuplicateAttribute,
    DuplicateSchema,
    ErrorContext,
    InvalidAttributeName,
    InvalidTypeSpecifier,
    MappingExpected,
    MissingRequiredAttribute,
    NullNotAllowed,
    ParseError,
    RecordConstructionError,
    RegistryError,
    SchemaAlreadyBuilt,
    UnresolvedReference,
    ValidationError,
    ValueTypeMismatch,
)
from .models import (
    AttributeErrorContext,
    ErrorContextData,
    ReferenceErrorContext,
    RegistryErrorContext,
    ValidationErrorDetail,
)

__all__ = [
    "AmbiguousAttributeDefinition",
    "ArrayExpected",
    "AttributeErrorContext",
    "BaseError",
    "CoercionFailure",
    "DefinitionError",
    "DuplicateAttribute",
    "DuplicateSchema",
    "ErrorContext",
    "ErrorContextData",
    "InvalidAttributeName",
    "InvalidTypeSpecifier",
    "MappingExpected",
    "MissingRequiredAttribute",
    "NullNotAllowed",
    "ParseError",
    "RecordConstructionError",
    "ReferenceErrorContext",
    "RegistryError",
    "RegistryErrorContext",
    "SchemaAlreadyBuilt",
    "UnresolvedReference",
    "ValidationError",
    "ValidationErrorDetail",
    "ValueTypeMismatch",
]
