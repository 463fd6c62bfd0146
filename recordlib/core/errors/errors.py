"""Base error classes with structured error context.

This module provides the error taxonomy of recordlib. Build-time problems
derive from ``DefinitionError``; problems found while parsing input derive
from ``ParseError``. Parse errors that correspond to a built-in exception
category also inherit from it (``ValueError``, ``TypeError``,
``LookupError``) so callers can catch them either way.
"""

import traceback
from datetime import datetime
from typing import Any, List, Optional

from .models import (
    AttributeErrorContext,
    ErrorContextData,
    ReferenceErrorContext,
    RegistryErrorContext,
    ValidationErrorDetail,
)


class ErrorContext:
    """Structured context attached to every framework error."""

    def __init__(self, context_data: ErrorContextData):
        """Initialize error context.

        Args:
            context_data: Required error context data
        """
        self._data = context_data

    @classmethod
    def create(
        cls, schema_name: str, error_type: str, error_location: str, component: str, operation: str
    ) -> "ErrorContext":
        """Create a new error context with required data.

        Args:
            schema_name: Name of the schema involved
            error_type: Type of error
            error_location: Location in code
            component: Component raising error
            operation: Operation being performed

        Returns:
            New ErrorContext instance
        """
        context_data = ErrorContextData(
            schema_name=schema_name,
            error_type=error_type,
            error_location=error_location,
            component=component,
            operation=operation,
        )
        return cls(context_data)

    @property
    def data(self) -> ErrorContextData:
        """Get the context data."""
        return self._data

    @property
    def timestamp(self) -> datetime:
        """Get the context creation timestamp."""
        return self._data.timestamp

    def __str__(self) -> str:
        return f"ErrorContext({self._data.model_dump()})"


class BaseError(Exception):
    """Base class for all recordlib errors.

    This class provides:
    1. Structured error information with context
    2. Clean serialization for logging and reporting
    3. Cause tracking for nested errors
    """

    def __init__(self, message: str, context: ErrorContext, cause: Optional[Exception] = None):
        """Initialize error.

        Args:
            message: Error message
            context: Required error context
            cause: Optional cause exception
        """
        self.message = message
        self.context = context
        self.cause = cause
        self.timestamp = datetime.now()
        self.traceback = self._capture_traceback()

        super().__init__(message)

    def _capture_traceback(self) -> str:
        return traceback.format_exc()

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary.

        Returns:
            Dictionary representation of error
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.data.model_dump(),
            "cause": str(self.cause) if self.cause else None,
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        cause_str = f" (caused by: {self.cause})" if self.cause else ""
        return f"{self.__class__.__name__}: {self.message}{cause_str}"


class ValidationError(BaseError):
    """Error raised when pydantic validation of a record fails."""

    def __init__(
        self,
        message: str,
        validation_errors: List[ValidationErrorDetail],
        context: ErrorContext,
        cause: Optional[Exception] = None,
    ):
        """Initialize validation error.

        Args:
            message: Error message
            validation_errors: List of validation error details
            context: Required error context
            cause: Optional cause exception
        """
        self.validation_errors = validation_errors
        super().__init__(message, context, cause)

    def __str__(self) -> str:
        base_str = super().__str__()
        if self.validation_errors:
            errors_str = "; ".join(f"{e.location}: {e.message}" for e in self.validation_errors[:3])
            if len(self.validation_errors) > 3:
                errors_str += f" (and {len(self.validation_errors) - 3} more)"
            return f"{base_str} - {errors_str}"
        return base_str


class RecordConstructionError(ValidationError):
    """Direct record construction was rejected (missing or unknown fields)."""


class DefinitionError(BaseError):
    """Error raised while a schema is being declared.

    Definition errors are programming mistakes in the schema itself and are
    never recovered.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext,
        attribute_context: AttributeErrorContext,
        cause: Optional[Exception] = None,
    ):
        """Initialize definition error.

        Args:
            message: Error message
            context: Required error context
            attribute_context: Attribute being declared
            cause: Optional cause exception
        """
        self.attribute_context = attribute_context
        super().__init__(message, context, cause)

    @property
    def attribute_name(self) -> str:
        return self.attribute_context.attribute_name

    @classmethod
    def for_attribute(
        cls,
        message: str,
        *,
        schema_name: str,
        attribute_name: str,
        operation: str = "attribute",
        source_key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> "DefinitionError":
        """Create a definition error for one attribute of a schema being built."""
        return cls(
            message=message,
            context=ErrorContext.create(
                schema_name=schema_name,
                error_type=cls.__name__,
                error_location=f"{schema_name}.{attribute_name}",
                component="builder",
                operation=operation,
            ),
            attribute_context=AttributeErrorContext(attribute_name=attribute_name, source_key=source_key),
            cause=cause,
        )


class AmbiguousAttributeDefinition(DefinitionError):
    """Both an explicit type and a transform were given for one attribute."""


class DuplicateAttribute(DefinitionError):
    """An attribute (or method) name was declared twice."""


class InvalidTypeSpecifier(DefinitionError):
    """The type given for an attribute is not a supported specifier."""


class InvalidAttributeName(DefinitionError):
    """The attribute name cannot be used as a record field."""


class SchemaAlreadyBuilt(DefinitionError):
    """A builder was modified or built again after producing its schema."""


class ParseError(BaseError):
    """Error raised while converting input into a record."""

    def __init__(
        self,
        message: str,
        context: ErrorContext,
        attribute_context: AttributeErrorContext,
        cause: Optional[Exception] = None,
    ):
        """Initialize parse error.

        Args:
            message: Error message
            context: Required error context
            attribute_context: Attribute being parsed
            cause: Optional cause exception
        """
        self.attribute_context = attribute_context
        super().__init__(message, context, cause)

    @property
    def attribute_name(self) -> str:
        return self.attribute_context.attribute_name

    @classmethod
    def for_attribute(
        cls,
        message: str,
        *,
        schema_name: str,
        attribute_name: str,
        operation: str = "parse",
        source_key: Optional[str] = None,
        value: Any = None,
        cause: Optional[Exception] = None,
        **kwargs: Any,
    ) -> "ParseError":
        """Create a parse error for one attribute of a schema.

        Extra keyword arguments are passed to the subclass constructor.
        """
        return cls(
            message=message,
            context=ErrorContext.create(
                schema_name=schema_name,
                error_type=cls.__name__,
                error_location=f"{schema_name}.{attribute_name}",
                component="parser",
                operation=operation,
            ),
            attribute_context=AttributeErrorContext(
                attribute_name=attribute_name,
                source_key=source_key,
                value_type=type(value).__name__ if value is not None else None,
            ),
            cause=cause,
            **kwargs,
        )


class MissingRequiredAttribute(ParseError):
    """A required attribute was absent from the input and had no default."""


class NullNotAllowed(ParseError):
    """A non-nullable attribute resolved to ``None``."""


class CoercionFailure(ParseError, ValueError):
    """A raw value could not be converted to the attribute's type."""


class ValueTypeMismatch(ParseError, TypeError):
    """A raw value has the wrong shape for the requested coercion."""


class ArrayExpected(ValueTypeMismatch):
    """An array attribute received a value that is not a sequence."""


class MappingExpected(ValueTypeMismatch):
    """A record was requested from a value that is not a mapping."""


class UnresolvedReference(ParseError, LookupError):
    """A named schema reference could not be resolved."""

    def __init__(
        self,
        message: str,
        context: ErrorContext,
        attribute_context: AttributeErrorContext,
        reference_context: ReferenceErrorContext,
        cause: Optional[Exception] = None,
    ):
        self.reference_context = reference_context
        super().__init__(message, context, attribute_context, cause)

    @property
    def reference_name(self) -> str:
        return self.reference_context.reference_name


class RegistryError(BaseError):
    """Error raised by the schema registry."""

    def __init__(
        self,
        message: str,
        context: ErrorContext,
        registry_context: RegistryErrorContext,
        cause: Optional[Exception] = None,
    ):
        self.registry_context = registry_context
        super().__init__(message, context, cause)


class DuplicateSchema(RegistryError):
    """A qualified schema name is already registered and redefinition is disabled."""
