"""Type descriptors.

A type descriptor tells the coercion resolver how to interpret the raw value
of one attribute. Authors rarely build descriptors by hand: ``to_descriptor``
normalizes the specifiers accepted by ``SchemaBuilder.attribute``::

    str, int, float, Decimal, date, datetime, time, UUID, Path, dict, list
    bool or BOOLEAN          -> BooleanType
    SELF                     -> SelfReference
    [spec]                   -> ArrayOf(spec)
    "Name" / "pkg.Name"      -> NamedReference
    schema or record class   -> NestedSchema
    class with parse()       -> CustomFunction(cls.parse)
    callable                 -> CustomFunction
    contextual(fn)           -> CustomFunction(fn, contextual=True)
"""

import datetime as dt
import uuid
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Tuple, Type

from pydantic import Field

from recordlib.core.errors import InvalidTypeSpecifier
from recordlib.core.models import FrozenArbitraryModel

PRIMITIVE_KINDS: Tuple[type, ...] = (
    str,
    int,
    float,
    Decimal,
    dt.date,
    dt.datetime,
    dt.time,
    uuid.UUID,
    Path,
    dict,
    list,
)


class TypeDescriptor(FrozenArbitraryModel):
    """Base class of the closed set of type descriptors."""

    kind: str

    def describe(self, owner: Optional[str] = None) -> str:
        """Render the descriptor as a type expression.

        Args:
            owner: Name of the schema declaring the attribute, used for self references
        """
        raise NotImplementedError


class Primitive(TypeDescriptor):
    """Conversion through the target type's own constructor or parser."""

    kind: Literal["primitive"] = "primitive"
    target: Type[Any]

    def describe(self, owner: Optional[str] = None) -> str:
        return self.target.__name__


class BooleanType(TypeDescriptor):
    """Truthy allow-list coercion to ``bool``."""

    kind: Literal["boolean"] = "boolean"

    def describe(self, owner: Optional[str] = None) -> str:
        return "bool"


class SelfReference(TypeDescriptor):
    """Nested value of the declaring schema itself."""

    kind: Literal["self"] = "self"

    def describe(self, owner: Optional[str] = None) -> str:
        return owner or "Self"


class ArrayOf(TypeDescriptor):
    kind: Literal["array"] = "array"
    element: TypeDescriptor

    def describe(self, owner: Optional[str] = None) -> str:
        return f"list[{self.element.describe(owner)}]"


class NamedReference(TypeDescriptor):
    """Schema referenced by name, resolved lazily on first use."""

    kind: Literal["reference"] = "reference"
    name: str = Field(min_length=1)

    def describe(self, owner: Optional[str] = None) -> str:
        return self.name


class NestedSchema(TypeDescriptor):
    kind: Literal["schema"] = "schema"
    target: Any

    def describe(self, owner: Optional[str] = None) -> str:
        return self.target.name or "Record"


class CustomFunction(TypeDescriptor):
    """Author-supplied conversion.

    Plain functions are called as ``function(value)``. Contextual functions
    are called as ``function(value, schema)`` so they can parse nested values
    with the declaring schema.
    """

    kind: Literal["function"] = "function"
    function: Callable[..., Any]
    contextual: bool = False

    def describe(self, owner: Optional[str] = None) -> str:
        return "Any"


SELF = SelfReference()
BOOLEAN = BooleanType()


def contextual(function: Callable[[Any, Any], Any]) -> CustomFunction:
    """Mark a transform as receiving the declaring schema as second argument."""
    if not callable(function):
        raise TypeError(f"contextual() expects a callable, got {type(function).__name__}")
    return CustomFunction(function=function, contextual=True)


def to_descriptor(spec: Any, attribute_name: str = "<type>", schema_name: str = "<anonymous>") -> Optional[TypeDescriptor]:
    """Normalize a type specifier into a descriptor.

    Args:
        spec: Type specifier given to ``attribute``
        attribute_name: Attribute being declared, for error reporting
        schema_name: Schema being built, for error reporting

    Returns:
        Descriptor, or None when no coercion was requested

    Raises:
        InvalidTypeSpecifier: If the specifier is not supported
    """
    from recordlib.schema.definition import SchemaDefinition
    from recordlib.schema.record import Record

    def invalid(reason: str) -> InvalidTypeSpecifier:
        return InvalidTypeSpecifier.for_attribute(
            f"cannot use {spec!r} as type of attribute '{attribute_name}': {reason}",
            schema_name=schema_name,
            attribute_name=attribute_name,
        )

    if spec is None or isinstance(spec, TypeDescriptor):
        return spec
    if spec is bool:
        return BOOLEAN
    if isinstance(spec, list):
        if len(spec) != 1:
            raise invalid("array types take exactly one element type")
        if spec[0] is None:
            raise invalid("array element type is missing")
        return ArrayOf(element=to_descriptor(spec[0], attribute_name, schema_name))
    if isinstance(spec, str):
        if not spec.strip():
            raise invalid("reference name is empty")
        return NamedReference(name=spec.strip())
    if isinstance(spec, SchemaDefinition):
        return NestedSchema(target=spec)
    if isinstance(spec, type):
        if spec in PRIMITIVE_KINDS:
            return Primitive(target=spec)
        if issubclass(spec, Record):
            if spec.__schema__ is None:
                raise invalid("record base class has no schema")
            return NestedSchema(target=spec.__schema__)
        if callable(getattr(spec, "parse", None)):
            return CustomFunction(function=spec.parse)
        raise invalid("class is neither a supported primitive nor parseable")
    if isinstance(spec, (dict, tuple, set, frozenset)):
        raise invalid("mapping and tuple shapes are not type specifiers")
    if callable(spec):
        return CustomFunction(function=spec)
    raise invalid("unsupported specifier")
