"""Coercion resolver.

Compiles type descriptors into ``raw value -> coerced value`` functions.
``None`` is never passed to a compiled function; the parser handles it.

Named references are resolved on first use through the declaring schema's
``ResolutionCache``. Candidates for a reference ``R`` declared in namespace
``a.b`` are tried innermost first::

    a.b.R -> a.R -> R

Each candidate is looked up in the schema registry and then, when the
``import_fallback`` setting is enabled, as an importable ``module.attr`` path.
A module that exists but fails to import ends the lookup with an
``UnresolvedReference`` caused by the import error.
"""

import datetime as dt
import logging
import uuid
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from recordlib.core.errors import (
    ArrayExpected,
    BaseError,
    CoercionFailure,
    MappingExpected,
    ReferenceErrorContext,
    UnresolvedReference,
)
from recordlib.core.loader import DynamicLoader
from recordlib.core.settings import get_settings
from recordlib.schema.record import Record
from recordlib.schema.types import (
    ArrayOf,
    BooleanType,
    CustomFunction,
    NamedReference,
    NestedSchema,
    Primitive,
    SelfReference,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

Coercer = Callable[[Any], Any]

BOOLEAN_TRUTHY = (True, 1, "1", "t", "T", "true", "TRUE", "on", "ON")


def coerce_boolean(value: Any) -> bool:
    """Return True only for members of the truthy allow-list."""
    return value in BOOLEAN_TRUTHY


def _to_str(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _to_date(value: Any) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        return dt.date.fromisoformat(value)
    raise TypeError(f"cannot convert {type(value).__name__} into date")


def _to_datetime(value: Any) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    if isinstance(value, str):
        return dt.datetime.fromisoformat(value)
    raise TypeError(f"cannot convert {type(value).__name__} into datetime")


def _to_time(value: Any) -> dt.time:
    if isinstance(value, dt.datetime):
        return value.time()
    if isinstance(value, dt.time):
        return value
    if isinstance(value, str):
        return dt.time.fromisoformat(value)
    raise TypeError(f"cannot convert {type(value).__name__} into time")


def _to_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(_to_str(value))


def _to_list(value: Any) -> list:
    if isinstance(value, (str, bytes, bytearray)):
        return [value]
    if isinstance(value, Mapping):
        return list(value.items())
    try:
        return list(value)
    except TypeError:
        return [value]


PRIMITIVE_CONVERTERS: Dict[type, Coercer] = {
    str: _to_str,
    int: int,
    float: float,
    Decimal: _to_decimal,
    dt.date: _to_date,
    dt.datetime: _to_datetime,
    dt.time: _to_time,
    uuid.UUID: _to_uuid,
    Path: Path,
    dict: dict,
    list: _to_list,
}


def reference_candidates(name: str, namespace: Optional[str]) -> List[str]:
    """List qualified names to try for a reference, innermost namespace first."""
    segments = namespace.split(".") if namespace else []
    candidates = []
    for depth in range(len(segments), 0, -1):
        candidates.append(".".join(segments[:depth] + [name]))
    candidates.append(name)
    return candidates


def as_parse_target(obj: Any) -> Optional[Any]:
    """Return the parse target an object stands for, or None if it has none."""
    from recordlib.schema.definition import SchemaDefinition

    if isinstance(obj, SchemaDefinition):
        return obj
    if isinstance(obj, type) and issubclass(obj, Record):
        return obj.__schema__
    if callable(getattr(obj, "parse", None)):
        return obj
    return None


class CoercionResolver:
    """Compiles descriptors for the attributes of one schema."""

    def __init__(self, schema: Any):
        """Initialize resolver.

        Args:
            schema: Declaring schema, used for self references, contextual
                transforms, the namespace of named references and their cache
        """
        self._schema = schema

    def compile(self, descriptor: Optional[TypeDescriptor], attribute_name: str) -> Optional[Coercer]:
        """Compile a descriptor into a coercion function.

        Args:
            descriptor: Type descriptor, or None for no coercion
            attribute_name: Attribute the function coerces, for error reporting

        Returns:
            Coercion function, or None when values pass through unchanged
        """
        if descriptor is None:
            return None
        if isinstance(descriptor, BooleanType):
            return coerce_boolean
        if isinstance(descriptor, Primitive):
            return self._primitive(descriptor.target, attribute_name)
        if isinstance(descriptor, SelfReference):
            return self._nested(lambda: self._schema, attribute_name)
        if isinstance(descriptor, NestedSchema):
            target = descriptor.target
            return self._nested(lambda: target, attribute_name)
        if isinstance(descriptor, NamedReference):
            name = descriptor.name
            return self._nested(lambda: self.resolve(name, attribute_name), attribute_name)
        if isinstance(descriptor, ArrayOf):
            return self._array(self.compile(descriptor.element, attribute_name), attribute_name)
        if isinstance(descriptor, CustomFunction):
            return self._function(descriptor)
        raise TypeError(f"Unknown type descriptor: {descriptor!r}")

    def _error(self, error_cls: type, message: str, attribute_name: str, value: Any, **kwargs: Any) -> BaseError:
        return error_cls.for_attribute(
            message,
            schema_name=self._schema.display_name,
            attribute_name=attribute_name,
            operation="coerce",
            value=value,
            **kwargs,
        )

    def _primitive(self, target: type, attribute_name: str) -> Coercer:
        convert = PRIMITIVE_CONVERTERS[target]

        def coerce(value: Any) -> Any:
            try:
                return convert(value)
            except (ValueError, TypeError, ArithmeticError) as e:
                raise self._error(
                    CoercionFailure,
                    f"cannot coerce {value!r} to {target.__name__} for attribute '{attribute_name}'",
                    attribute_name,
                    value,
                    cause=e,
                ) from e

        return coerce

    def _array(self, element: Optional[Coercer], attribute_name: str) -> Coercer:
        def coerce(value: Any) -> list:
            if isinstance(value, Mapping):
                value = value.items()
            elif isinstance(value, (str, bytes, bytearray)) or not hasattr(value, "__iter__"):
                raise self._error(
                    ArrayExpected,
                    f"cannot convert {type(value).__name__} into array for attribute '{attribute_name}'",
                    attribute_name,
                    value,
                )
            if element is None:
                return list(value)
            return [element(item) for item in value]

        return coerce

    def _nested(self, target: Callable[[], Any], attribute_name: str) -> Coercer:
        from recordlib.schema.definition import SchemaDefinition

        def coerce(value: Any) -> Any:
            resolved = target()
            if isinstance(resolved, SchemaDefinition) and not (
                isinstance(value, Mapping) or resolved.is_instance(value)
            ):
                raise self._error(
                    MappingExpected,
                    f"cannot convert {type(value).__name__} into {resolved.display_name} for attribute '{attribute_name}'",
                    attribute_name,
                    value,
                )
            return resolved.parse(value)

        return coerce

    def _function(self, descriptor: CustomFunction) -> Coercer:
        function = descriptor.function
        if descriptor.contextual:
            schema = self._schema
            return lambda value: function(value, schema)
        return function

    def resolve(self, name: str, attribute_name: str) -> Any:
        """Resolve a named reference through the schema's cache.

        Raises:
            UnresolvedReference: If no candidate names a parse target
        """
        return self._schema.cache.get_or_resolve(name, lambda: self._lookup(name, attribute_name))

    def _lookup(self, name: str, attribute_name: str) -> Any:
        registry = self._schema.registry
        import_fallback = get_settings().import_fallback
        candidates = reference_candidates(name, self._schema.namespace)
        reference_context = ReferenceErrorContext(
            reference_name=name,
            namespace=self._schema.namespace or "",
            candidates=candidates,
        )

        for candidate in candidates:
            obj = registry.lookup(candidate)
            source = "registry"
            if obj is None and import_fallback and "." in candidate:
                try:
                    obj = DynamicLoader.try_load_object(candidate)
                except ImportError as e:
                    raise self._error(
                        UnresolvedReference,
                        f"unable to resolve reference '{name}' for attribute '{attribute_name}': "
                        f"importing '{candidate}' failed: {e}",
                        attribute_name,
                        None,
                        reference_context=reference_context,
                        cause=e,
                    ) from e
                source = "import"
            if obj is None:
                logger.debug(f"Reference '{name}': no match for candidate '{candidate}'")
                continue

            target = as_parse_target(obj)
            if target is None:
                logger.debug(f"Reference '{name}': skipping non-parseable {type(obj).__name__} at '{candidate}'")
                continue

            logger.debug(f"Resolved reference '{name}' to '{candidate}' via {source}")
            return target

        raise self._error(
            UnresolvedReference,
            f"unable to resolve reference '{name}' for attribute '{attribute_name}' (tried: {', '.join(candidates)})",
            attribute_name,
            None,
            reference_context=reference_context,
        )
