"""Immutable record types produced by schemas.

Each schema compiles one pydantic model class at build time. Every field is
typed ``Any``: coercion already happened in the parser, so pydantic only
checks the field set. Records are frozen, compare field by field and hash
structurally.
"""

from typing import Any, Callable, ClassVar, Dict, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, create_model


class Record(BaseModel):
    """Base class of every produced record type."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        protected_namespaces=(),
    )

    __schema__: ClassVar[Any] = None

    @classmethod
    def parse(cls, data: Any = None, /, **overrides: Any) -> "Record":
        """Parse raw input with this record type's schema."""
        return cls.__schema__.parse(data, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Return the record as nested plain dictionaries and lists."""
        return to_plain(self)

    def replace(self, **changes: Any) -> "Record":
        """Return a copy with some fields replaced, without coercion."""
        fields = {name: getattr(self, name) for name in type(self).model_fields}
        fields.update(changes)
        return self.__schema__.new(**fields)

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).model_fields)

    def __hash__(self) -> int:
        return hash((type(self), tuple(_freeze(getattr(self, name)) for name in type(self).model_fields)))


RESERVED_NAMES = frozenset(dir(Record))


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, Mapping):
        return frozenset((k, _freeze(v)) for k, v in value.items())
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    return value


def to_plain(value: Any) -> Any:
    """Recursively unwrap records into plain dictionaries.

    Lists, tuples and dictionary values are walked; every other value is
    returned unchanged.
    """
    if isinstance(value, Record):
        return {name: to_plain(getattr(value, name)) for name in type(value).model_fields}
    if isinstance(value, list):
        return [to_plain(v) for v in value]
    if isinstance(value, tuple):
        return tuple(to_plain(v) for v in value)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    return value


def _predicate(attribute_name: str) -> Callable[[Record], bool]:
    def predicate(self: Record) -> bool:
        return bool(getattr(self, attribute_name))

    predicate.__doc__ = f"Whether '{attribute_name}' is truthy."
    return predicate


def build_record_type(schema: Any) -> type:
    """Compile the record class of a schema.

    Predicates and custom methods live on an intermediate base class so the
    pydantic model built from the attribute list stays a plain field set.
    """
    class_name = schema.name or "Record"
    module = schema.namespace or __name__

    namespace: Dict[str, Any] = {"__module__": module, "__schema__": schema}
    for predicate_name, attribute_name in schema.predicates.items():
        namespace[predicate_name] = _predicate(attribute_name)
    namespace.update(schema.methods)
    base = type(f"{class_name}Methods", (Record,), namespace)

    fields: Dict[str, Tuple[Any, Any]] = {}
    for spec in schema.attributes:
        if spec.required:
            fields[spec.name] = (Any, ...)
        else:
            fields[spec.name] = (Any, spec.default)

    record_type = create_model(class_name, __base__=base, __module__=module, **fields)
    record_type.__qualname__ = class_name
    return record_type
