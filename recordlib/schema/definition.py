"""Schema definitions.

A ``SchemaDefinition`` is the compiled, immutable product of a
``SchemaBuilder``: the ordered attribute list, derived boolean predicates,
the optional post-parse hook, attached methods and the generated record
type. It exposes the parse, construction and serialization operations.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from recordlib.core.errors import ValueTypeMismatch
from recordlib.core.registry import SchemaRegistry, schema_registry
from recordlib.core.validation import construct_record
from recordlib.schema.attributes import AttributeSpec
from recordlib.schema.cache import ResolutionCache
from recordlib.schema.parser import Parser
from recordlib.schema.record import RESERVED_NAMES, build_record_type, to_plain
from recordlib.schema.signature import AttributeSignature, SchemaSignature
from recordlib.schema.types import BooleanType

logger = logging.getLogger(__name__)


def derive_predicates(attributes: Iterable[AttributeSpec], taken: Iterable[str] = ()) -> Dict[str, str]:
    """Map predicate method names to the boolean attributes they test.

    Attributes already named ``is_*`` get no predicate, and a predicate name
    that is taken by an attribute, a method or the record base is skipped.
    """
    attributes = list(attributes)
    unavailable = {spec.name for spec in attributes} | set(taken) | RESERVED_NAMES
    predicates = {}
    for spec in attributes:
        if not isinstance(spec.type, BooleanType) or spec.name.startswith("is_"):
            continue
        predicate_name = f"is_{spec.name}"
        if predicate_name in unavailable:
            continue
        predicates[predicate_name] = spec.name
    return predicates


class SchemaDefinition:
    """Compiled schema and the record type it produces."""

    def __init__(
        self,
        name: Optional[str],
        namespace: Optional[str],
        attributes: Iterable[AttributeSpec],
        *,
        hook: Optional[Callable[[Any], Any]] = None,
        methods: Optional[Mapping[str, Any]] = None,
        registry: Optional[SchemaRegistry] = None,
    ):
        """Compile a schema.

        Named schemas register themselves in the registry under their
        qualified name.

        Args:
            name: Schema and record class name, None for an anonymous schema
            namespace: Dotted namespace used for relative reference lookups
            attributes: Attributes in declaration order
            hook: Called with every parsed record
            methods: Extra attributes of the record class
            registry: Registry for registration and reference lookups
        """
        self._name = name
        self._namespace = namespace
        self._attributes: Tuple[AttributeSpec, ...] = tuple(attributes)
        self._hook = hook
        self._methods: Dict[str, Any] = dict(methods or {})
        self._registry = registry if registry is not None else schema_registry
        self._cache = ResolutionCache()
        self._predicates = derive_predicates(self._attributes, self._methods)
        self._record_type = build_record_type(self)
        self._parser = Parser(self)

        if name:
            self._registry.register(self.qualified_name, self, namespace=namespace)
        logger.debug(f"Built schema {self.display_name} with {len(self._attributes)} attributes")

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def namespace(self) -> Optional[str]:
        return self._namespace

    @property
    def qualified_name(self) -> Optional[str]:
        if not self._name:
            return None
        return f"{self._namespace}.{self._name}" if self._namespace else self._name

    @property
    def display_name(self) -> str:
        return self.qualified_name or "<anonymous>"

    @property
    def attributes(self) -> Tuple[AttributeSpec, ...]:
        return self._attributes

    @property
    def attribute_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self._attributes)

    @property
    def predicates(self) -> Mapping[str, str]:
        """Predicate method name to boolean attribute name."""
        return MappingProxyType(self._predicates)

    @property
    def hook(self) -> Optional[Callable[[Any], Any]]:
        return self._hook

    @property
    def methods(self) -> Mapping[str, Any]:
        return MappingProxyType(self._methods)

    @property
    def record_type(self) -> type:
        return self._record_type

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    def attribute(self, name: str) -> AttributeSpec:
        """Return the attribute declared as ``name``.

        Raises:
            KeyError: If no such attribute exists
        """
        for spec in self._attributes:
            if spec.name == name:
                return spec
        raise KeyError(f"Schema {self.display_name} has no attribute '{name}'")

    def is_instance(self, value: Any) -> bool:
        """Whether value is a record of this schema."""
        return isinstance(value, self._record_type)

    def parse(self, data: Any = None, /, **overrides: Any) -> Any:
        """Convert raw input into a record.

        A record of this schema is returned unchanged unless overrides are
        given. See ``recordlib.schema.parser`` for the pipeline.
        """
        return self._parser.parse(data, overrides)

    def __call__(self, data: Any = None, /, **overrides: Any) -> Any:
        return self.parse(data, **overrides)

    def new(self, **fields: Any) -> Any:
        """Construct a record directly from field values, without coercion.

        Raises:
            RecordConstructionError: If a required field is missing or a field is unknown
        """
        return construct_record(self._record_type, fields, self.display_name, operation="new")

    def load(self, data: Optional[Mapping[str, Any]]) -> Any:
        """Parse a mapping, passing None through."""
        if data is None:
            return None
        return self.parse(data)

    def dump(self, record: Any) -> Optional[Dict[str, Any]]:
        """Convert a record to plain data, passing None through.

        Raises:
            ValueTypeMismatch: If the value is not a record of this schema
        """
        if record is None:
            return None
        if not self.is_instance(record):
            raise ValueTypeMismatch.for_attribute(
                f"cannot dump {type(record).__name__} as {self.display_name}",
                schema_name=self.display_name,
                attribute_name="<input>",
                operation="dump",
                value=record,
            )
        return to_plain(record)

    def to_plain(self, record: Any) -> Any:
        """Recursively unwrap records into plain dictionaries and lists."""
        return to_plain(record)

    def signature(self) -> SchemaSignature:
        """Describe attribute names, types and requiredness."""
        return SchemaSignature(
            name=self._name,
            namespace=self._namespace,
            attributes=[
                AttributeSignature(
                    name=spec.name,
                    source_key=spec.source_key,
                    type=spec.type.describe(self._name) if spec.type is not None else "Any",
                    descriptor=spec.type,
                    required=spec.required,
                    optional=spec.optional,
                    nullable=spec.nullable,
                    has_default=spec.has_default,
                )
                for spec in self._attributes
            ],
            predicates=list(self._predicates),
        )

    def extend(self, name: Optional[str] = None, *, namespace: Optional[str] = None, registry: Optional[SchemaRegistry] = None):
        """Start a builder pre-populated with this schema.

        The builder copies the attributes, hook and methods; the new schema is
        independent of this one once built.
        """
        from recordlib.schema.builder import SchemaBuilder

        builder = SchemaBuilder(
            name,
            namespace=namespace if namespace is not None else self._namespace,
            registry=registry if registry is not None else self._registry,
        )
        builder.include(self)
        for method_name, member in self._methods.items():
            builder.method(member, name=method_name)
        if self._hook is not None:
            builder.after_parse(self._hook)
        return builder

    def __repr__(self) -> str:
        return f"SchemaDefinition({self.display_name}, attributes={list(self.attribute_names)})"
