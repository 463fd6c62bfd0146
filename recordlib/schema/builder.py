"""Schema builder and the ``structure`` decorator.

Example::

    @structure
    def Person(s):
        s.attribute("name", str, nullable=False)
        s.attribute("age", int, source_key="Age")
        s.optional_attribute("email", str)
        s.attribute("active", bool, default=True)
        s.attribute("manager", SELF)

    person = Person.parse({"name": "Ada", "Age": "36"})
"""

import keyword
import logging
from typing import Any, Callable, Dict, List, Optional

from recordlib.core.errors import (
    AmbiguousAttributeDefinition,
    DuplicateAttribute,
    InvalidAttributeName,
    InvalidTypeSpecifier,
    SchemaAlreadyBuilt,
)
from recordlib.core.registry import SchemaRegistry
from recordlib.schema.attributes import AttributeSpec
from recordlib.schema.definition import SchemaDefinition
from recordlib.schema.record import RESERVED_NAMES
from recordlib.schema.types import CustomFunction, TypeDescriptor, to_descriptor

logger = logging.getLogger(__name__)


def _member_name(member: Any) -> Optional[str]:
    if isinstance(member, property):
        member = member.fget
    elif isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    return getattr(member, "__name__", None)


class SchemaBuilder:
    """Accumulates attribute declarations and produces a SchemaDefinition.

    A builder builds once; any later call raises SchemaAlreadyBuilt.

    A named schema registers under its qualified name when built. Without an
    explicit registry that is the process-wide ``schema_registry``, which
    keeps the entry until it is removed: schemas built repeatedly at runtime
    should use their own ``SchemaRegistry`` or stay anonymous.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        namespace: Optional[str] = None,
        registry: Optional[SchemaRegistry] = None,
    ):
        """Initialize builder.

        Args:
            name: Schema name; a dotted name also supplies the namespace
            namespace: Namespace for relative reference lookups
            registry: Registry the schema registers in and resolves against
        """
        if name and "." in name:
            prefix, name = name.rsplit(".", 1)
            namespace = f"{namespace}.{prefix}" if namespace else prefix
        self._name = name
        self._namespace = namespace
        self._registry = registry
        self._attributes: List[AttributeSpec] = []
        self._methods: Dict[str, Any] = {}
        self._hook: Optional[Callable[[Any], Any]] = None
        self._built = False

    @property
    def display_name(self) -> str:
        if not self._name:
            return "<anonymous>"
        return f"{self._namespace}.{self._name}" if self._namespace else self._name

    @property
    def attribute_names(self) -> List[str]:
        return [spec.name for spec in self._attributes]

    def _ensure_open(self, member: str) -> None:
        if self._built:
            raise SchemaAlreadyBuilt.for_attribute(
                f"schema {self.display_name} is already built; cannot declare '{member}'",
                schema_name=self.display_name,
                attribute_name=member,
            )

    def _ensure_available(self, name: Any, operation: str) -> None:
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name) or name.startswith("_"):
            raise InvalidAttributeName.for_attribute(
                f"invalid attribute name: {name!r}",
                schema_name=self.display_name,
                attribute_name=str(name),
                operation=operation,
            )
        if name in RESERVED_NAMES:
            raise InvalidAttributeName.for_attribute(
                f"attribute name '{name}' is reserved by the record base class",
                schema_name=self.display_name,
                attribute_name=name,
                operation=operation,
            )
        if name in self.attribute_names or name in self._methods:
            raise DuplicateAttribute.for_attribute(
                f"attribute '{name}' is already defined",
                schema_name=self.display_name,
                attribute_name=name,
                operation=operation,
            )

    def attribute(
        self,
        name: str,
        type: Any = None,
        *,
        source_key: Optional[str] = None,
        default: Any = None,
        nullable: bool = True,
        transform: Optional[Callable[..., Any]] = None,
        optional: bool = False,
    ) -> "SchemaBuilder":
        """Declare an attribute.

        Args:
            name: Record field name
            type: Type specifier, see ``recordlib.schema.types``
            source_key: Input key to read, defaults to ``name``
            default: Value used when the key is absent; None means no default
            nullable: Whether the value may resolve to None
            transform: Conversion function, mutually exclusive with ``type``
            optional: Whether the key may be absent without a default

        Returns:
            The builder, for chaining

        Raises:
            AmbiguousAttributeDefinition: If both type and transform are given
            DuplicateAttribute: If the name is already declared
            InvalidAttributeName: If the name cannot be a record field
            InvalidTypeSpecifier: If the type is not supported
        """
        self._ensure_open(str(name))
        self._ensure_available(name, "attribute")

        if type is not None and transform is not None:
            raise AmbiguousAttributeDefinition.for_attribute(
                f"attribute '{name}' declares both a type and a transform",
                schema_name=self.display_name,
                attribute_name=name,
            )

        if transform is not None:
            descriptor = self._transform_descriptor(name, transform)
        else:
            descriptor = to_descriptor(type, name, self.display_name)

        self._attributes.append(
            AttributeSpec(
                name=name,
                source_key=source_key if source_key is not None else name,
                type=descriptor,
                default=default,
                optional=optional,
                nullable=nullable,
            )
        )
        return self

    def optional_attribute(self, name: str, type: Any = None, **options: Any) -> "SchemaBuilder":
        """Declare an attribute that may be absent from input."""
        return self.attribute(name, type, optional=True, **options)

    def _transform_descriptor(self, name: str, transform: Any) -> TypeDescriptor:
        if isinstance(transform, CustomFunction):
            return transform
        if isinstance(transform, TypeDescriptor) or not callable(transform):
            raise InvalidTypeSpecifier.for_attribute(
                f"transform of attribute '{name}' must be a function, got {transform!r}",
                schema_name=self.display_name,
                attribute_name=name,
            )
        return CustomFunction(function=transform)

    def after_parse(self, hook: Callable[[Any], Any]) -> Callable[[Any], Any]:
        """Set the hook called with every parsed record.

        The last hook set wins. Usable as a decorator.
        """
        self._ensure_open("after_parse")
        if not callable(hook):
            raise TypeError(f"after_parse hook must be callable, got {type(hook).__name__}")
        if self._hook is not None:
            logger.debug(f"Replacing after_parse hook of {self.display_name}")
        self._hook = hook
        return hook

    def method(self, member: Any = None, *, name: Optional[str] = None) -> Any:
        """Attach a method, property, classmethod or staticmethod to the record type.

        Usable as ``@s.method`` or ``@s.method(name="...")``.
        """
        if member is None:
            return lambda m: self.method(m, name=name)

        member_name = name or _member_name(member)
        if member_name is None:
            raise TypeError(f"cannot determine method name of {member!r}")
        self._ensure_open(member_name)
        self._ensure_available(member_name, "method")
        self._methods[member_name] = member
        return member

    def include(self, schema: SchemaDefinition) -> "SchemaBuilder":
        """Copy the attributes of an existing schema, in order."""
        for spec in schema.attributes:
            self._ensure_open(spec.name)
            self._ensure_available(spec.name, "include")
            self._attributes.append(spec)
        return self

    def build(self) -> SchemaDefinition:
        """Compile the declared attributes into a SchemaDefinition.

        Raises:
            SchemaAlreadyBuilt: If this builder already built its schema
        """
        self._ensure_open("build")
        self._built = True
        return SchemaDefinition(
            self._name,
            self._namespace,
            self._attributes,
            hook=self._hook,
            methods=self._methods,
            registry=self._registry,
        )


def structure(
    name: Any = None,
    *,
    namespace: Optional[str] = None,
    registry: Optional[SchemaRegistry] = None,
) -> Any:
    """Build a schema from a declaration function.

    The function receives a ``SchemaBuilder``; the decorated name is bound to
    the built ``SchemaDefinition``. Without an explicit name the function's
    name is used, in the function's module namespace. The schema registers in
    ``registry``, or the process-wide ``schema_registry`` when none is given.
    """
    if callable(name):
        return structure()(name)

    def decorator(declare: Callable[[SchemaBuilder], Any]) -> SchemaDefinition:
        schema_name = name or declare.__name__
        schema_namespace = namespace
        if schema_namespace is None and "." not in schema_name:
            schema_namespace = declare.__module__
        builder = SchemaBuilder(schema_name, namespace=schema_namespace, registry=registry)
        declare(builder)
        return builder.build()

    return decorator
