"""Parsing pipeline.

For each attribute, in declaration order::

    lookup -> required check -> coerce -> null check -> assign

Lookup tries the overrides (by attribute name), then the input mapping (by
source key), then a copy of the default. A key that is present with a
``None`` value counts as present.

An existing record given with overrides keeps its field values; only the
override values go through coercion and the null check.
"""

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from recordlib.core.errors import MappingExpected, MissingRequiredAttribute, NullNotAllowed
from recordlib.core.validation import construct_record
from recordlib.schema.attributes import AttributeSpec
from recordlib.schema.coercion import Coercer, CoercionResolver

logger = logging.getLogger(__name__)

_ABSENT = object()


class Parser:
    """Executes the parsing pipeline for one schema."""

    def __init__(self, schema: Any):
        """Compile the coercion plan of every attribute.

        Args:
            schema: Schema whose attributes and record type are used
        """
        self._schema = schema
        resolver = CoercionResolver(schema)
        self._plan: List[Tuple[AttributeSpec, Optional[Coercer]]] = [
            (spec, resolver.compile(spec.type, spec.name)) for spec in schema.attributes
        ]

    def parse(self, data: Any, overrides: Mapping[str, Any]) -> Any:
        """Convert raw input into a record.

        Args:
            data: Mapping, None, or an existing record of the schema
            overrides: Values keyed by attribute name, taking precedence over data

        Returns:
            Record instance

        Raises:
            MappingExpected: If data is neither a mapping nor a record of the schema
            MissingRequiredAttribute: If a required attribute is absent
            NullNotAllowed: If a non-nullable attribute resolves to None
        """
        schema = self._schema

        if schema.is_instance(data):
            if not overrides:
                return data
            return self._update(data, overrides)
        if data is None:
            data = {}
        elif not isinstance(data, Mapping):
            raise MappingExpected.for_attribute(
                f"cannot parse {schema.display_name} from {type(data).__name__}: expected a mapping",
                schema_name=schema.display_name,
                attribute_name="<input>",
                value=data,
            )

        fields: Dict[str, Any] = {}
        for spec, coerce in self._plan:
            value = self._lookup(spec, data, overrides)

            if value is _ABSENT:
                if not spec.optional:
                    raise MissingRequiredAttribute.for_attribute(
                        f"missing required attribute: '{spec.name}'",
                        schema_name=schema.display_name,
                        attribute_name=spec.name,
                        source_key=spec.source_key,
                    )
                fields[spec.name] = None
                continue

            fields[spec.name] = self._resolve(spec, coerce, value)

        return self._construct(fields)

    def _update(self, record: Any, overrides: Mapping[str, Any]) -> Any:
        # Record values are already coerced; only overrides go through coercion.
        fields: Dict[str, Any] = {}
        for spec, coerce in self._plan:
            if spec.name in overrides:
                fields[spec.name] = self._resolve(spec, coerce, overrides[spec.name])
            else:
                fields[spec.name] = getattr(record, spec.name)
        return self._construct(fields)

    def _resolve(self, spec: AttributeSpec, coerce: Optional[Coercer], value: Any) -> Any:
        if value is not None and coerce is not None:
            value = coerce(value)

        if value is None and not spec.nullable:
            raise NullNotAllowed.for_attribute(
                f"attribute cannot be null: '{spec.name}'",
                schema_name=self._schema.display_name,
                attribute_name=spec.name,
                source_key=spec.source_key,
            )
        return value

    def _construct(self, fields: Dict[str, Any]) -> Any:
        schema = self._schema
        record = construct_record(schema.record_type, fields, schema.display_name, operation="parse")

        if schema.hook is not None:
            schema.hook(record)

        return record

    @staticmethod
    def _lookup(spec: AttributeSpec, data: Mapping[str, Any], overrides: Mapping[str, Any]) -> Any:
        if spec.name in overrides:
            return overrides[spec.name]
        if spec.source_key in data:
            return data[spec.source_key]
        if spec.has_default:
            return copy.deepcopy(spec.default)
        return _ABSENT
