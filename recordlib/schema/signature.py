"""Signature metadata for external type-signature emitters."""

from typing import List, Optional

from pydantic import Field

from recordlib.core.models import StrictBaseModel
from recordlib.schema.types import TypeDescriptor


class AttributeSignature(StrictBaseModel):
    """Typing facts about one attribute."""

    name: str = Field(..., description="Record field name")
    source_key: str = Field(..., description="Input key")
    type: str = Field(..., description="Rendered type expression")
    descriptor: Optional[TypeDescriptor] = Field(default=None, description="Type descriptor, if any")
    required: bool = Field(..., description="Input must supply the attribute")
    optional: bool = Field(..., description="Declared with optional_attribute")
    nullable: bool = Field(..., description="May hold None")
    has_default: bool = Field(..., description="Has a default value")


class SchemaSignature(StrictBaseModel):
    """Typing facts about a schema and its record type."""

    name: Optional[str] = Field(default=None, description="Schema name")
    namespace: Optional[str] = Field(default=None, description="Declaring namespace")
    attributes: List[AttributeSignature] = Field(default_factory=list)
    predicates: List[str] = Field(default_factory=list, description="Boolean predicate method names")

    @property
    def attribute_names(self) -> List[str]:
        return [a.name for a in self.attributes]

    @property
    def required_names(self) -> List[str]:
        return [a.name for a in self.attributes if a.required]
