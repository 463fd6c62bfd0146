"""Attribute specifications."""

from typing import Any, Optional

from pydantic import Field

from recordlib.core.models import FrozenArbitraryModel
from recordlib.schema.types import TypeDescriptor


class AttributeSpec(FrozenArbitraryModel):
    """One declared field of a schema.

    ``type`` holds either the declared type or the transform, never both.
    A ``default`` of None means the attribute has no default.
    """

    name: str = Field(description="Record field name")
    source_key: str = Field(description="Input key the raw value is read from")
    type: Optional[TypeDescriptor] = Field(default=None, description="Coercion applied to non-null values")
    default: Any = Field(default=None, description="Value used when the source key is absent")
    optional: bool = Field(default=False, description="May be absent from input without error")
    nullable: bool = Field(default=True, description="May resolve to None")

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def required(self) -> bool:
        """Whether input must supply the attribute."""
        return not self.optional and not self.has_default
