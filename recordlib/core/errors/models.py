"""Strict Pydantic models for error handling.

Every structured context attached to a recordlib error is one of these
frozen models, so error payloads serialize cleanly through ``to_dict``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from recordlib.core.models import StrictBaseModel


class ErrorContextData(StrictBaseModel):
    """Context shared by every framework error."""

    schema_name: str = Field(..., description="Name of the schema involved")
    error_type: str = Field(..., description="Type of error")
    error_location: str = Field(..., description="Location in code where error occurred")
    timestamp: datetime = Field(default_factory=datetime.now, description="When error occurred")

    component: str = Field(..., description="Component that raised the error")
    operation: str = Field(..., description="Operation being performed")


class ValidationErrorDetail(StrictBaseModel):
    """Single validation failure reported by pydantic."""

    location: str = Field(..., description="Field or location of validation error")
    message: str = Field(..., description="Validation error message")
    error_type: str = Field(..., description="Type of validation error")


class AttributeErrorContext(StrictBaseModel):
    """Attribute-level context for definition and parse errors."""

    attribute_name: str = Field(..., description="Attribute being defined or parsed")
    source_key: Optional[str] = Field(default=None, description="Input key the attribute reads from")
    value_type: Optional[str] = Field(default=None, description="Type name of the offending value")


class ReferenceErrorContext(StrictBaseModel):
    """Context for a named reference that could not be resolved."""

    reference_name: str = Field(..., description="Literal name of the reference")
    namespace: str = Field(..., description="Namespace the reference was declared in")
    candidates: List[str] = Field(default_factory=list, description="Qualified names that were tried")


class RegistryErrorContext(StrictBaseModel):
    """Context for schema registry conflicts."""

    qualified_name: str = Field(..., description="Qualified schema name")
    operation: str = Field(..., description="Registry operation attempted")
