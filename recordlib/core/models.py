"""Strict Pydantic base models shared across recordlib.

This module provides the base classes for every metadata model in the
package: attribute specifications, type descriptors, error contexts and
signature metadata.
"""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model with strict validation.

    It enforces:
    - strict=True: Type coercion is disabled, inputs must match exact types
    - extra="forbid": No additional fields allowed
    - frozen=True: Immutable once created

    These settings keep library metadata fail-fast.
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
        frozen=True,
        validate_default=True,
        use_enum_values=False,
        arbitrary_types_allowed=False,
    )


class FrozenArbitraryModel(BaseModel):
    """Frozen model that may hold arbitrary Python objects.

    Used for metadata that references callables, schemas or classes, which
    pydantic cannot validate structurally.
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        frozen=True,
        arbitrary_types_allowed=True,
    )


__all__ = [
    "StrictBaseModel",
    "FrozenArbitraryModel",
]
