"""Core foundations: strict models, errors, settings, registry and loading."""

from .models import FrozenArbitraryModel, StrictBaseModel

__all__ = [
    "FrozenArbitraryModel",
    "StrictBaseModel",
]
