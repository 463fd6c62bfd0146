"""Import-path loading."""

from .loader import DynamicLoader, ModuleAttributeInfo

__all__ = ["DynamicLoader", "ModuleAttributeInfo"]
