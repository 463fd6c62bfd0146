"""Registry interfaces and the named-schema registry.

This module defines the abstract base class for registries in recordlib and
the concrete ``SchemaRegistry`` that named schemas register themselves in.
Named references are resolved against a schema registry before any import
fallback is attempted.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from recordlib.core.errors import DuplicateSchema, ErrorContext, RegistryErrorContext
from recordlib.core.settings import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRegistry(ABC, Generic[T]):
    """Abstract base class for all registry types.

    This class defines the interface that registries implement, establishing
    a consistent pattern for registration, retrieval and management.
    """

    @abstractmethod
    def register(self, name: str, obj: T, **metadata: Any) -> None:
        """Register an object with the registry.

        Args:
            name: Unique name for the object
            obj: The object to register
            **metadata: Additional metadata about the object
        """
        pass

    @abstractmethod
    def get(self, name: str, expected_type: Optional[Type] = None) -> T:
        """Get an object by name with optional type checking.

        Args:
            name: Name of the object to retrieve
            expected_type: Optional type for type checking

        Returns:
            The registered object

        Raises:
            KeyError: If the object doesn't exist
            TypeError: If the object doesn't match the expected type
        """
        pass

    @abstractmethod
    def contains(self, name: str) -> bool:
        """Check if an object exists in the registry."""
        pass

    @abstractmethod
    def list(self, filter_criteria: Optional[Dict[str, Any]] = None) -> List[str]:
        """List registered names matching criteria.

        Args:
            filter_criteria: Optional criteria to filter results

        Returns:
            List of object names matching the criteria
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations from the registry."""
        pass

    @abstractmethod
    def remove(self, name: str) -> bool:
        """Remove a specific registration from the registry.

        Returns:
            True if the object was found and removed, False if not found
        """
        pass


class SchemaRegistry(BaseRegistry[Any]):
    """Thread-safe registry of schemas keyed by dotted qualified name.

    Registration happens when a named schema is built, which may be at import
    time of any module, so every mutation goes through a reentrant lock.
    """

    def __init__(self, allow_redefinition: Optional[bool] = None) -> None:
        """Initialize schema registry.

        Args:
            allow_redefinition: Replace existing names instead of raising.
                Defaults to the ``allow_schema_redefinition`` setting.
        """
        self._schemas: Dict[str, Any] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()
        self._allow_redefinition = allow_redefinition

    @property
    def allow_redefinition(self) -> bool:
        if self._allow_redefinition is None:
            return get_settings().allow_schema_redefinition
        return self._allow_redefinition

    def register(self, name: str, obj: Any, **metadata: Any) -> None:
        """Register a schema under its qualified name.

        Raises:
            DuplicateSchema: If the name is taken and redefinition is disabled
        """
        with self._lock:
            existing = self._schemas.get(name)
            if existing is not None and existing is not obj:
                if not self.allow_redefinition:
                    raise DuplicateSchema(
                        message=f"Schema '{name}' is already registered",
                        context=ErrorContext.create(
                            schema_name=name,
                            error_type="DuplicateSchema",
                            error_location="SchemaRegistry.register",
                            component="registry",
                            operation="register",
                        ),
                        registry_context=RegistryErrorContext(qualified_name=name, operation="register"),
                    )
                logger.debug(f"Replacing registered schema '{name}'")
            else:
                logger.debug(f"Registered schema '{name}'")
            self._schemas[name] = obj
            self._metadata[name] = dict(metadata)

    def get(self, name: str, expected_type: Optional[Type] = None) -> Any:
        with self._lock:
            if name not in self._schemas:
                raise KeyError(f"Schema '{name}' not found")
            obj = self._schemas[name]
        if expected_type is not None and not isinstance(obj, expected_type):
            raise TypeError(f"Schema '{name}' has type {type(obj).__name__}, expected {expected_type.__name__}")
        return obj

    def lookup(self, name: str) -> Optional[Any]:
        """Return the schema registered under ``name`` or None."""
        with self._lock:
            return self._schemas.get(name)

    def get_metadata(self, name: str) -> Dict[str, Any]:
        with self._lock:
            if name not in self._metadata:
                raise KeyError(f"Schema '{name}' not found")
            return dict(self._metadata[name])

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._schemas

    def list(self, filter_criteria: Optional[Dict[str, Any]] = None) -> List[str]:
        """List registered qualified names.

        Supported criteria:
            namespace: only names declared directly in this namespace
        """
        with self._lock:
            names = sorted(self._schemas)
        if filter_criteria and "namespace" in filter_criteria:
            namespace = filter_criteria["namespace"]
            prefix = f"{namespace}." if namespace else ""
            names = [n for n in names if n.startswith(prefix) and "." not in n[len(prefix):]]
        return names

    def clear(self) -> None:
        with self._lock:
            self._schemas.clear()
            self._metadata.clear()

    def remove(self, name: str) -> bool:
        with self._lock:
            if name not in self._schemas:
                return False
            del self._schemas[name]
            self._metadata.pop(name, None)
            logger.debug(f"Removed schema '{name}'")
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)


# Process-wide registry used when a builder is not given one
schema_registry = SchemaRegistry()
