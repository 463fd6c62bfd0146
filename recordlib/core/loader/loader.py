"""Dynamic loading of objects from import paths.

Named schema references fall back to importable paths when the schema
registry has no entry for them. Paths use either ``package.module:attr`` or
``package.module.attr`` notation.
"""

import importlib
import logging
from typing import Any, List, Optional

from pydantic import Field

from recordlib.core.models import StrictBaseModel

logger = logging.getLogger(__name__)


def _names_module_path(error: ImportError, module_name: str) -> bool:
    """Whether an import error is about module_name or one of its parent packages."""
    missing = error.name
    return missing is not None and (module_name == missing or module_name.startswith(f"{missing}."))


class ModuleAttributeInfo(StrictBaseModel):
    """Module attribute information model."""

    module_name: str = Field(description="Module name to import")
    attribute_path: List[str] = Field(description="Attribute chain to read from the module")


class DynamicLoader:
    """Loader resolving dotted import paths to Python objects."""

    @classmethod
    def _parse_path(cls, import_path: str) -> List[ModuleAttributeInfo]:
        """Return every module/attribute split to try, longest module first.

        Args:
            import_path: Path in format 'module.path:attr' or 'module.path.attr'

        Raises:
            ValueError: If the path cannot name a module attribute
        """
        if ":" in import_path:
            module_name, attribute = import_path.split(":", 1)
            if not module_name or not attribute:
                raise ValueError(f"Invalid import path format: {import_path}. Expected 'module:attr'")
            return [ModuleAttributeInfo(module_name=module_name, attribute_path=attribute.split("."))]

        segments = import_path.split(".")
        if len(segments) < 2 or not all(segments):
            raise ValueError(f"Invalid import path format: {import_path}. Expected 'module.attr'")

        return [
            ModuleAttributeInfo(module_name=".".join(segments[:i]), attribute_path=segments[i:])
            for i in range(len(segments) - 1, 0, -1)
        ]

    @classmethod
    def load_object(cls, import_path: str) -> Any:
        """Load an object from an import path.

        Args:
            import_path: Path in format 'module.path:attr' or 'module.path.attr'

        Returns:
            Loaded object

        Raises:
            ImportError: If no module/attribute split of the path can be loaded,
                or an existing module fails while importing
        """
        try:
            candidates = cls._parse_path(import_path)
        except ValueError as e:
            raise ImportError(f"Cannot load object from {import_path}", name=import_path) from e

        last_error: Optional[Exception] = None
        for info in candidates:
            try:
                module = importlib.import_module(info.module_name)
            except ImportError as e:
                if not _names_module_path(e, info.module_name):
                    raise
                last_error = e
                continue

            obj: Any = module
            try:
                for attribute in info.attribute_path:
                    obj = getattr(obj, attribute)
            except AttributeError as e:
                last_error = e
                continue

            logger.debug(f"Loaded {import_path} from module {info.module_name}")
            return obj

        raise ImportError(f"Cannot load object from {import_path}", name=import_path) from last_error

    @classmethod
    def try_load_object(cls, import_path: str) -> Optional[Any]:
        """Load an object, returning None when the path names nothing importable.

        Errors raised while importing an existing module propagate.
        """
        try:
            return cls.load_object(import_path)
        except ImportError as e:
            if e.name != import_path:
                raise
            logger.debug(f"Import lookup failed for {import_path}: {e}")
            return None
