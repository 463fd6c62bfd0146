"""Shared pytest fixtures."""

import pytest

from recordlib.core.registry import SchemaRegistry
from recordlib.core.settings import settings as settings_module


@pytest.fixture
def registry():
    """Fresh schema registry, isolated from the process-wide one."""
    return SchemaRegistry()


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Start every test from settings read from a clean environment."""
    for var in ("RECORDLIB_LOG_LEVEL", "RECORDLIB_IMPORT_FALLBACK", "RECORDLIB_ALLOW_SCHEMA_REDEFINITION"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(settings_module, "_settings", None)
    yield
