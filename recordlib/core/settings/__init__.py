"""Runtime configuration for recordlib."""

from .settings import (
    RecordlibSettings,
    configure_logging,
    get_settings,
    load_settings,
    reload_settings,
    set_settings,
)

__all__ = [
    "RecordlibSettings",
    "configure_logging",
    "get_settings",
    "load_settings",
    "reload_settings",
    "set_settings",
]
