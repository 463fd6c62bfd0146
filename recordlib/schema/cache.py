"""Memo table for lazily resolved named references."""

import logging
import threading
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

_MISSING = object()


class ResolutionCache:
    """Thread-safe memo of reference name to resolved target.

    Reads take no lock. A miss takes the lock, re-checks and resolves, so each
    name is stored at most once. Resolution failures propagate and leave the
    entry empty.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def get_or_resolve(self, key: str, resolve: Callable[[], Any]) -> Any:
        """Return the cached target for ``key``, resolving it on first use.

        Args:
            key: Literal reference name
            resolve: Zero-argument resolver, called under the cache lock

        Returns:
            Resolved target
        """
        target = self._entries.get(key, _MISSING)
        if target is not _MISSING:
            return target

        with self._lock:
            target = self._entries.get(key, _MISSING)
            if target is _MISSING:
                target = resolve()
                self._entries[key] = target
                logger.debug(f"Cached resolution of '{key}'")
        return target

    def get(self, key: str) -> Any:
        """Return the cached target or None."""
        return self._entries.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
