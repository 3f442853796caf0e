"""
Result cache shared by every engine in one build.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)


class ResultCache:
    """
    Write-once mapping from resolved resource key to processed content.

    Entries live for the whole build and are only dropped wholesale by
    ``clear()``, which the host calls before an incremental rebuild.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def store(self, key: str, value: Any) -> Any:
        """
        Store ``value`` under ``key`` unless the key already has a value.

        Returns:
            The value held by the cache for ``key`` after the call
        """
        return self._entries.setdefault(key, value)

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f"Result cache cleared ({count} entries)")

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"ResultCache(entries={len(self._entries)})"
