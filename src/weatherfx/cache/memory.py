"""
In-memory cache tier.

Lives for the lifetime of one dashboard session and is never persisted.
"""

from typing import Any, Optional


class MemoryCache:
    """Process-lifetime key/value cache without expiry."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        count = len(self._data)
        self._data.clear()
        return count

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
