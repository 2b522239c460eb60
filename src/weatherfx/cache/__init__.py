"""
Cache module for storing fetched weather and exchange rates.

Provides a SQLite-based durable cache and a session-scoped memory tier.
"""

from weatherfx.cache.durable import DurableCache
from weatherfx.cache.memory import MemoryCache

__all__ = ["DurableCache", "MemoryCache"]
