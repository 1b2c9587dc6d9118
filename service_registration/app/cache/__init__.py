"""
Cache package for Registration Service.

Provides ``CachedUserStore``, an in-process proxy that serves user listings
from a whole-store snapshot and reloads it whenever its size heuristic
disagrees with the number of users it believes the store holds.
"""

from .proxy import CachedUserStore, CacheStats, UNLOADED

__all__ = ["CachedUserStore", "CacheStats", "UNLOADED"]
