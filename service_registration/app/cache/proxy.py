"""
Whole-snapshot caching proxy for user stores.

``CachedUserStore`` keeps a copy of every user it last loaded and a counter of
how many users it believes the wrapped store holds. A read is served from the
snapshot only while the snapshot size equals that counter; any mismatch forces
a full reload. Writes go straight through and only advance the counter, so the
next read after a local write reloads instead of patching the snapshot.

The counter starts at ``UNLOADED`` (-1), which no snapshot size can equal, so
the first read always reaches the store. Writes made before the first load
leave the counter at ``UNLOADED``.

Known gap: the proxy only sees writes that pass through it. Users created by
another writer on the same store (a second service instance, for example) stay
invisible while this proxy's snapshot size and counter agree. Call
``invalidate`` to force a reload.
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

from shared.logging import get_logger
from ..models import User
from ..persistence.base import UserStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


UNLOADED = -1
CACHE_TYPE = "users"


@dataclass
class CacheStats:
    """Counters describing how reads were served."""
    hits: int = 0
    misses: int = 0
    reloads: int = 0


class CachedUserStore(UserStore):
    """Caching proxy exposing the same contract as the store it wraps."""

    def __init__(self, store: UserStore, *, metrics: Optional["MetricsCollector"] = None):
        self.store = store
        self.metrics = metrics
        self.logger = get_logger("registration.cache")
        self.stats = CacheStats()
        self._snapshot: Dict[int, User] = {}
        self._believed_size = UNLOADED
        self._lock = asyncio.Lock()

    @property
    def believed_size(self) -> int:
        return self._believed_size

    @property
    def snapshot_size(self) -> int:
        return len(self._snapshot)

    async def create(self, user: User) -> int:
        async with self._lock:
            user_id = await self.store.create(user)
            if self._believed_size != UNLOADED:
                self._believed_size += 1
            self.logger.debug(
                "Store write passed through",
                user_id=user_id,
                believed_size=self._believed_size,
                snapshot_size=len(self._snapshot),
            )
            return user_id

    async def list_all(self) -> List[User]:
        async with self._lock:
            if len(self._snapshot) == self._believed_size:
                self._record("hit")
                return list(self._snapshot.values())

            self._record("miss")
            users = await self.store.list_all()

            self._believed_size = len(users)
            self._snapshot = {user.id: user for user in users}
            self._record("reload")

            self.logger.info("User snapshot reloaded", size=len(users))
            return list(users)

    async def invalidate(self) -> None:
        """Force the next read to reload from the wrapped store."""
        async with self._lock:
            self._believed_size = UNLOADED
            self.logger.info("User snapshot invalidated", snapshot_size=len(self._snapshot))

    async def start(self) -> None:
        await self.store.start()

    async def stop(self) -> None:
        await self.store.stop()

    async def check_health(self) -> str:
        return await self.store.check_health()

    def _record(self, outcome: str) -> None:
        if outcome == "hit":
            self.stats.hits += 1
        elif outcome == "miss":
            self.stats.misses += 1
        else:
            self.stats.reloads += 1

        if self.metrics:
            metric_name = {
                "hit": "cache_hits_total",
                "miss": "cache_misses_total",
                "reload": "cache_reloads_total",
            }[outcome]
            self.metrics.increment_counter(metric_name, cache_type=CACHE_TYPE)
