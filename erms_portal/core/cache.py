"""
Query cache for upstream reads.

Entries are keyed by (token, query key) where a query key is a tuple such as
("engineers", "by-project", "p1"). Invalidation works on key prefixes, so
invalidating ("engineers",) drops every engineers query for every session.
"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple

from .config import settings

log = logging.getLogger(__name__)

QueryKey = Tuple[Any, ...]

MISSING = object()


class QueryCache:
    def __init__(self, ttl: float):
        self.ttl = ttl
        self._entries: Dict[Tuple[str, QueryKey], Tuple[float, Any]] = {}
        self._inflight: Dict[Tuple[str, QueryKey], "asyncio.Future[Any]"] = {}

    def _now(self) -> float:
        return time.monotonic()

    def _lookup(self, token: str, key: QueryKey) -> Any:
        entry = self._entries.get((token, key))
        if entry is None:
            return MISSING
        expires_at, value = entry
        if expires_at <= self._now():
            del self._entries[(token, key)]
            return MISSING
        return value

    def peek(self, token: str, key: QueryKey) -> Optional[Any]:
        value = self._lookup(token, key)
        return None if value is MISSING else value

    def purge_expired(self) -> int:
        now = self._now()
        expired = [cache_key for cache_key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for cache_key in expired:
            del self._entries[cache_key]
        return len(expired)

    async def fetch(self, token: str, key: QueryKey, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for key, loading it once on a miss."""
        cache_key = (token, key)
        cached = self._lookup(token, key)
        if cached is not MISSING:
            log.debug("Cache HIT for %s", key)
            return cached

        pending = self._inflight.get(cache_key)
        if pending is not None:
            log.debug("Cache WAIT for %s", key)
            return await asyncio.shield(pending)

        log.debug("Cache MISS for %s", key)
        future: "asyncio.Future[Any]" = asyncio.get_running_loop().create_future()
        self._inflight[cache_key] = future
        try:
            value = await loader()
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved so an unawaited failure is not reported.
            future.exception()
            raise
        except BaseException:
            future.cancel()
            raise
        else:
            future.set_result(value)
            if self._inflight.get(cache_key) is future and self.ttl > 0:
                self.purge_expired()
                self._entries[cache_key] = (self._now() + self.ttl, value)
            return value
        finally:
            if self._inflight.get(cache_key) is future:
                del self._inflight[cache_key]

    def invalidate(self, *prefixes: QueryKey) -> int:
        """Drop every entry whose query key starts with one of the prefixes."""
        doomed = [
            cache_key
            for cache_key in self._entries
            if any(cache_key[1][: len(prefix)] == prefix for prefix in prefixes)
        ]
        for cache_key in doomed:
            del self._entries[cache_key]
        # Loads started before the mutation must not repopulate the cache.
        for cache_key in list(self._inflight):
            if any(cache_key[1][: len(prefix)] == prefix for prefix in prefixes):
                del self._inflight[cache_key]
        if doomed:
            log.debug("Invalidated %d cached queries for %s", len(doomed), prefixes)
        return len(doomed)

    def clear(self, token: Optional[str] = None) -> None:
        """Forget one session's entries, or everything when token is None."""
        if token is None:
            self._entries.clear()
            self._inflight.clear()
            return
        for store in (self._entries, self._inflight):
            for cache_key in [k for k in store if k[0] == token]:
                del store[cache_key]

    def keys(self, token: str) -> Iterable[QueryKey]:
        return [key for (owner, key) in self._entries if owner == token]


query_cache = QueryCache(ttl=settings.cache_ttl_seconds)

# Prefixes touched by any engineer, project or assignment mutation.
RESOURCE_PREFIXES: Tuple[QueryKey, ...] = (
    ("engineers",),
    ("projects",),
    ("assignments",),
    ("analytics",),
)


def invalidate_resources() -> int:
    return query_cache.invalidate(*RESOURCE_PREFIXES)
