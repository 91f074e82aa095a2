"""Time-bounded memoization for outbound GitHub requests.

``FetchCache`` stores successful payloads keyed by request and serves them
until they are older than the configured TTL. Failed fetches are never
stored, so the next caller retries the network.

Usage
-----
>>> cache = FetchCache()
>>> payload = await cache.get("/users/octocat", lambda: client.fetch(...))

"""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ

from octoscore.common.time import utcnow

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from octoscore.common.time import Clock

DEFAULT_CACHE_TTL = dt.timedelta(minutes=5)


@dataclasses.dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached payload and the time it was stored."""

    payload: typ.Any
    stored_at: dt.datetime


def request_key(path: str, params: typ.Mapping[str, object] | None = None) -> str:
    """Build a cache key from an endpoint path and its query parameters.

    Parameters are sorted so equivalent requests share one entry.
    """
    if not params:
        return path
    query = "&".join(f"{name}={params[name]}" for name in sorted(params))
    return f"{path}?{query}"


class FetchCache:
    """In-memory response cache shared by the requests of one client."""

    def __init__(
        self,
        *,
        ttl: dt.timedelta = DEFAULT_CACHE_TTL,
        clock: Clock = utcnow,
    ) -> None:
        """Create an empty cache with the given TTL and clock."""
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    @property
    def ttl(self) -> dt.timedelta:
        """Return how long an entry stays fresh."""
        return self._ttl

    def __len__(self) -> int:
        """Return the number of stored entries.

        Stale entries are dropped when looked up or when a new payload is
        stored, so the count never grows past what one TTL window fetched.
        """
        return len(self._entries)

    def lookup(self, key: str) -> CacheEntry | None:
        """Return the entry for ``key`` if it is still fresh."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_stale(entry, self._clock()):
            del self._entries[key]
            return None
        return entry

    async def get(
        self,
        key: str,
        fetch: cabc.Callable[[], cabc.Awaitable[typ.Any]],
    ) -> typ.Any:
        """Return a fresh cached payload or await ``fetch`` and store its result.

        Exceptions raised by ``fetch`` propagate and nothing is stored.
        """
        entry = self.lookup(key)
        if entry is not None:
            self.hits += 1
            return entry.payload

        self.misses += 1
        payload = await fetch()
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = CacheEntry(payload=payload, stored_at=now)
        return payload

    def _is_stale(self, entry: CacheEntry, now: dt.datetime) -> bool:
        return now - entry.stored_at >= self._ttl

    def _evict_expired(self, now: dt.datetime) -> None:
        expired = [
            key for key, entry in self._entries.items() if self._is_stale(entry, now)
        ]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        """Drop every stored entry and reset the counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0
