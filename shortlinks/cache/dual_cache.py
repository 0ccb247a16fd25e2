"""In-memory, write-through dual cache for URL mappings

Two independent tables hold the two directions of every known mapping:

    long_to_short:  long URL   -> short code
    short_to_long:  short code -> long URL

Each table is guarded by its own lock and the two are never locked together,
so a reader may briefly see one direction reflect a mapping the other doesn't
yet. Each direction is populated only after a confirmed store write or read,
which keeps it consistent with the durable store on its own.

Lock ordering: should an operation ever need both tables at once, acquire
long_to_short before short_to_long.

Entries are never evicted or expired.

Classes:
    CacheTable:
        Lock-guarded dictionary with non-blocking get/put.
    DualCache:
        The pair of CacheTable instances owned by a MappingService.

Example:
    >>> cache = DualCache()
    >>> cache.long_to_short.put('https://example.com/a', '9f3c1a2b7d4e5f60')
    >>> cache.long_to_short.get('https://example.com/a')
    '9f3c1a2b7d4e5f60'
    >>> cache.short_to_long.get('9f3c1a2b7d4e5f60') is None
    True
"""

import threading


class CacheTable:
    """One direction of the dual cache

    get() and put() only touch in-memory state and hold the lock for a single
    dictionary operation. Callers never see the lock, so it can't be held
    across a store round trip.
    """

    def __init__(self, name: str):
        self.name = name
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, value: str) -> None:
        # last write wins
        with self._lock:
            self._entries[key] = value

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f'<CacheTable {self.name} entries={len(self)}>'


class DualCache:
    """Pair of independently locked tables, one per lookup direction

    Attributes:
        long_to_short (CacheTable):
            Long URL -> short code. Locked first if both are ever needed.
        short_to_long (CacheTable):
            Short code -> long URL.
    """

    def __init__(self):
        self.long_to_short = CacheTable('long_to_short')
        self.short_to_long = CacheTable('short_to_long')

    def remember(self, long_url: str, short_code: str) -> None:
        """Populate both directions of a confirmed mapping

        The two writes are independent; neither lock is held while taking the other.
        """
        self.long_to_short.put(long_url, short_code)
        self.short_to_long.put(short_code, long_url)
