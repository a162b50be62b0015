"""Abstract base class for the volatile link cache.

A cache entry maps a link id to its original URL and expires after a TTL.
A miss is a normal outcome (None), never an error. Entries are a disposable
projection of the authoritative store and may be stale up to their TTL.
"""

from abc import ABC, abstractmethod


class CacheBaseDAO(ABC):
    """Interface for cache data access objects (DAOs).

    Methods:
        get(key: str) -> str | None:
            Return the cached value, None on a miss.
            Raises CacheMissError on transport failure.

        set(key: str, value: str, ttl: int | None = None) -> CacheBaseDAO:
            Store a value. `ttl` in seconds, defaults to the instance TTL.
            Raises CachePutError on failure.

        delete(key: str) -> CacheBaseDAO:
            Remove a value. Removing a missing key is not an error.
            Raises CacheDeleteError on failure.

        ping() -> bool:
            True if the cache is reachable. Never raises.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: int | None = None) -> 'CacheBaseDAO':
        pass

    @abstractmethod
    def delete(self, key: str) -> 'CacheBaseDAO':
        pass

    @abstractmethod
    def ping(self) -> bool:
        pass
