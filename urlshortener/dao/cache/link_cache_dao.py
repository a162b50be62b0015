"""Redis-backed cache of link id -> original URL.

Responsibilities:
    - Serve the fast path of redirects (GET url:<id>)
    - Store entries with a bounded lifetime (SET url:<id> <url> EX <ttl>)
    - Invalidate entries on link deletion (DEL url:<id>)

Keys (see CacheKeySchema):
    [<prefix>:]url:<link id>  -> original URL (string), TTL 24h by default

Example:
    >>> cache = LinkCacheDAO(redis_host='localhost', prefix='urlshortener:dev')
    >>> cache.set('aZ3kP9qL', 'https://example.com/page/123')
    <LinkCacheDAO>
    >>> cache.get('aZ3kP9qL')
    'https://example.com/page/123'
    >>> cache.get('missing') is None
    True
"""

from beartype import beartype

from urlshortener.constants import TTL
from urlshortener.dao.base import CacheBaseDAO
from urlshortener.dao.cache.mixins import RedisClientMixin
from urlshortener.dao.cache.helpers import handle_redis_error
from urlshortener.dao.exceptions import CacheMissError, CachePutError, CacheDeleteError


class LinkCacheDAO(RedisClientMixin, CacheBaseDAO):
    """Redis-based cache DAO for link URLs

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the cache.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced keys.
        ttl (int):
            Default entry lifetime in seconds.
    """

    def __init__(self, *args, ttl: int = TTL.ONE_DAY, **kwargs):
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise ValueError(f'Cache TTL must be a positive integer of seconds (given value: {ttl!r}).')
        self.ttl = ttl
        super().__init__(*args, **kwargs)

    @handle_redis_error(CacheMissError)
    @beartype
    def get(self, key: str) -> str | None:
        """Return the cached URL for a link id, None on a miss

        Raises:
            CacheMissError:
                On any Redis failure. Callers treat it exactly like a miss.
        """
        value = self.redis.get(self.keys.link_url_key(key))
        return value or None

    @handle_redis_error(CachePutError)
    @beartype
    def set(self, key: str, value: str, ttl: int | None = None) -> 'LinkCacheDAO':
        """Cache a link's URL for `ttl` seconds (instance TTL by default)

        Raises:
            CachePutError:
                On any Redis failure.
        """
        self.redis.set(self.keys.link_url_key(key), value, ex=ttl or self.ttl)
        return self

    @handle_redis_error(CacheDeleteError)
    @beartype
    def delete(self, key: str) -> 'LinkCacheDAO':
        """Invalidate a link's cache entry (idempotent)

        Raises:
            CacheDeleteError:
                On any Redis failure.
        """
        self.redis.delete(self.keys.link_url_key(key))
        return self

    def ping(self) -> bool:
        return self._healthcheck()
