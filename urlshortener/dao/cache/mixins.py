"""Shared Redis client setup for cache DAOs.

The client is built with socket timeouts equal to `timeout` and without
redis-py's automatic retries, so a slow or unreachable Redis costs at most one
timeout per command. A failed PING at construction is logged and tolerated:
the cache is optional and every caller degrades to the links store.

Example:
    >>> class LinkCacheDAO(RedisClientMixin, CacheBaseDAO):
    ...     pass
    >>> dao = LinkCacheDAO(redis_host='cache.internal', prefix='urlshortener:prod', timeout=1.0)
    >>> dao.keys.link_url_key('aZ3kP9qL')
    'urlshortener:prod:url:aZ3kP9qL'
"""

import logging

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from urlshortener.constants import Defaults
from urlshortener.dao.cache.cache_key_schema import CacheKeySchema


logger = logging.getLogger(__name__)


class RedisClientMixin:
    """Provide `self.redis` (thread-safe, pooled redis-py client) and `self.keys` (CacheKeySchema)."""

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int = 6379,
        redis_db: int = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
        timeout: float = Defaults.CACHE_TIMEOUT,
        healthcheck: bool = True,
    ):
        """
        Args:
            redis_host, redis_port, redis_db, redis_username, redis_password:
                Connection parameters, ignored when `redis_client` is given.
            redis_decode_responses (bool):
                Return str instead of bytes. Defaults to True.
            redis_client (redis.Redis | None):
                Existing client to reuse (tests inject mocks here).
            prefix (str | None):
                Key namespace, e.g. 'urlshortener:prod'.
            timeout (float):
                Connect and per-command socket timeout in seconds.
            healthcheck (bool):
                PING at construction. Off for secondary clients of the same Redis.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
                retry_on_timeout=False,
                retry=Retry(NoBackoff(), 0),
            )

        self.redis = redis_client
        self.keys = CacheKeySchema(prefix=prefix)

        if healthcheck:
            self._healthcheck()

    def _healthcheck(self) -> bool:
        """PING Redis to healthcheck connectivity

        Returns:
            bool:
                True if Redis is reachable, False otherwise (a warning is logged).

        Example:
            >>> self._healthcheck()
            True
        """
        try:
            self.redis.ping()
        except redis.exceptions.RedisError as e:
            info = self.redis.connection_pool.connection_kwargs
            logger.warning(
                "Can't connect to Redis at %s:%s/%s. Continuing without cache.",
                info.get('host'),
                info.get('port'),
                info.get('db'),
                extra={'error': e.__class__.__name__},
            )
            return False
        else:
            return True
