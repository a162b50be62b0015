import functools
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from urlshortener.dao.exceptions import CacheError


__all__ = ['handle_redis_error']

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_error(error_cls: type[CacheError] = CacheError) -> Callable[[F], F]:
    """Wrap Redis-interacting cache DAO methods to handle Redis errors

    Args:
        error_cls (type[CacheError]):
            CacheError subclass raised in place of any redis.exceptions.RedisError
            (connection refused, timeouts, AUTH failures, ...).

    Returns:
        Callable[[F], F]:
            Decorator for DAO methods.

    Example:
        >>> @handle_redis_error(CachePutError)
        ... def set(self, key, value, ttl=None):
        ...     self.redis.set(key, value, ex=ttl)
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except redis.exceptions.RedisError as e:
                info = self.redis.connection_pool.connection_kwargs
                redis_host = info.get('host')
                redis_port = info.get('port')
                redis_db = info.get('db')
                raise error_cls(f'Redis at {redis_host}:{redis_port}/{redis_db} failed: {e.__class__.__name__}.') from e

        return wrapper

    return decorator
