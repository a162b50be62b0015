import functools
from collections.abc import Callable


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class CacheKeySchema:
    """Provide standardized Redis keys for cached link data.

    Every link key lives under the fixed `url:` namespace. An optional prefix
    can be provided to separate apps and environments sharing one Redis,
    e.g. "urlshortener:prod" -> "urlshortener:prod:url:aZ3kP9qL".
    """

    LINK_NAMESPACE = 'url'

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_url_key(self, link_id: str) -> str:
        return f'{self.LINK_NAMESPACE}:{link_id}'
