from urlshortener.dao.cache.cache_key_schema import CacheKeySchema
from urlshortener.dao.cache.mixins import RedisClientMixin
from urlshortener.dao.cache.link_cache_dao import LinkCacheDAO

__all__ = [
    'CacheKeySchema',
    'RedisClientMixin',
    'LinkCacheDAO',
]
