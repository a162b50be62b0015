from urlshortener.dao.base.link_base_dao import LinkBaseDAO
from urlshortener.dao.base.stats_base_dao import StatsBaseDAO
from urlshortener.dao.base.cache_base_dao import CacheBaseDAO
from urlshortener.dao.base.notification_base_dao import NotificationBaseDAO


__all__ = [
    'LinkBaseDAO',
    'StatsBaseDAO',
    'CacheBaseDAO',
    'NotificationBaseDAO',
]
