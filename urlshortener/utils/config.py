"""Utility functions for application configuration management.

All runtime settings are read from environment variables exactly once, by
`load_config()`, into an immutable `AppSettings` value object. Components
(DAOs, services, dispatcher) receive the settings or the individual values
they need as constructor arguments and never read the environment themselves.

Environment variables (all optional):

    LinkTableName     DynamoDB table holding links           (UrlShortenerTable)
    StatsTableName    DynamoDB table holding stats records   ('' -> stats disabled)
    StatsLinkIndex    GSI on StatsTableName keyed by link_id (link_id-index)
    RedisAddress      host:port of the cache                 (localhost:6379)
    RedisPassword     cache AUTH password                    ('')
    RedisDB           cache database index                   (0)
    CacheTTL          cache entry TTL in seconds             (86400)
    QueueUrl          SQS queue for link-created notices     ('' -> disabled)
    RequestTimeout    request deadline for store/cache calls (4.0)
    CacheTimeout      share of it a cache read may use, s    (1.0)
    TaskTimeout       deadline for detached work, s          (10.0)
    MaxWorkers        detached task worker threads           (4)
    MaxPendingTasks   detached tasks in flight               (64)
    MaxFanout         concurrent stats fetches               (10)
    APP_NAME/APP_ENV  namespace prefix for cache keys

Functions:
    app_env() -> str
    app_name() -> str | None
    app_prefix() -> str | None
    load_config() -> AppSettings

Example:
    >>> from urlshortener.utils.config import load_config
    >>> settings = load_config()
    >>> settings.redis_host, settings.redis_port
    ('localhost', 6379)
"""

import os
import math
import logging
from dataclasses import dataclass

from urlshortener.constants import ENV, TTL, Defaults, Limits
from urlshortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    return None if app_name() is None else f'{app_name()}:{app_env()}'


# fmt: off
@dataclass(frozen=True)
class AppSettings:
    link_table_name: str = Defaults.LINK_TABLE_NAME
    stats_table_name: str = ''
    stats_link_index: str = Defaults.STATS_LINK_INDEX
    redis_host: str = 'localhost'
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = Defaults.REDIS_DB
    cache_ttl: int = TTL.ONE_DAY
    queue_url: str = ''
    request_timeout: float = Defaults.REQUEST_TIMEOUT
    cache_timeout: float = Defaults.CACHE_TIMEOUT
    task_timeout: float = Defaults.TASK_TIMEOUT
    max_workers: int = Defaults.MAX_WORKERS
    max_pending_tasks: int = Defaults.MAX_PENDING_TASKS
    max_fanout: int = Defaults.MAX_FANOUT
    key_prefix: str | None = None
# fmt: on

    @property
    def stats_enabled(self) -> bool:
        return bool(self.stats_table_name)

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.queue_url)


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None:
        logger.warning('%s environment variable not set, using default: %r', name, default)
        return default
    if value == '':
        logger.warning('%s is empty, using default: %r', name, default)
        return default
    return value


def _env_number[T: (int, float)](name: str, default: T, cast: type[T]) -> T:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    try:
        number = cast(value)
    except ValueError:
        logger.warning('%s environment variable is not a valid %s (%r), using default: %s', name, cast.__name__, value, default)
        return default
    if not math.isfinite(number) or number <= 0:
        logger.warning('%s must be a positive finite number (given: %s), using default: %s', name, number, default)
        return default
    return number


def _env_db_index() -> int:
    value = os.environ.get(ENV.Cache.DB)
    if value is None:
        logger.warning('%s environment variable not set, using default: %d', ENV.Cache.DB, Defaults.REDIS_DB)
        return Defaults.REDIS_DB
    try:
        index = int(value)
    except ValueError:
        logger.warning('%s environment variable is not a valid integer (%r), using default: %d', ENV.Cache.DB, value, Defaults.REDIS_DB)
        return Defaults.REDIS_DB
    return index if index >= 0 else Defaults.REDIS_DB


def _timeouts() -> tuple[float, float]:
    """Request deadline and cache read budget, fitted under the gateway limit

    A cold start may spend `cache_timeout` on the cache PING before serving a
    request with a `request_timeout` deadline, so the two together must stay
    below Limits.MAX_TIMEOUT. The cache budget must also leave the store time
    to answer within the deadline.
    """
    request_timeout = _env_number(ENV.Runtime.REQUEST_TIMEOUT, Defaults.REQUEST_TIMEOUT, float)
    cache_timeout = _env_number(ENV.Cache.TIMEOUT, Defaults.CACHE_TIMEOUT, float)

    if cache_timeout >= request_timeout:
        logger.warning(
            '%s must be shorter than %s (given: %s >= %s), using a quarter of it.',
            ENV.Cache.TIMEOUT,
            ENV.Runtime.REQUEST_TIMEOUT,
            cache_timeout,
            request_timeout,
        )
        cache_timeout = request_timeout / 4

    budget = Limits.MAX_TIMEOUT - 1
    if request_timeout + cache_timeout > budget:
        logger.warning(
            '%s + %s must stay below %ss (given: %s + %s), clamping.',
            ENV.Runtime.REQUEST_TIMEOUT,
            ENV.Cache.TIMEOUT,
            Limits.MAX_TIMEOUT,
            request_timeout,
            cache_timeout,
        )
        scale = budget / (request_timeout + cache_timeout)
        request_timeout, cache_timeout = request_timeout * scale, cache_timeout * scale

    return request_timeout, cache_timeout


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(':')
    if not sep:
        return address, 6379
    try:
        return host, int(port)
    except ValueError as e:
        raise BadConfigurationError(f'Invalid {ENV.Cache.ADDRESS} {address!r}: port must be an integer.') from e


def load_config() -> AppSettings:
    """Build the application settings from the environment

    Missing or malformed values fall back to defaults with a warning, so a
    partially configured function still starts. The request deadline and the
    cache read budget are fitted below the API Gateway integration limit.

    Returns:
        AppSettings: immutable settings shared by all components.

    Raises:
        BadConfigurationError:
            If RedisAddress carries a non-integer port.
    """
    redis_host, redis_port = _split_address(_env_str(ENV.Cache.ADDRESS, Defaults.REDIS_ADDRESS))

    stats_table_name = os.environ.get(ENV.Store.STATS_TABLE, '')
    if not stats_table_name:
        logger.warning('%s environment variable not set, stats are disabled.', ENV.Store.STATS_TABLE)

    request_timeout, cache_timeout = _timeouts()

    return AppSettings(
        link_table_name=_env_str(ENV.Store.LINK_TABLE, Defaults.LINK_TABLE_NAME),
        stats_table_name=stats_table_name,
        stats_link_index=os.environ.get(ENV.Store.STATS_LINK_INDEX) or Defaults.STATS_LINK_INDEX,
        redis_host=redis_host,
        redis_port=redis_port,
        redis_password=os.environ.get(ENV.Cache.PASSWORD) or None,
        redis_db=_env_db_index(),
        cache_ttl=_env_number(ENV.Cache.TTL, TTL.ONE_DAY, int),
        queue_url=os.environ.get(ENV.Queue.URL, ''),
        request_timeout=request_timeout,
        cache_timeout=cache_timeout,
        task_timeout=_env_number(ENV.Runtime.TASK_TIMEOUT, Defaults.TASK_TIMEOUT, float),
        max_workers=_env_number(ENV.Runtime.MAX_WORKERS, Defaults.MAX_WORKERS, int),
        max_pending_tasks=_env_number(ENV.Runtime.MAX_PENDING_TASKS, Defaults.MAX_PENDING_TASKS, int),
        max_fanout=_env_number(ENV.Runtime.MAX_FANOUT, Defaults.MAX_FANOUT, int),
        key_prefix=app_prefix(),
    )
