from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Cached (id -> original url) projection lifetime (24 hours in seconds)
    ONE_DAY = 86_400  # 60 * 60 * 24
    # Browser/CDN cache hint sent with redirects (5 minutes in seconds)
    REDIRECT_MAX_AGE = 300


class Shortcode:
    """Identifier generation parameters."""

    LENGTH = 8  # Characters per generated identifier
    MAX_RETRIES = 3  # Conditional insert attempts per create request


class Limits:
    """Request validation and resource limits."""

    MIN_URL_LENGTH = 15
    DYNAMODB_SCAN_PAGE = 20  # Items per DynamoDB scan page
    MAX_TIMEOUT = 29.0  # API Gateway hard limit is 30s


class Defaults:
    """Default runtime settings (see utils.config.AppSettings)."""

    LINK_TABLE_NAME = 'UrlShortenerTable'
    STATS_LINK_INDEX = 'link_id-index'
    REDIS_ADDRESS = 'localhost:6379'
    REDIS_DB = 0
    REQUEST_TIMEOUT = 4.0  # seconds, one deadline shared by every store/cache call of a request
    CACHE_TIMEOUT = 1.0  # seconds, cache reads on a request's path (leaves the rest to the store)
    TASK_TIMEOUT = 10.0  # seconds, bounds detached (fire-and-forget) work
    MAX_WORKERS = 4  # detached task worker threads
    MAX_PENDING_TASKS = 64  # detached tasks in flight before new ones are rejected
    MAX_FANOUT = 10  # concurrent stats fetches per aggregation


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class Store(StrEnum):
        LINK_TABLE = 'LinkTableName'
        STATS_TABLE = 'StatsTableName'
        STATS_LINK_INDEX = 'StatsLinkIndex'

    class Cache(StrEnum):
        ADDRESS = 'RedisAddress'
        PASSWORD = 'RedisPassword'  # noqa: S105
        DB = 'RedisDB'
        TTL = 'CacheTTL'
        TIMEOUT = 'CacheTimeout'

    class Queue(StrEnum):
        URL = 'QueueUrl'

    class Runtime(StrEnum):
        REQUEST_TIMEOUT = 'RequestTimeout'
        TASK_TIMEOUT = 'TaskTimeout'
        MAX_WORKERS = 'MaxWorkers'
        MAX_PENDING_TASKS = 'MaxPendingTasks'
        MAX_FANOUT = 'MaxFanout'

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Platform detection patterns (User-Agent substrings, Referer hosts)
PLATFORM_USER_AGENTS = {
    'Instagram': 'instagram',
    'Twitter': 'twitter',
    'YouTube': 'youtube',
}
PLATFORM_REFERERS = {
    'Instagram': 'instagram.com',
    'Twitter': 'twitter.com',
    'YouTube': 'youtube.com',
}

# URL schemes never accepted as link targets
UNSAFE_URL_PREFIXES = ('javascript:', 'data:', 'file:', 'vbscript:', 'about:')

# Log event codes
LINK_CREATED = 'LINK_CREATED'
LINK_DELETED = 'LINK_DELETED'
CACHE_HIT = 'CACHE_HIT'
CACHE_MISS = 'CACHE_MISS'
CACHE_DEGRADED = 'CACHE_DEGRADED'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
DETACHED_TASK_FAILED = 'DETACHED_TASK_FAILED'
DETACHED_TASK_REJECTED = 'DETACHED_TASK_REJECTED'
STATS_FETCH_FAILED = 'STATS_FETCH_FAILED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
