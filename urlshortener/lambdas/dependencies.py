"""Process-wide wiring of settings, adapters and services.

A Lambda execution environment serves many invocations. Clients (DynamoDB,
Redis, SQS), the detached task dispatcher and the deadline runner are built on
the first call to `services()` and reused by every later invocation in the
same process. Handlers patch `services` in tests.

Two Redis clients are built: one for reads on the request path, with the short
cache timeout, and one for detached writes and invalidations, with the
detached task timeout.
"""

import atexit
import functools
import logging
from dataclasses import dataclass

from urlshortener.utils.config import AppSettings, load_config
from urlshortener.dao.cache import LinkCacheDAO
from urlshortener.dao.dynamodb import LinkDynamoDBDAO, StatsDynamoDBDAO
from urlshortener.dao.sqs import LinkNotificationSQSDAO
from urlshortener.services import DeadlineRunner, LinkService, StatsService, TaskDispatcher


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    settings: AppSettings
    dispatcher: TaskDispatcher
    runner: DeadlineRunner
    links: LinkService
    stats: StatsService | None  # None when no stats table is configured


def _cache(settings: AppSettings, timeout: float, healthcheck: bool) -> LinkCacheDAO:
    return LinkCacheDAO(
        redis_host=settings.redis_host,
        redis_port=settings.redis_port,
        redis_db=settings.redis_db,
        redis_password=settings.redis_password,
        prefix=settings.key_prefix,
        ttl=settings.cache_ttl,
        timeout=timeout,
        healthcheck=healthcheck,
    )


def build_services(settings: AppSettings) -> Services:
    dispatcher = TaskDispatcher(
        max_workers=settings.max_workers,
        max_pending=settings.max_pending_tasks,
        task_timeout=settings.task_timeout,
    )
    runner = DeadlineRunner(max_workers=settings.max_workers)

    notifier = LinkNotificationSQSDAO(settings.queue_url, timeout=settings.task_timeout) if settings.notifications_enabled else None
    links = LinkService(
        links=LinkDynamoDBDAO(settings.link_table_name, timeout=settings.request_timeout),
        cache=_cache(settings, settings.cache_timeout, healthcheck=True),
        cache_writer=_cache(settings, settings.task_timeout, healthcheck=False),
        dispatcher=dispatcher,
        notifier=notifier,
        cache_ttl=settings.cache_ttl,
        runner=runner,
        request_timeout=settings.request_timeout,
        cache_timeout=settings.cache_timeout,
    )

    stats = None
    if settings.stats_enabled:
        stats = StatsService(
            stats=StatsDynamoDBDAO(settings.stats_table_name, index_name=settings.stats_link_index, timeout=settings.request_timeout),
            dispatcher=dispatcher,
            max_fanout=settings.max_fanout,
            fanout_timeout=settings.request_timeout,
            runner=runner,
        )

    return Services(settings=settings, dispatcher=dispatcher, runner=runner, links=links, stats=stats)


@functools.cache
def services() -> Services:
    """Build (once per process) and return the application services."""
    built = build_services(load_config())
    atexit.register(built.dispatcher.shutdown)
    atexit.register(built.runner.shutdown)
    logger.debug('Application services initialized.', extra={'stats_enabled': built.stats is not None})
    return built
