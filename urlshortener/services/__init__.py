from urlshortener.services.dispatcher import TaskDispatcher
from urlshortener.services.runner import DeadlineRunner
from urlshortener.services.link_service import LinkService
from urlshortener.services.stats_service import StatsService

__all__ = [
    'TaskDispatcher',
    'DeadlineRunner',
    'LinkService',
    'StatsService',
]
