"""Link orchestration: create, resolve and delete short links.

The links store is authoritative. The cache is a read-through accelerator that
may be stale up to its TTL and is never allowed to turn a resolvable link into
a failure. Every cache write or invalidation runs detached through the task
dispatcher, after the store operation it follows has completed.

Each operation runs against one request Deadline (`request_timeout` seconds
unless the caller passes its own). Cache reads get at most `cache_timeout` of
it, so a stalled cache still leaves the store time to answer.

Classes:
    LinkService:
        Orchestrates the links store, the URL cache and notifications.

Example:
    >>> service = LinkService(links=LinkDynamoDBDAO('UrlShortenerTable'), cache=LinkCacheDAO(), dispatcher=TaskDispatcher())
    >>> link = service.create('https://example.com/page/123')
    >>> service.resolve(link.id)
    'https://example.com/page/123'
"""

import logging

from urlshortener.constants import (
    Defaults,
    Shortcode,
    CACHE_HIT,
    CACHE_MISS,
    CACHE_DEGRADED,
    LINK_CREATED,
    LINK_DELETED,
    SHORTCODE_COLLISION,
)
from urlshortener.exceptions import CollisionExhaustedError, ShortcodeGenerationError
from urlshortener.models import LinkModel
from urlshortener.dao.base import LinkBaseDAO, CacheBaseDAO, NotificationBaseDAO
from urlshortener.dao.exceptions import CacheError, LinkAlreadyExistsError, RequestTimeoutError
from urlshortener.services.dispatcher import TaskDispatcher
from urlshortener.services.runner import DeadlineRunner
from urlshortener.utils.deadline import Deadline
from urlshortener.utils.shortener import generate_shortcode
from urlshortener.utils.validation import validate_url


logger = logging.getLogger(__name__)


class LinkService:
    """Short link lifecycle on top of the links store and the URL cache

    Attributes:
        links (LinkBaseDAO):
            Authoritative links store.
        cache (CacheBaseDAO):
            Cache read on the request path.
        cache_writer (CacheBaseDAO):
            Cache used by detached writes and invalidations. Defaults to
            `cache`; usually a second client with the detached task timeout.
        dispatcher (TaskDispatcher):
            Runs cache writes and notifications detached from the request.
        notifier (NotificationBaseDAO | None):
            Link-created notifications, None when disabled.
        runner (DeadlineRunner):
            Bounds every store and cache call by the request deadline.
        request_timeout (float):
            Default request deadline in seconds.
        cache_timeout (float):
            Share of the deadline a cache read may use, in seconds.

    Methods:
        all(deadline=None) -> list[LinkModel]
        create(original_url, deadline=None) -> LinkModel
        resolve(link_id, deadline=None) -> str
        delete(link_id, deadline=None) -> None

    Every method raises RequestTimeoutError (a DataStoreError) when the store
    does not answer before the deadline.
    """

    def __init__(
        self,
        links: LinkBaseDAO,
        cache: CacheBaseDAO,
        dispatcher: TaskDispatcher,
        notifier: NotificationBaseDAO | None = None,
        max_retries: int = Shortcode.MAX_RETRIES,
        shortcode_length: int = Shortcode.LENGTH,
        cache_ttl: int | None = None,
        cache_writer: CacheBaseDAO | None = None,
        runner: DeadlineRunner | None = None,
        request_timeout: float = Defaults.REQUEST_TIMEOUT,
        cache_timeout: float = Defaults.CACHE_TIMEOUT,
    ):
        if max_retries <= 0:
            raise ValueError(f'max_retries must be a positive integer (given value: {max_retries}).')
        if request_timeout <= 0 or cache_timeout <= 0:
            raise ValueError(f'Timeouts must be positive (given: {request_timeout}, {cache_timeout}).')
        self.links = links
        self.cache = cache
        self.cache_writer = cache if cache_writer is None else cache_writer
        self.dispatcher = dispatcher
        self.notifier = notifier
        self.max_retries = max_retries
        self.shortcode_length = shortcode_length
        self.cache_ttl = cache_ttl
        self.runner = DeadlineRunner() if runner is None else runner
        self.request_timeout = request_timeout
        self.cache_timeout = cache_timeout

    def _deadline(self, deadline: Deadline | None) -> Deadline:
        return Deadline(self.request_timeout) if deadline is None else deadline

    def all(self, deadline: Deadline | None = None) -> list[LinkModel]:
        """Return every stored link (stats not joined)."""
        deadline = self._deadline(deadline)
        return self.runner.call(deadline, self.links.all, deadline=deadline)

    def create(self, original_url: str | None, deadline: Deadline | None = None) -> LinkModel:
        """Validate a URL and store it under a freshly generated id

        Up to `max_retries` ids are tried. Each attempt is a conditional insert
        that fails only when the id is already taken, so uniqueness is decided
        by the store and no locking is needed here. All attempts share one
        deadline.

        Args:
            original_url (str):
                Long URL to shorten.
            deadline (Deadline | None):
                Request deadline, a fresh `request_timeout` one by default.

        Returns:
            LinkModel: the stored link.

        Raises:
            ValidationError:
                If the URL is rejected. Nothing is written.
            CollisionExhaustedError:
                If every attempt hit an existing id.
            ShortcodeGenerationError:
                If the final attempt could not produce an id at all.
            DataStoreError:
                If the store fails for any reason other than a collision, or
                the deadline passes (RequestTimeoutError).
        """
        original_url = validate_url(original_url)
        deadline = self._deadline(deadline)

        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                link = LinkModel(id=generate_shortcode(self.shortcode_length), original_url=original_url)
            except ShortcodeGenerationError as e:
                logger.warning('Shortcode generation failed (attempt %d/%d).', attempt, self.max_retries)
                last_error = e
                continue

            try:
                self.runner.call(deadline, self.links.insert, link)
            except LinkAlreadyExistsError as e:
                logger.info(
                    'Shortcode %s already taken (attempt %d/%d).',
                    link.id,
                    attempt,
                    self.max_retries,
                    extra={'event': SHORTCODE_COLLISION, 'link_id': link.id},
                )
                last_error = e
                continue

            logger.info('Link created.', extra={'event': LINK_CREATED, 'link_id': link.id})
            self.dispatcher.submit('cache_set', self.cache_writer.set, link.id, link.original_url, self.cache_ttl)
            if self.notifier is not None:
                self.dispatcher.submit('notify_link_created', self.notifier.publish_link_created, link)
            return link

        if isinstance(last_error, ShortcodeGenerationError):
            raise last_error
        raise CollisionExhaustedError(f'Could not find a free shortcode after {self.max_retries} attempts.') from last_error

    def resolve(self, link_id: str, deadline: Deadline | None = None) -> str:
        """Return the original URL of a link, cache first

        A cache read that fails or takes longer than `cache_timeout` counts as
        a miss, and the store is asked with whatever is left of the deadline.

        Raises:
            LinkNotFoundError:
                If the store has no link (or no URL) for `link_id`.
            DataStoreError:
                If the store cannot be queried before the deadline.
        """
        deadline = self._deadline(deadline)
        try:
            cached = self.runner.call(deadline, self.cache.get, link_id, budget=self.cache_timeout)
        except (CacheError, RequestTimeoutError) as e:
            logger.warning(
                'Cache read failed, falling back to the links store.',
                extra={'event': CACHE_DEGRADED, 'link_id': link_id, 'error': e.__class__.__name__},
            )
            cached = None

        if cached:
            logger.debug('Cache hit.', extra={'event': CACHE_HIT, 'link_id': link_id})
            return cached

        logger.debug('Cache miss.', extra={'event': CACHE_MISS, 'link_id': link_id})
        link = self.runner.call(deadline, self.links.get, link_id)
        self.dispatcher.submit('cache_set', self.cache_writer.set, link.id, link.original_url, self.cache_ttl)
        return link.original_url

    def delete(self, link_id: str, deadline: Deadline | None = None) -> None:
        """Delete a link from the store, then invalidate its cache entry detached

        A concurrent resolve may still serve the old URL from the cache until
        the invalidation lands or the entry expires.

        Raises:
            DataStoreError:
                If the store delete fails or times out. The cache is left untouched.
        """
        self.runner.call(self._deadline(deadline), self.links.delete, link_id)
        logger.info('Link deleted.', extra={'event': LINK_DELETED, 'link_id': link_id})
        self.dispatcher.submit('cache_delete', self.cache_writer.delete, link_id)
