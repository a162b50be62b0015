"""Redirect analytics: recording, per-link aggregation and the stats join.

Classes:
    StatsService:
        Records redirect stats and projects them onto links.
"""

import uuid
import logging
from dataclasses import replace
from concurrent.futures import ThreadPoolExecutor, wait

from urlshortener.constants import Defaults, STATS_FETCH_FAILED
from urlshortener.models import LinkModel, LinkStatsSummary, Platform, StatsModel
from urlshortener.dao.base import StatsBaseDAO
from urlshortener.services.dispatcher import TaskDispatcher
from urlshortener.services.runner import DeadlineRunner
from urlshortener.utils.deadline import Deadline


logger = logging.getLogger(__name__)


class StatsService:
    """Stats recording and aggregation

    Attributes:
        stats (StatsBaseDAO):
            Stats records store.
        dispatcher (TaskDispatcher):
            Runs stats recording detached from the redirect response.
        runner (DeadlineRunner):
            Bounds aggregation and deletion by the request deadline.
        max_fanout (int):
            Upper bound of concurrent per-link fetches during a join.
        fanout_timeout (float):
            Seconds a join waits for its fetches before giving up on the rest,
            also the default request deadline of the other reads.

    Methods:
        record(link_id, platform) -> StatsModel
        schedule_record(link_id, platform) -> None
        aggregate_by_link(link_id, deadline=None) -> LinkStatsSummary
        delete(link_id, deadline=None) -> int
        join_stats_onto_links(links, deadline=None) -> list[LinkModel]
    """

    def __init__(
        self,
        stats: StatsBaseDAO,
        dispatcher: TaskDispatcher,
        max_fanout: int = Defaults.MAX_FANOUT,
        fanout_timeout: float = Defaults.REQUEST_TIMEOUT,
        runner: DeadlineRunner | None = None,
    ):
        if max_fanout <= 0:
            raise ValueError(f'max_fanout must be a positive integer (given value: {max_fanout}).')
        self.stats = stats
        self.dispatcher = dispatcher
        self.runner = DeadlineRunner() if runner is None else runner
        self.max_fanout = max_fanout
        self.fanout_timeout = fanout_timeout

    def _deadline(self, deadline: Deadline | None) -> Deadline:
        return Deadline(self.fanout_timeout) if deadline is None else deadline

    def record(self, link_id: str, platform: Platform = Platform.UNKNOWN) -> StatsModel:
        """Store one redirect of `link_id` under a fresh UUID

        Runs inside detached work, so it is bounded by the store client's own
        timeouts rather than a request deadline.

        Raises:
            DataStoreError:
                If the record cannot be written.
        """
        stats = StatsModel(id=str(uuid.uuid4()), link_id=link_id, platform=platform)
        self.stats.insert(stats)
        return stats

    def schedule_record(self, link_id: str, platform: Platform = Platform.UNKNOWN) -> None:
        """Record a redirect without making the caller wait for it."""
        self.dispatcher.submit('stats_record', self.record, link_id, platform)

    def aggregate_by_link(self, link_id: str, deadline: Deadline | None = None) -> LinkStatsSummary:
        """Summarize every recorded redirect of a link

        An unknown link is not an error: its summary has no clicks.

        Returns:
            LinkStatsSummary: total clicks, per-platform counts and the records.

        Raises:
            DataStoreError:
                If the records cannot be read before the deadline.
        """
        deadline = self._deadline(deadline)
        records = self.runner.call(deadline, self.stats.by_link, link_id, deadline=deadline)
        return LinkStatsSummary(link_id=link_id, details=tuple(records))

    def delete(self, link_id: str, deadline: Deadline | None = None) -> int:
        """Delete every stats record of a link and return how many there were

        Raises:
            DataStoreError:
                If the store fails, or the deadline passes first.
        """
        deadline = self._deadline(deadline)
        return self.runner.call(deadline, self.stats.delete_by_link, link_id, deadline=deadline)

    def join_stats_onto_links(self, links: list[LinkModel], deadline: Deadline | None = None) -> list[LinkModel]:
        """Attach each link's stats records, fetching them concurrently

        At most `max_fanout` fetches run at once. Each worker writes only its
        own slot of the result list. A link whose fetch fails, or has not
        finished within `fanout_timeout` (or before `deadline`, whichever comes
        first), is returned with empty stats; the join itself never fails
        because of a single link.

        Args:
            links (list[LinkModel]):
                Links to enrich, typically LinkService.all().
            deadline (Deadline | None):
                Request deadline shared with the listing that produced `links`.

        Returns:
            list[LinkModel]: the same links, in the same order, with stats.

        Example:
            >>> joined = service.join_stats_onto_links(links)
            >>> [len(link.stats) for link in joined]
            [3, 0, 12]
        """
        if not links:
            return []

        timeout = self.fanout_timeout if deadline is None else min(self.fanout_timeout, deadline.remaining())
        results: list[tuple[StatsModel, ...]] = [()] * len(links)

        def fetch(index: int, link_id: str) -> None:
            try:
                results[index] = tuple(self.stats.by_link(link_id, deadline=deadline))
            except Exception as e:
                logger.warning(
                    'Failed to fetch stats for link %s, leaving them empty.',
                    link_id,
                    extra={'event': STATS_FETCH_FAILED, 'link_id': link_id, 'error': e.__class__.__name__},
                )

        executor = ThreadPoolExecutor(max_workers=min(self.max_fanout, len(links)), thread_name_prefix='stats-join')
        try:
            futures = [executor.submit(fetch, index, link.id) for index, link in enumerate(links)]
            _, not_done = wait(futures, timeout=timeout)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if not_done:
            logger.warning(
                '%d stats fetch(es) did not finish within %.1fs, leaving them empty.',
                len(not_done),
                timeout,
                extra={'event': STATS_FETCH_FAILED},
            )

        # snapshot: late finishers must not leak into the returned links
        snapshot = [() if future in not_done else results[index] for index, future in enumerate(futures)]
        return [replace(link, stats=stats) for link, stats in zip(links, snapshot)]
