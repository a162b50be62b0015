"""Unit tests for the StatsService

Test coverage includes:

1. record() / schedule_record()
2. aggregate_by_link() with its per-platform breakdown
3. join_stats_onto_links()
   - order preserved, every link returned
   - a failing link gets empty stats, the others are unaffected
   - fan-out bounded by max_fanout
   - fetches still running at the deadline are left empty
   - a caller deadline shorter than fanout_timeout wins
4. delete()
"""

import time
import threading
from datetime import datetime, UTC

import pytest
from freezegun import freeze_time

from urlshortener.models import LinkModel, Platform, StatsModel
from urlshortener.services import StatsService
from urlshortener.utils.deadline import Deadline


@pytest.fixture
def service(stats, dispatcher):
    return StatsService(stats=stats, dispatcher=dispatcher, max_fanout=4, fanout_timeout=2.0)


def _links(count: int) -> list[LinkModel]:
    return [LinkModel(id=f'link{i:04d}', original_url=f'https://example.com/page/{i:04d}') for i in range(count)]


# -------------------------------
# 1. Recording
# -------------------------------


@freeze_time('2026-10-18 12:00:00')
def test_record(service, stats):
    record = service.record('aZ3kP9qL', Platform.INSTAGRAM)

    assert stats.records == [record]
    assert record.link_id == 'aZ3kP9qL'
    assert record.platform is Platform.INSTAGRAM
    assert record.created_at == datetime(2026, 10, 18, 12, tzinfo=UTC)
    assert len(record.id) == 36


def test_record_ids_are_unique(service, stats):
    for _ in range(50):
        service.record('aZ3kP9qL')

    assert len({record.id for record in stats.records}) == 50


def test_schedule_record_is_detached(service, stats, dispatcher):
    service.schedule_record('aZ3kP9qL', Platform.YOUTUBE)

    assert dispatcher.submitted == ['stats_record']
    assert [record.platform for record in stats.records] == [Platform.YOUTUBE]


# -------------------------------
# 2. Aggregation
# -------------------------------


def test_aggregate_by_link(service):
    for platform in (Platform.INSTAGRAM, Platform.INSTAGRAM, Platform.TWITTER):
        service.record('aZ3kP9qL', platform)
    service.record('other001', Platform.YOUTUBE)

    summary = service.aggregate_by_link('aZ3kP9qL')

    assert summary.link_id == 'aZ3kP9qL'
    assert summary.total_clicks == 3
    assert summary.platform_counts == {'Instagram': 2, 'Twitter': 1}


def test_aggregate_unknown_link(service):
    summary = service.aggregate_by_link('missing1')
    assert summary.total_clicks == 0
    assert summary.details == ()


# -------------------------------
# 3. Join
# -------------------------------


def test_join_preserves_order(service):
    links = _links(10)
    for index, link in enumerate(links):
        for _ in range(index):
            service.record(link.id)

    joined = service.join_stats_onto_links(links)

    assert [link.id for link in joined] == [link.id for link in links]
    assert [len(link.stats) for link in joined] == list(range(10))
    assert all(stat.link_id == link.id for link in joined for stat in link.stats)


def test_join_isolates_failing_link(service, stats, caplog):
    links = _links(5)
    for link in links:
        service.record(link.id)
    stats.failing_links.add('link0002')

    joined = service.join_stats_onto_links(links)

    assert len(joined) == 5
    assert joined[2].stats == ()
    assert [len(link.stats) for link in joined] == [1, 1, 0, 1, 1]
    assert 'link0002' in caplog.text


def test_join_empty_list(service):
    assert service.join_stats_onto_links([]) == []


def test_join_does_not_mutate_input(service):
    links = _links(2)
    service.record(links[0].id)

    service.join_stats_onto_links(links)

    assert links[0].stats == ()


class _TrackingStatsDAO:
    """Stats DAO counting how many by_link() calls run at the same time."""

    def __init__(self, delay: float = 0.02):
        self.delay = delay
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def by_link(self, link_id, **kwargs):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(self.delay)
        with self._lock:
            self.active -= 1
        return [StatsModel(id=f'{link_id}-1', link_id=link_id)]


def test_join_fan_out_is_bounded(dispatcher):
    tracking = _TrackingStatsDAO()
    service = StatsService(stats=tracking, dispatcher=dispatcher, max_fanout=3, fanout_timeout=5.0)

    joined = service.join_stats_onto_links(_links(12))

    assert len(joined) == 12
    assert all(len(link.stats) == 1 for link in joined)
    assert 1 < tracking.peak <= 3


def test_join_deadline_leaves_slow_links_empty(dispatcher, caplog):
    tracking = _TrackingStatsDAO(delay=0.5)
    service = StatsService(stats=tracking, dispatcher=dispatcher, max_fanout=1, fanout_timeout=0.1)

    started = time.monotonic()
    joined = service.join_stats_onto_links(_links(3))

    assert time.monotonic() - started < 0.5
    assert len(joined) == 3
    assert all(link.stats == () for link in joined[1:])
    assert 'did not finish' in caplog.text


def test_join_honours_caller_deadline(dispatcher):
    tracking = _TrackingStatsDAO(delay=0.5)
    service = StatsService(stats=tracking, dispatcher=dispatcher, max_fanout=3, fanout_timeout=5.0)

    started = time.monotonic()
    joined = service.join_stats_onto_links(_links(3), deadline=Deadline(0.1))

    assert time.monotonic() - started < 0.5
    assert [link.stats for link in joined] == [(), (), ()]


def test_invalid_max_fanout(stats, dispatcher):
    with pytest.raises(ValueError):
        StatsService(stats=stats, dispatcher=dispatcher, max_fanout=0)


# -------------------------------
# 4. Deletion
# -------------------------------


def test_delete(service, stats):
    service.record('aZ3kP9qL')
    service.record('aZ3kP9qL')
    service.record('other001')

    assert service.delete('aZ3kP9qL') == 2
    assert [record.link_id for record in stats.records] == ['other001']


def test_aggregate_and_delete_pass_deadline_to_store(dispatcher):
    class _DeadlineRecordingDAO:
        def __init__(self):
            self.deadlines = []

        def by_link(self, link_id, deadline=None, **kwargs):
            self.deadlines.append(deadline)
            return []

        def delete_by_link(self, link_id, deadline=None, **kwargs):
            self.deadlines.append(deadline)
            return 0

    store = _DeadlineRecordingDAO()
    service = StatsService(stats=store, dispatcher=dispatcher)
    deadline = Deadline(2.0)

    service.aggregate_by_link('aZ3kP9qL', deadline=deadline)
    service.delete('aZ3kP9qL', deadline=deadline)
    service.aggregate_by_link('aZ3kP9qL')

    assert store.deadlines[:2] == [deadline, deadline]
    assert isinstance(store.deadlines[2], Deadline)
