"""In-memory fakes of the ports, shared by the service tests."""

import threading
from concurrent.futures import Future

import pytest

from urlshortener.models import LinkModel, StatsModel
from urlshortener.dao.base import CacheBaseDAO, LinkBaseDAO, NotificationBaseDAO, StatsBaseDAO
from urlshortener.dao.exceptions import CacheDeleteError, CacheMissError, CachePutError, DataStoreError, LinkAlreadyExistsError, LinkNotFoundError


class InMemoryLinkDAO(LinkBaseDAO):
    def __init__(self):
        self.items: dict[str, LinkModel] = {}
        self.insert_calls = 0
        self.failing = False
        self._lock = threading.Lock()

    def all(self, **kwargs):
        if self.failing:
            raise DataStoreError('links store down')
        return list(self.items.values())

    def get(self, link_id, **kwargs):
        if self.failing:
            raise DataStoreError('links store down')
        link = self.items.get(link_id)
        if link is None or not link.original_url:
            raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
        return link

    def insert(self, link, **kwargs):
        with self._lock:
            self.insert_calls += 1
            if self.failing:
                raise DataStoreError('links store down')
            if link.id in self.items:
                raise LinkAlreadyExistsError(f"Link with id '{link.id}' already exists.")
            self.items[link.id] = link
        return self

    def delete(self, link_id, **kwargs):
        if self.failing:
            raise DataStoreError('links store down')
        self.items.pop(link_id, None)
        return self


class InMemoryCacheDAO(CacheBaseDAO):
    def __init__(self):
        self.entries: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.get_calls = 0
        self.failing = False

    def get(self, key):
        self.get_calls += 1
        if self.failing:
            raise CacheMissError('cache down')
        return self.entries.get(key)

    def set(self, key, value, ttl=None):
        if self.failing:
            raise CachePutError('cache down')
        self.entries[key] = value
        self.ttls[key] = ttl
        return self

    def delete(self, key):
        if self.failing:
            raise CacheDeleteError('cache down')
        self.entries.pop(key, None)
        return self

    def ping(self):
        return not self.failing


class InMemoryStatsDAO(StatsBaseDAO):
    def __init__(self):
        self.records: list[StatsModel] = []
        self.failing_links: set[str] = set()
        self._lock = threading.Lock()

    def insert(self, stats, **kwargs):
        with self._lock:
            self.records.append(stats)
        return self

    def by_link(self, link_id, **kwargs):
        if link_id in self.failing_links:
            raise DataStoreError(f'stats for {link_id} unavailable')
        return [record for record in self.records if record.link_id == link_id]

    def delete_by_link(self, link_id, **kwargs):
        if link_id in self.failing_links:
            raise DataStoreError(f'stats for {link_id} unavailable')
        with self._lock:
            kept = [record for record in self.records if record.link_id != link_id]
            deleted = len(self.records) - len(kept)
            self.records = kept
        return deleted


class StalledCacheDAO(InMemoryCacheDAO):
    """Cache whose reads hang until `release` is set (a blackholed Redis)."""

    def __init__(self, release: threading.Event):
        super().__init__()
        self.release = release

    def get(self, key):
        self.release.wait(timeout=5)
        return super().get(key)


class StalledLinkDAO(InMemoryLinkDAO):
    def __init__(self, release: threading.Event):
        super().__init__()
        self.release = release

    def get(self, link_id, **kwargs):
        self.release.wait(timeout=5)
        return super().get(link_id, **kwargs)


class RecordingNotifier(NotificationBaseDAO):
    def __init__(self):
        self.published: list[LinkModel] = []

    def publish_link_created(self, link):
        self.published.append(link)


class InlineDispatcher:
    """Runs submitted tasks immediately, recording names and swallowing errors like TaskDispatcher."""

    def __init__(self):
        self.submitted: list[str] = []
        self.failures: list[Exception] = []

    def submit(self, name, fn, *args, **kwargs):
        self.submitted.append(name)
        future = Future()
        try:
            fn(*args, **kwargs)
        except Exception as e:
            self.failures.append(e)
        future.set_result(None)
        return future


@pytest.fixture
def links():
    return InMemoryLinkDAO()


@pytest.fixture
def cache():
    return InMemoryCacheDAO()


@pytest.fixture
def stats():
    return InMemoryStatsDAO()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def dispatcher():
    return InlineDispatcher()


@pytest.fixture
def release():
    """Unblocks stalled fakes at teardown so no worker thread outlives its test."""
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture
def stalled_cache(release):
    return StalledCacheDAO(release)


@pytest.fixture
def stalled_links(release):
    return StalledLinkDAO(release)
