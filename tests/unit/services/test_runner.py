"""Unit tests for the DeadlineRunner

Test coverage includes:

1. Results and exceptions of the call pass through unchanged
2. A call that outlives the deadline (or its budget) raises RequestTimeoutError
3. No call is started once the deadline has passed
"""

import time
import threading

import pytest

from urlshortener.dao.exceptions import DataStoreError, LinkNotFoundError, RequestTimeoutError
from urlshortener.services import DeadlineRunner
from urlshortener.utils.deadline import Deadline


@pytest.fixture
def runner():
    runner = DeadlineRunner(max_workers=2)
    yield runner
    runner.shutdown()


@pytest.fixture
def release():
    event = threading.Event()
    yield event
    event.set()


def test_call_returns_result(runner):
    assert runner.call(Deadline(1.0), lambda a, b=0: a + b, 2, b=3) == 5


def test_call_propagates_exceptions(runner):
    def _missing():
        raise LinkNotFoundError("Link with id 'aZ3kP9qL' not found.")

    with pytest.raises(LinkNotFoundError):
        runner.call(Deadline(1.0), _missing)


def test_call_times_out_at_deadline(runner, release):
    started = time.monotonic()

    with pytest.raises(RequestTimeoutError, match='did not return within'):
        runner.call(Deadline(0.2), release.wait, 5)

    assert time.monotonic() - started < 1.0


def test_budget_tighter_than_deadline(runner, release):
    started = time.monotonic()

    with pytest.raises(RequestTimeoutError):
        runner.call(Deadline(5.0), release.wait, 5, budget=0.1)

    assert time.monotonic() - started < 1.0


def test_timeout_is_a_data_store_error(runner, release):
    with pytest.raises(DataStoreError):
        runner.call(Deadline(0.1), release.wait, 5)


def test_expired_deadline_skips_call(runner):
    deadline = Deadline(0.01)
    time.sleep(0.02)
    called = []

    with pytest.raises(RequestTimeoutError, match='No time left'):
        runner.call(deadline, called.append, 1)

    assert called == []


def test_invalid_max_workers():
    with pytest.raises(ValueError):
        DeadlineRunner(max_workers=0)
