"""Fire-and-forget execution of detached work.

Cache population, cache invalidation, stats recording and notifications must
never delay or fail the request that triggered them. They are handed to a
TaskDispatcher, which runs them on a small thread pool with their own
lifetime, logs their failures and never retries them.

Classes:
    TaskDispatcher:
        Bounded thread pool for detached tasks.

Example:
    >>> dispatcher = TaskDispatcher(max_workers=2, max_pending=8, task_timeout=5.0)
    >>> dispatcher.submit('cache_set', cache.set, 'aZ3kP9qL', 'https://example.com/page/123')
    <Future at 0x... state=running>
    >>> dispatcher.shutdown()
"""

import time
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from collections.abc import Callable
from typing import Any

from urlshortener.constants import Defaults, DETACHED_TASK_FAILED, DETACHED_TASK_REJECTED


logger = logging.getLogger(__name__)


class TaskDispatcher:
    """Bounded pool for detached tasks

    Submission never blocks: once `max_pending` tasks are in flight, further
    tasks are rejected and logged. A task's exception is logged with its
    traceback and discarded. Python threads cannot be interrupted, so
    `task_timeout` is enforced by the clients the task uses (socket timeouts);
    the dispatcher only reports tasks that ran past it and uses it as the
    default drain deadline.

    Attributes:
        task_timeout (float):
            Expected upper bound of a single task, in seconds.
        counters (dict[str, int]):
            Snapshot of submitted / succeeded / failed / rejected totals.
    """

    def __init__(
        self,
        max_workers: int = Defaults.MAX_WORKERS,
        max_pending: int = Defaults.MAX_PENDING_TASKS,
        task_timeout: float = Defaults.TASK_TIMEOUT,
    ):
        if max_workers <= 0 or max_pending <= 0:
            raise ValueError(f'max_workers and max_pending must be positive (given: {max_workers}, {max_pending}).')
        if task_timeout <= 0:
            raise ValueError(f'task_timeout must be positive (given: {task_timeout}).')

        self.task_timeout = task_timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='detached')
        self._slots = threading.BoundedSemaphore(max_pending)
        self._lock = threading.Lock()
        self._inflight: set[Future] = set()
        self._closed = False
        self._counters = {'submitted': 0, 'succeeded': 0, 'failed': 0, 'rejected': 0}

    @property
    def counters(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def _count(self, name: str) -> None:
        with self._lock:
            self._counters[name] += 1

    def _reject(self, name: str, reason: str) -> None:
        self._count('rejected')
        logger.warning(
            'Detached task %s rejected: %s.',
            name,
            reason,
            extra={'event': DETACHED_TASK_REJECTED, 'task': name},
        )

    def submit(self, name: str, fn: Callable[..., Any], *args, **kwargs) -> Future | None:
        """Schedule `fn(*args, **kwargs)` without waiting for it

        Args:
            name (str):
                Short task label used in logs (e.g. 'cache_set').
            fn (Callable):
                Work to run detached from the caller.

        Returns:
            Future | None: the task's future, or None if it was rejected.
        """
        if self._closed:
            self._reject(name, 'dispatcher is shut down')
            return None
        if not self._slots.acquire(blocking=False):
            self._reject(name, 'too many pending tasks')
            return None

        try:
            future = self._executor.submit(self._run, name, fn, args, kwargs)
        except RuntimeError:
            # executor shut down between the check above and submission
            self._slots.release()
            self._reject(name, 'dispatcher is shut down')
            return None

        with self._lock:
            self._counters['submitted'] += 1
            self._inflight.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._inflight.discard(future)

    def _run(self, name: str, fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        started = time.monotonic()
        try:
            fn(*args, **kwargs)
        except Exception as e:
            self._count('failed')
            logger.exception(
                'Detached task %s failed.',
                name,
                extra={'event': DETACHED_TASK_FAILED, 'task': name, 'error': e.__class__.__name__},
            )
        else:
            self._count('succeeded')
        finally:
            self._slots.release()
            elapsed = time.monotonic() - started
            if elapsed > self.task_timeout:
                logger.warning(
                    'Detached task %s overran its %.1fs deadline (took %.2fs).',
                    name,
                    self.task_timeout,
                    elapsed,
                    extra={'task': name},
                )

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight tasks, at most `timeout` seconds (default task_timeout)

        Returns:
            bool: True if nothing is left in flight.
        """
        with self._lock:
            pending = set(self._inflight)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=self.task_timeout if timeout is None else timeout)
        if not_done:
            logger.warning('%d detached task(s) still running after drain.', len(not_done))
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks, optionally drain, then stop the pool (idempotent)."""
        if self._closed:
            return
        self._closed = True
        if wait:
            self.drain()
        self._executor.shutdown(wait=False)
        logger.debug('Task dispatcher shut down.', extra=self.counters)
