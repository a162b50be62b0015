"""Wall-clock bound for blocking store and cache calls.

Socket timeouts bound a single network attempt, but client retries and
paginated loops multiply them. DeadlineRunner runs each call on a small
thread pool and waits for it no longer than the request's Deadline allows.
A call that overruns keeps running in its worker until its own client
timeouts end it; the caller has already moved on.

Classes:
    DeadlineRunner:
        Executes calls on behalf of a request, bounded by its Deadline.

Example:
    >>> runner = DeadlineRunner(max_workers=4)
    >>> deadline = Deadline(4.0)
    >>> runner.call(deadline, links.get, 'aZ3kP9qL')
    LinkModel(id='aZ3kP9qL', ...)
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from collections.abc import Callable

from urlshortener.constants import Defaults
from urlshortener.dao.exceptions import RequestTimeoutError
from urlshortener.utils.deadline import Deadline


logger = logging.getLogger(__name__)


class DeadlineRunner:
    """Run blocking calls so that the caller waits at most until a deadline

    Attributes:
        max_workers (int):
            Calls that may run at once, including ones that already overran.
    """

    def __init__(self, max_workers: int = Defaults.MAX_WORKERS):
        if max_workers <= 0:
            raise ValueError(f'max_workers must be a positive integer (given value: {max_workers}).')
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='request')

    def call[T](self, deadline: Deadline, fn: Callable[..., T], *args, budget: float | None = None, **kwargs) -> T:
        """Return `fn(*args, **kwargs)`, waiting no longer than the deadline

        Args:
            deadline (Deadline):
                The request's deadline.
            fn (Callable):
                Blocking store or cache call.
            budget (float | None):
                Tighter bound for this call only, in seconds (e.g. a cache
                read that must leave time for the store fallback).

        Returns:
            Whatever `fn` returns. Exceptions raised by `fn` propagate as is.

        Raises:
            RequestTimeoutError:
                If the deadline (or budget) passes before `fn` returns.
        """
        timeout = deadline.remaining() if budget is None else min(budget, deadline.remaining())
        name = getattr(fn, '__qualname__', repr(fn))
        if timeout <= 0:
            raise RequestTimeoutError(f'No time left to call {name}.')

        future = self._executor.submit(fn, *args, **kwargs)
        done, _ = wait([future], timeout=timeout)
        if not done:
            future.cancel()
            logger.warning('%s did not return within %.2fs.', name, timeout, extra={'call': name})
            raise RequestTimeoutError(f'{name} did not return within {timeout:.2f}s.')
        return future.result()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
