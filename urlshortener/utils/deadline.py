"""Request-scoped deadline.

A Deadline is created once per request and handed down to every store and
cache call on the request's path, so the calls share one time budget instead
of each getting a fresh timeout.

Example:
    >>> deadline = Deadline(4.0)
    >>> deadline.remaining()
    3.9999...
    >>> deadline.expired
    False
"""

import time


class Deadline:
    """Point in (monotonic) time after which a request gives up

    Attributes:
        seconds (float):
            Budget the deadline was created with.
        expires_at (float):
            `time.monotonic()` value at which the budget runs out.
    """

    def __init__(self, seconds: float):
        if seconds <= 0:
            raise ValueError(f'Deadline must be a positive number of seconds (given value: {seconds}).')
        self.seconds = seconds
        self.expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def __repr__(self) -> str:
        return f'<Deadline {self.remaining():.2f}s of {self.seconds:.2f}s left>'
