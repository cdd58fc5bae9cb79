"""Retry with exponential backoff for transient storage errors."""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Backoff:
    """Doubling delay, capped at ``max_delay``, plus up to ``jitter`` of it at random."""

    base_delay: float = 0.2
    max_delay: float = 2.0
    jitter: float = 0.1

    def delays(self, retries: int) -> Iterator[float]:
        """Sleep before each of the ``retries - 1`` follow-up attempts."""
        delay = self.base_delay
        for _ in range(retries - 1):
            yield min(delay, self.max_delay) + random.uniform(0, delay * self.jitter)
            delay = min(delay * 2, self.max_delay)


async def retry_async(
    func: Callable[[], Awaitable[T]],
    retries: int = 3,
    backoff: Backoff = Backoff(),
    retry_on: Iterable[type[BaseException]] = (Exception,),
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
) -> T:
    """Await ``func`` up to ``retries`` times.

    Only ``retry_on`` exceptions are retried; once the attempts run out the
    last one propagates. ``on_retry(attempt, exc, delay)`` runs before each
    sleep.
    """
    retryable = tuple(retry_on)
    delays = backoff.delays(retries)
    attempt = 0
    while True:
        attempt += 1
        try:
            return await func()
        except retryable as exc:
            sleep_for = next(delays, None)
            if sleep_for is None:
                raise
            if on_retry:
                on_retry(attempt, exc, sleep_for)
            await asyncio.sleep(sleep_for)
