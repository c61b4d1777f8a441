"""Bounded retry of whole repository operations after optimistic-concurrency conflicts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from common.config.config import CMS_COMMIT_MAX_ATTEMPTS, CMS_COMMIT_RETRY_BACKOFF
from common.exception.errors import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRY_DELAY_SECONDS = 5.0


@dataclass(frozen=True)
class RetryPolicy:
    """How often a conflicting operation is started over.

    max_attempts counts the first try; 1 means no retry.
    """

    max_attempts: int = 1
    initial_delay: float = 0.5
    max_delay: float = MAX_RETRY_DELAY_SECONDS

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0:
            raise ValueError("initial_delay cannot be negative")

    @classmethod
    def from_config(cls) -> "RetryPolicy":
        return cls(max_attempts=CMS_COMMIT_MAX_ATTEMPTS, initial_delay=CMS_COMMIT_RETRY_BACKOFF)

    def next_delay(self, current_delay: float) -> float:
        """Exponential backoff, capped at max_delay."""
        return min(current_delay * 1.5, self.max_delay)


NO_RETRY = RetryPolicy(max_attempts=1)


async def retry_on_conflict(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = NO_RETRY,
    description: str = "operation",
) -> T:
    """
    Run operation, starting it over on ConflictError.

    operation must re-read whatever state it depends on every time it is
    called; nothing is carried over from a failed attempt. Other errors
    propagate immediately.

    Raises:
        ConflictError: If the last allowed attempt still conflicts
    """
    delay = policy.initial_delay
    attempt = 1
    while True:
        try:
            return await operation()
        except ConflictError as e:
            if attempt >= policy.max_attempts:
                if policy.max_attempts > 1:
                    logger.warning(f"{description} still conflicting after {attempt} attempts")
                raise
            logger.info(
                f"{description} conflicted (attempt {attempt}/{policy.max_attempts}), "
                f"retrying in {delay:.2f}s: {e}"
            )
            await asyncio.sleep(delay)
            delay = policy.next_delay(delay)
            attempt += 1
