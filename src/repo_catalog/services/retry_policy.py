"""Retry policy — bounded attempts with exponential backoff.

The policy wraps any zero-argument coroutine factory.  Waiting happens only
between attempts, never after the last one, and the sleep function is
injected so tests can observe the schedule without real delays.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from repo_catalog.domain.exceptions import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration and execution of a retry loop.

    With the defaults an operation is attempted four times, sleeping 2, 4 and
    8 seconds in between (14 seconds in total before giving up).
    """

    max_attempts: int = 4
    initial_delay: float = 2.0
    multiplier: float = 2.0
    retry_on: tuple[type[BaseException], ...] = (Exception,)
    sleep: Sleep = field(default=asyncio.sleep, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.multiplier < 1:
            raise ValueError("initial_delay must be >= 0 and multiplier >= 1")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the zero-based *attempt* fails."""
        return self.initial_delay * (self.multiplier ** attempt)

    def total_delay(self) -> float:
        """Cumulative wait before the policy gives up."""
        return sum(self.delay_for(n) for n in range(self.max_attempts - 1))

    async def run(
        self, operation: Callable[[], Awaitable[T]], *, description: str = "operation"
    ) -> T:
        """Await ``operation()`` until it succeeds or attempts run out.

        Raises :class:`RetryExhaustedError` chained to the last failure.
        """
        last_exc: BaseException | None = None
        for attempt in range(self.max_attempts):
            try:
                return await operation()
            except self.retry_on as exc:
                last_exc = exc
                if attempt == self.max_attempts - 1:
                    break
                delay = self.delay_for(attempt)
                logger.warning(
                    "%s failed on attempt %d/%d (%s). Retrying in %.1fs...",
                    description,
                    attempt + 1,
                    self.max_attempts,
                    exc,
                    delay,
                )
                await self.sleep(delay)

        logger.error(
            "%s failed after %d attempts: %s", description, self.max_attempts, last_exc
        )
        raise RetryExhaustedError(
            f"{description} failed after {self.max_attempts} attempts: {last_exc}",
            attempts=self.max_attempts,
        ) from last_exc
