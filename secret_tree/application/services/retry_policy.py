"""
Application service: bounded retry for throttled secret store calls.

Business decisions owned here:
  - MAX_ATTEMPTS / DELAY_SECONDS: how long a caller waits out a rate limit.
  - Only RateLimited is retried; every other store error propagates at once.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from secret_tree.domain.errors import RateLimited, RateLimitExceeded

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class RetryPolicy:
    MAX_ATTEMPTS: int = 3
    DELAY_SECONDS: float = 1.05

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        delay: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            max_attempts: Total attempts including the first call.
            delay:        Fixed wait in seconds between attempts.
            sleep:        Awaitable sleep primitive (swapped out in tests).
        """
        self.max_attempts = max_attempts if max_attempts is not None else self.MAX_ATTEMPTS
        self.delay = delay if delay is not None else self.DELAY_SECONDS
        self._sleep = sleep
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    async def run(self, operation: Callable[[], Awaitable[T]], description: str = "") -> T:
        """Await *operation()* until it succeeds or the attempts run out.

        Raises:
            RateLimitExceeded: every attempt was throttled.
            Any non-throttling exception from *operation* on its first occurrence.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return await operation()
            except RateLimited as exc:
                if attempt >= self.max_attempts:
                    logger.warning(
                        "rate_limit_exhausted",
                        operation=description,
                        attempts=attempt,
                    )
                    raise RateLimitExceeded(
                        f"Rate limit exceeded for {description or 'secret store call'} "
                        f"after {attempt} attempts: {exc.message}",
                        attempts=attempt,
                    ) from exc
                logger.info(
                    "rate_limited_retry",
                    operation=description,
                    attempt=attempt,
                    delay=self.delay,
                )
                await self._sleep(self.delay)
