"""Bounded retry with exponential backoff around one async operation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from config.settings import Settings

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]
RetryHook = Callable[[int, float, BaseException], None]


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    backoff_base: float = 1.0  # seconds

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number attempt + 1 (1s, 2s, 4s, ...)."""
        return self.backoff_base * (2 ** attempt)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(max_retries=Settings.MAX_RETRIES, backoff_base=Settings.BACKOFF_BASE_S)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    sleep: SleepFn = asyncio.sleep,
    on_retry: Optional[RetryHook] = None,
) -> T:
    """
    Run operation, retrying every failure until max_retries is reached.

    The last error is re-raised unchanged. on_retry(attempt, delay, error) is
    called before each backoff sleep.
    """
    policy = policy or RetryPolicy()
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= policy.max_retries:
                raise
            delay = policy.delay_for(attempt)
            if on_retry:
                on_retry(attempt + 1, delay, e)
            await sleep(delay)
            attempt += 1
