from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

T = TypeVar("T")


class RetriesExhausted(Exception):
    def __init__(self, description: str, attempts: int, last_error: Exception | None) -> None:
        super().__init__(f"{description}: gave up after {attempts} attempts ({last_error})")
        self.attempts = attempts
        self.last_error = last_error


class BoundedRetry:
    """

    runs an operation up to ``max_attempts`` times, back to back

    meant for broker calls that fail fast; polling loops do their own backoff

    """

    def __init__(self, max_attempts: int) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts

    async def run(self, operation: Callable[[int], Awaitable[T]], description: str) -> T:
        last_error: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation(attempt)
            except Exception as exc:
                last_error = exc
                logger.warning("{} failed on attempt {}/{}: {}", description, attempt, self.max_attempts, exc)
        raise RetriesExhausted(description, self.max_attempts, last_error)
