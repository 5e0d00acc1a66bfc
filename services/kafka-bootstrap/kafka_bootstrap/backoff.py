from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from typing import Any

from .config import RetryConfig

Sleep = Callable[[float], Awaitable[Any]]


def next_delay(previous_delay: float, multiplier: float) -> float:
    return previous_delay * multiplier


def delays(cfg: RetryConfig) -> Iterator[float]:
    """Yield ``d, d*k, d*k**2, ...`` for ``cfg.max_attempts`` terms."""
    delay = cfg.initial_delay
    for _ in range(cfg.max_attempts):
        yield delay
        delay = next_delay(delay, cfg.multiplier)
