from __future__ import annotations

import asyncio

import httpx
from loguru import logger

from .backoff import Sleep, delays
from .config import RetryConfig
from .errors import HealthError


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class RegistryHealthPoller:
    def __init__(self, client: httpx.AsyncClient, sleep: Sleep = asyncio.sleep) -> None:
        self._client = client
        self._sleep = sleep

    async def fetch_status(self, url: str) -> int:
        response = await self._client.get(url)
        return response.status_code

    async def wait_until_healthy(self, url: str, cfg: RetryConfig) -> None:
        """Poll ``url`` until it answers 2xx.

        Transport failures count as a non-2xx answer. Raises ``HealthError``
        after ``cfg.max_attempts + 1`` tries, chained to the last transport
        failure if there was one.
        """
        waits = delays(cfg)
        last_error: httpx.HTTPError | None = None
        attempt = 0
        while True:
            attempt += 1
            try:
                status_code = await self.fetch_status(url)
            except httpx.HTTPError as exc:
                last_error = exc
                logger.warning("schema registry at {} unreachable: {}", url, exc)
            else:
                if is_success(status_code):
                    logger.info("schema registry at {} is up", url)
                    return
                logger.warning("schema registry at {} answered {}", url, status_code)
            delay = next(waits, None)
            if delay is None:
                logger.error("schema registry at {} not healthy after {} attempts", url, attempt)
                raise HealthError(f"max retries exceeded checking schema registry at {url}") from last_error
            logger.info("schema registry not ready, attempt {}/{}, retrying in {:.3f}s", attempt, cfg.max_attempts, delay)
            await self._sleep(delay)
