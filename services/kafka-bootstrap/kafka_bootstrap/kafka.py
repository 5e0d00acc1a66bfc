from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from aiokafka.admin import AIOKafkaAdminClient, NewTopic
from aiokafka.errors import TopicAlreadyExistsError, for_code
from loguru import logger

from .backoff import Sleep, delays
from .config import RetryConfig, TopicSpec
from .errors import ConfirmError, ProvisionError
from .retry import BoundedRetry, RetriesExhausted


class TopicAdmin(Protocol):
    async def create_topics(self, new_topics: list[NewTopic]) -> Any: ...

    async def list_topics(self) -> list[str] | None: ...


class KafkaTopicAdmin:
    """AIOKafkaAdminClient that connects on first use, so connect failures go through the retries."""

    def __init__(self, bootstrap_servers: str) -> None:
        self._client = AIOKafkaAdminClient(bootstrap_servers=bootstrap_servers)
        self._started = False

    async def _ensure_started(self) -> AIOKafkaAdminClient:
        if not self._started:
            await self._client.start()
            self._started = True
        return self._client

    async def create_topics(self, new_topics: list[NewTopic]) -> Any:
        client = await self._ensure_started()
        return await client.create_topics(new_topics=new_topics)

    async def list_topics(self) -> list[str] | None:
        client = await self._ensure_started()
        return await client.list_topics()

    async def close(self) -> None:
        if self._started:
            await self._client.close()
            self._started = False


def build_new_topics(specs: Iterable[TopicSpec]) -> list[NewTopic]:
    return [
        NewTopic(name=spec.name, num_partitions=spec.partitions, replication_factor=spec.replication_factor)
        for spec in specs
    ]


def _log_topic_errors(response: Any) -> None:
    # v0 entries are (topic, code), later versions append a message
    for topic, error_code, *rest in getattr(response, "topic_errors", None) or ():
        if error_code == 0:
            continue
        error = for_code(error_code)
        if error is TopicAlreadyExistsError:
            logger.info("topic {} already exists", topic)
        else:
            logger.warning("broker reported {} for topic {}: {}", error.__name__, topic, rest[0] if rest else "")


class TopicProvisioner:
    def __init__(self, admin: TopicAdmin, retry: BoundedRetry) -> None:
        self._admin = admin
        self._retry = retry

    async def create_topics(self, specs: Sequence[TopicSpec]) -> None:
        """Request creation of every topic in one batch.

        Raises ``ProvisionError`` once the submission failed ``max_attempts`` times.
        """
        new_topics = build_new_topics(specs)

        async def submit(attempt: int) -> None:
            logger.info("creating {} topics, attempt {}", len(new_topics), attempt)
            try:
                response = await self._admin.create_topics(new_topics)
            except TopicAlreadyExistsError:
                logger.info("topics already exist, nothing to create")
                return
            _log_topic_errors(response)

        try:
            await self._retry.run(submit, "creating topics")
        except RetriesExhausted as exc:
            logger.error("giving up creating topics {}", [spec.name for spec in specs])
            raise ProvisionError(
                f"max retries exceeded creating topics ({exc.attempts} attempts)"
            ) from exc.last_error


class TopicConfirmationPoller:
    def __init__(self, admin: TopicAdmin, retry: BoundedRetry, sleep: Sleep = asyncio.sleep) -> None:
        self._admin = admin
        self._retry = retry
        self._sleep = sleep

    async def fetch_topics(self) -> frozenset[str]:
        async def read(attempt: int) -> frozenset[str]:
            logger.info("reading topics, attempt {}", attempt)
            names = await self._admin.list_topics()
            for name in names or ():
                logger.debug("read topic with name {}", name)
            return frozenset(names or ())

        try:
            return await self._retry.run(read, "reading topics")
        except RetriesExhausted as exc:
            raise ConfirmError(f"max retries exceeded reading topics ({exc.attempts} attempts)") from exc.last_error

    async def wait_until_topics_exist(self, names: Sequence[str], cfg: RetryConfig) -> None:
        """Block until every name shows up in a topic listing.

        The attempt counter is shared by all names, so ``cfg.max_attempts``
        bounds the whole wait. Raises ``ConfirmError`` after
        ``cfg.max_attempts + 1`` failed checks.
        """
        topics = await self.fetch_topics()
        waits = delays(cfg)
        attempt = 1
        for name in names:
            while name not in topics:
                delay = next(waits, None)
                if delay is None:
                    logger.error("topic {} still missing after {} attempts", name, cfg.max_attempts)
                    raise ConfirmError(f"max retries exceeded waiting for topic {name!r}")
                logger.info(
                    "topic {} not there yet, attempt {}/{}, retrying in {:.3f}s", name, attempt, cfg.max_attempts, delay
                )
                attempt += 1
                await self._sleep(delay)
                topics = await self.fetch_topics()
            logger.info("topic {} confirmed", name)
