from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from enum import Enum

import httpx
from loguru import logger

from .config import RetryConfig, Settings, TopicSpec
from .errors import ReadinessError
from .http_clients import RegistryHealthPoller
from .kafka import KafkaTopicAdmin, TopicConfirmationPoller, TopicProvisioner
from .retry import BoundedRetry


class GateState(str, Enum):
    PROVISIONING = "provisioning"
    CONFIRMING_TOPICS = "confirming_topics"
    CHECKING_REGISTRY = "checking_registry"
    READY = "ready"
    FAILED = "failed"


class ReadinessGate:
    """Create topics, confirm they exist, then wait for the schema registry.

    Any stage error leaves the gate in ``FAILED`` and is re-raised to the
    caller, which is expected to stop the process.
    """

    def __init__(
        self,
        provisioner: TopicProvisioner,
        confirmer: TopicConfirmationPoller,
        registry: RegistryHealthPoller,
        topics: Sequence[TopicSpec],
        schema_registry_url: str,
        retry_config: RetryConfig,
    ) -> None:
        self._provisioner = provisioner
        self._confirmer = confirmer
        self._registry = registry
        self._topics = tuple(topics)
        self._schema_registry_url = schema_registry_url
        self._retry_config = retry_config
        self.state = GateState.PROVISIONING

    def _enter(self, state: GateState) -> None:
        logger.info("readiness gate: {} -> {}", self.state.value, state.value)
        self.state = state

    async def ensure_ready(self) -> None:
        try:
            self.state = GateState.PROVISIONING
            logger.info("readiness gate: provisioning {} topics", len(self._topics))
            await self._provisioner.create_topics(self._topics)
            self._enter(GateState.CONFIRMING_TOPICS)
            await self._confirmer.wait_until_topics_exist([topic.name for topic in self._topics], self._retry_config)
            self._enter(GateState.CHECKING_REGISTRY)
            await self._registry.wait_until_healthy(self._schema_registry_url, self._retry_config)
        except BaseException as exc:
            if isinstance(exc, ReadinessError):
                logger.error("readiness gate failed while {}: {}", exc.stage, exc)
            else:
                logger.error("readiness gate aborted while {}: {!r}", self.state.value, exc)
            self.state = GateState.FAILED
            raise
        self._enter(GateState.READY)


@asynccontextmanager
async def open_gate(settings: Settings) -> AsyncIterator[ReadinessGate]:
    retry_config = settings.retry_config()
    retry = BoundedRetry(retry_config.max_attempts)
    admin = KafkaTopicAdmin(settings.kafka_bootstrap_servers)
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
            yield ReadinessGate(
                provisioner=TopicProvisioner(admin, retry),
                confirmer=TopicConfirmationPoller(admin, retry),
                registry=RegistryHealthPoller(client),
                topics=settings.topic_specs(),
                schema_registry_url=settings.schema_registry_url,
                retry_config=retry_config,
            )
    finally:
        await admin.close()


async def ensure_ready(settings: Settings) -> GateState:
    async with open_gate(settings) as gate:
        await gate.ensure_ready()
        return gate.state
