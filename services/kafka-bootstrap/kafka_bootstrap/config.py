from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TopicSpec:
    name: str
    partitions: int
    replication_factor: int


@dataclass(frozen=True)
class RetryConfig:
    """Attempt ceiling and backoff shape shared by the bootstrap stages.

    ``initial_delay`` is in seconds.
    """

    max_attempts: int
    initial_delay: float
    multiplier: float

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {self.multiplier}")
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {self.initial_delay}")


@dataclass(frozen=True)
class Settings:
    service_name: str
    kafka_bootstrap_servers: str
    topic_names: tuple[str, ...]
    num_partitions: int
    replication_factor: int
    schema_registry_url: str
    retry_max_attempts: int
    retry_initial_delay_ms: int
    retry_multiplier: float
    http_timeout_seconds: float
    welcome_message: str
    log_level: str

    def topic_specs(self) -> list[TopicSpec]:
        return [
            TopicSpec(name=name, partitions=self.num_partitions, replication_factor=self.replication_factor)
            for name in self.topic_names
        ]

    def retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_attempts=self.retry_max_attempts,
            initial_delay=self.retry_initial_delay_ms / 1000,
            multiplier=self.retry_multiplier,
        )


def _split_names(raw: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def load_settings() -> Settings:
    loaded = Settings(
        service_name=os.getenv("SERVICE_NAME", "kafka-bootstrap"),
        kafka_bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:19092"),
        topic_names=_split_names(os.getenv("KAFKA_TOPIC_NAMES", "twitter-topic")),
        num_partitions=int(os.getenv("KAFKA_NUM_PARTITIONS", "3")),
        replication_factor=int(os.getenv("KAFKA_REPLICATION_FACTOR", "3")),
        schema_registry_url=os.getenv("KAFKA_SCHEMA_REGISTRY_URL", "http://localhost:8081"),
        retry_max_attempts=int(os.getenv("RETRY_MAX_ATTEMPTS", "3")),
        retry_initial_delay_ms=int(os.getenv("RETRY_INITIAL_DELAY_MS", "1000")),
        retry_multiplier=float(os.getenv("RETRY_MULTIPLIER", "2.0")),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "5.0")),
        welcome_message=os.getenv("WELCOME_MESSAGE", "Hello from twitter-to-kafka service"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
    # fail at load on a retry setup the gate could never use
    loaded.retry_config()
    return loaded


settings = load_settings()
