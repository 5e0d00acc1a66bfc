from pathlib import Path
import sys
from typing import Any

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from kafka_bootstrap.config import RetryConfig, TopicSpec, load_settings


def test_load_settings_reads_environment(monkeypatch: Any) -> None:
    monkeypatch.setenv("KAFKA_TOPIC_NAMES", "orders, users,,")
    monkeypatch.setenv("KAFKA_NUM_PARTITIONS", "6")
    monkeypatch.setenv("KAFKA_REPLICATION_FACTOR", "1")
    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("RETRY_INITIAL_DELAY_MS", "250")
    monkeypatch.setenv("RETRY_MULTIPLIER", "3")
    monkeypatch.setenv("KAFKA_SCHEMA_REGISTRY_URL", "http://registry:8081")

    settings = load_settings()

    assert settings.topic_names == ("orders", "users")
    assert settings.schema_registry_url == "http://registry:8081"
    assert settings.topic_specs() == [
        TopicSpec(name="orders", partitions=6, replication_factor=1),
        TopicSpec(name="users", partitions=6, replication_factor=1),
    ]
    assert settings.retry_config() == RetryConfig(max_attempts=5, initial_delay=0.25, multiplier=3.0)


def test_load_settings_defaults(monkeypatch: Any) -> None:
    for name in ("KAFKA_TOPIC_NAMES", "RETRY_MAX_ATTEMPTS", "RETRY_INITIAL_DELAY_MS", "RETRY_MULTIPLIER"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.topic_names == ("twitter-topic",)
    assert settings.retry_config() == RetryConfig(max_attempts=3, initial_delay=1.0, multiplier=2.0)


@pytest.mark.parametrize(
    ("variable", "value"),
    [
        ("RETRY_MAX_ATTEMPTS", "0"),
        ("RETRY_MULTIPLIER", "0.5"),
        ("RETRY_INITIAL_DELAY_MS", "-100"),
    ],
)
def test_load_settings_rejects_invalid_retry_values(monkeypatch: Any, variable: str, value: str) -> None:
    monkeypatch.setenv(variable, value)

    with pytest.raises(ValueError):
        load_settings()
