from pathlib import Path
import sys
from typing import Any

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

import kafka_bootstrap.__main__ as entry
from kafka_bootstrap import main
from kafka_bootstrap.errors import HealthError, ProvisionError
from kafka_bootstrap.readiness import GateState


def test_ready_after_gate_passes(monkeypatch: Any) -> None:
    async def fake_ensure_ready(_settings: Any) -> GateState:
        return GateState.READY

    monkeypatch.setattr(main, "ensure_ready", fake_ensure_ready)

    with TestClient(main.app) as client:
        ready = client.get("/ready")
        health = client.get("/health")

    assert ready.status_code == 200
    assert ready.json() == {"status": "ready", "service": main.settings.service_name}
    assert health.json()["readiness"] == "ready"


def test_ready_reports_503_before_startup() -> None:
    main.app.state.readiness = None
    client = TestClient(main.app)

    response = client.get("/ready")

    assert response.status_code == 503
    assert "not_started" in response.json()["detail"]


def test_gate_failure_aborts_startup(monkeypatch: Any) -> None:
    async def failing_ensure_ready(_settings: Any) -> GateState:
        raise ProvisionError("max retries exceeded creating topics")

    monkeypatch.setattr(main, "ensure_ready", failing_ensure_ready)

    with pytest.raises(ProvisionError):
        with TestClient(main.app):
            pass

    assert main.app.state.readiness is GateState.FAILED


def test_cli_exits_non_zero_on_failure(monkeypatch: Any) -> None:
    async def failing_ensure_ready(_settings: Any) -> GateState:
        raise HealthError("max retries exceeded checking schema registry")

    monkeypatch.setattr(entry, "ensure_ready", failing_ensure_ready)

    assert entry.main() == 1


def test_cli_exits_zero_when_ready(monkeypatch: Any) -> None:
    async def fake_ensure_ready(_settings: Any) -> GateState:
        return GateState.READY

    monkeypatch.setattr(entry, "ensure_ready", fake_ensure_ready)

    assert entry.main() == 0
