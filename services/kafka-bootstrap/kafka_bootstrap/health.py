from __future__ import annotations

from .readiness import GateState


def describe_state(state: GateState | None) -> str:
    return state.value if state is not None else "not_started"


def build_health_payload(service_name: str, state: GateState | None) -> dict[str, str]:
    return {"status": "ok", "service": service_name, "readiness": describe_state(state)}


def build_ready_payload(service_name: str) -> dict[str, str]:
    return {"status": GateState.READY.value, "service": service_name}
