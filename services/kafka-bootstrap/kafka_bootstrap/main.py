from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from loguru import logger

from .config import settings
from .health import build_health_payload, build_ready_payload, describe_state
from .logs import configure_logging
from .readiness import GateState, ensure_ready


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.log_level)
    logger.info("{} started", settings.service_name)
    logger.info(settings.welcome_message)
    app.state.readiness = GateState.PROVISIONING
    try:
        app.state.readiness = await ensure_ready(settings)
    except BaseException:
        app.state.readiness = GateState.FAILED
        raise
    yield


app = FastAPI(title="Kafka Bootstrap Service", lifespan=lifespan)


@app.get("/health")
async def health() -> dict[str, str]:
    return build_health_payload(settings.service_name, getattr(app.state, "readiness", None))


@app.get("/ready")
async def ready() -> dict[str, str]:
    state = getattr(app.state, "readiness", None)
    if state is not GateState.READY:
        raise HTTPException(status_code=503, detail=f"readiness gate is {describe_state(state)}")
    return build_ready_payload(settings.service_name)
