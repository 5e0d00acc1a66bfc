from __future__ import annotations

import asyncio
import sys

from loguru import logger

from .config import settings
from .errors import ReadinessError
from .logs import configure_logging
from .readiness import ensure_ready


def main() -> int:
    configure_logging(settings.log_level)
    try:
        asyncio.run(ensure_ready(settings))
    except ReadinessError as exc:
        logger.error("bootstrap aborted: {}", exc)
        return 1
    logger.info("topics {} and schema registry are ready", list(settings.topic_names))
    return 0


if __name__ == "__main__":
    sys.exit(main())
