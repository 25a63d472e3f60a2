"""
Structured Logging Setup

Configures structlog once at process start. Event names are snake_case
strings with key/value context, e.g. ``logger.info("batch_created", batch_id=...)``.
"""

import logging
import sys
from typing import Optional

import structlog

from ..config import PlatformConfig, get_config


def configure_logging(platform_config: Optional[PlatformConfig] = None) -> None:
    """
    Configure stdlib logging and structlog processors.

    Local environments get a human-readable console renderer; every other
    environment emits one JSON object per line.

    Args:
        platform_config: Optional config (defaults to the cached platform config)
    """
    platform_config = platform_config or get_config()
    level = getattr(logging, platform_config.log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    # Reduce noise from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    if platform_config.is_local:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
