"""structlog setup for processes embedding the scalar core.

Modules only call ``structlog.get_logger()``; nothing is configured on
import. Entry points call ``configure_logging`` once.
"""

from __future__ import annotations

import logging

import structlog

from substreams.config import ScalarConfig


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog processors and level filtering.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines instead of the console renderer
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def configure_from_config(config: ScalarConfig) -> None:
    """Configure logging from a ScalarConfig (e.g. ``ScalarConfig.from_env()``)."""
    configure_logging(config.log_level, config.log_json)
