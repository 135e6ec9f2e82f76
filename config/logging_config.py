"""Logging setup for the service entry point."""

import logging

import structlog

from config.settings import settings


def setup_logging(level: str | None = None) -> None:
    """Apply ``settings.log_level`` to stdlib logging and structlog's default pipeline."""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(log_level))
