"""Observability utilities: logging setup.

This module configures standard logging and `structlog` so applications
embedding the cache get consistent records from the ``expiring_cache``
loggers.
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog

from ..config.models import EnvSettings


def setup_logging(level: Optional[str] = None) -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str, optional
        Logging level name (e.g., "DEBUG", "INFO"). When omitted, the level is
        taken from ``EXPIRING_CACHE_LOG_LEVEL`` (default "INFO").

    Behavior
    --------
    - Initializes Python's logging with the requested level.
    - Configures structlog with a filtering bound logger at the same level.
    - Applies the level to the ``expiring_cache`` logger hierarchy.
    """
    if level is None:
        level = EnvSettings().log_level
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logging.getLogger("expiring_cache").setLevel(numeric_level)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
    )
