"""Logging utilities for monitoring and debugging."""

from tickerboard.core.logging.config import LogConfig
from tickerboard.core.logging.logger import (
    configure_logging,
    current_cycle_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "configure_logging",
    "current_cycle_id",
    "get_logger",
    "log_context",
    "logger",
]
