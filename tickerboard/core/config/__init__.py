"""Configuration management module."""

from tickerboard.core.config.settings import (
    ConfigManager,
    DisplayConfig,
    LoggingConfig,
    ProviderConfig,
    TickerboardConfig,
    load_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "TickerboardConfig",
    "ProviderConfig",
    "DisplayConfig",
    "LoggingConfig",
    "load_config",
    "load_config_from_env",
]
