"""Runtime infrastructure for the ledger API.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Configuration loading via load_config(), ApiConfig

The FastAPI application lives in ``ledger_api.runtime.server`` and is imported
explicitly by the CLI so that importing this package stays cheap.

Usage:
    from ledger_api.runtime import get_logger, load_config

    logger = get_logger(__name__)
    config = load_config()
    print(config.ledger_file, config.port)
"""

from ledger_api.runtime.config import (
    DEFAULT_CONFIG_NAME,
    ApiConfig,
    ConfigError,
    config_from_mapping,
    load_config,
)
from ledger_api.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LEVEL_NAMES,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "LEVEL_NAMES",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Config
    "ApiConfig",
    "ConfigError",
    "DEFAULT_CONFIG_NAME",
    "config_from_mapping",
    "load_config",
]
