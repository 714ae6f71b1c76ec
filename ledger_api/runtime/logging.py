"""Logging setup for the ledger API process.

Every module logs through ``get_logger(__name__)``, which places it under the
``ledger_api`` namespace. The namespace gets one stderr handler, so ledger
writes, report failures and config problems share a single stream with the
uvicorn access log.

Level resolution, highest priority first:
    1. ``set_log_level`` (the CLI ``--log-level`` flag or the ``log_level``
       config key)
    2. ``LEDGER_API_LOG_LEVEL`` environment variable
    3. ``DEFAULT_LOG_LEVEL`` (INFO)
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO
LOG_LEVEL_ENV_VAR = "LEDGER_API_LOG_LEVEL"
LOGGER_NAMESPACE = "ledger_api"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
# Line numbers help trace which splice or report call produced a message.
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: logging.Handler | None = None


def parse_log_level(name: str) -> int | None:
    """Map a level name such as ``"debug"`` to its ``logging`` constant."""
    return LEVEL_NAMES.get(name.strip().upper())


def _formatter(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> logging.Logger:
    """Attach the stderr handler to the ``ledger_api`` namespace once.

    Later calls only return the namespace logger; use :func:`set_log_level`
    to change the level afterwards.
    """
    global _handler

    namespace = logging.getLogger(LOGGER_NAMESPACE)
    if _handler is not None:
        return namespace

    if level is None:
        level = parse_log_level(os.environ.get(LOG_LEVEL_ENV_VAR, "")) or DEFAULT_LOG_LEVEL

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(_formatter(level))
    namespace.setLevel(level)
    namespace.addHandler(_handler)
    namespace.propagate = False
    return namespace


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, nested under ``ledger_api``."""
    configure_logging()
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int | str) -> None:
    """Change the namespace level at runtime; accepts a constant or a name.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    if isinstance(level, str):
        parsed = parse_log_level(level)
        if parsed is None:
            raise ValueError(f"Unknown log level: {level!r}")
        level = parsed

    namespace = configure_logging()
    namespace.setLevel(level)
    if _handler is not None:
        _handler.setFormatter(_formatter(level))
