"""Runtime configuration for the ledger API server.

Values come from a TOML file and may be overridden by environment variables:

    port = 3001
    ledger_file = "/var/www/ledger/data/demo.ledger"
    ledger_cmd = "ledger"
    update_reports_script = "/var/www/ledger/update-reports.sh"
    log_level = "INFO"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ledger_api.runtime.logging import get_logger, parse_log_level

logger = get_logger(__name__)

DEFAULT_CONFIG_NAME = "ledger_api.toml"
CONFIG_ENV_VAR = "LEDGER_API_CONFIG"

# Environment variable -> config key
ENV_OVERRIDES = {
    "LEDGER_API_PORT": "port",
    "LEDGER_FILE": "ledger_file",
    "LEDGER_CMD": "ledger_cmd",
}


class ConfigError(ValueError):
    """Raised when the configuration file cannot be used."""


@dataclass(frozen=True)
class ApiConfig:
    """Settings shared by the HTTP server and the CLI."""

    host: str = "0.0.0.0"
    port: int = 3001
    ledger_file: Path = Path("/var/www/ledger/data/demo.ledger")
    ledger_cmd: str = "ledger"
    update_reports_script: Path = Path("/var/www/ledger/update-reports.sh")
    log_level: str | None = None

    @property
    def backup_file(self) -> Path:
        """Recovery copy written before every overwrite of the ledger."""
        return self.ledger_file.with_name(self.ledger_file.name + ".bak")


def _coerce(key: str, value: Any) -> Any:
    if key == "port":
        if isinstance(value, bool):
            raise ConfigError(f"Invalid port: {value!r}")
        try:
            port = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid port: {value!r}") from exc
        if not 0 < port < 65536:
            raise ConfigError(f"Port out of range: {port}")
        return port
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Config value '{key}' must be a non-empty string")
    if key == "log_level":
        if parse_log_level(value) is None:
            raise ConfigError(f"Unknown log level: {value!r}")
        return value.strip().upper()
    if key in {"ledger_file", "update_reports_script"}:
        return Path(value).expanduser()
    return value


def config_from_mapping(data: Mapping[str, Any], base: ApiConfig | None = None) -> ApiConfig:
    """Build a config from raw key/value pairs on top of ``base`` (defaults)."""
    config = base or ApiConfig()
    known = set(ApiConfig.__dataclass_fields__)
    updates: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown config key: %s", key)
            continue
        updates[key] = _coerce(key, value)
    return replace(config, **updates)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Error parsing config file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not open config file {path}: {exc}") from exc


def load_config(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ApiConfig:
    """Load configuration from TOML, then apply environment overrides.

    Args:
        config_path: Explicit TOML path. Must exist when given. If None, uses
            $LEDGER_API_CONFIG or ./ledger_api.toml when present, else defaults.
        environ: Environment mapping (defaults to os.environ).

    Raises:
        ConfigError: If the file is missing (explicit path only), unreadable,
            or holds invalid values.
    """
    env = os.environ if environ is None else environ

    explicit = config_path is not None or bool(env.get(CONFIG_ENV_VAR))
    if config_path is not None:
        path = Path(config_path)
    else:
        path = Path(env.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_NAME)

    config = ApiConfig()
    if path.exists():
        config = config_from_mapping(_read_toml(path), base=config)
        logger.debug("Loaded config from %s", path)
    elif explicit:
        raise ConfigError(f"Could not open config file: {path}")

    overrides = {key: env[name] for name, key in ENV_OVERRIDES.items() if env.get(name)}
    if overrides:
        config = config_from_mapping(overrides, base=config)
    return config
