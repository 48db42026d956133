#!/usr/bin/env python3
"""
Gate configuration.

Values are layered, later sources overriding earlier ones:

1. built-in defaults
2. the `[tool.jsgate]` table of pyproject.toml (or an explicit config file)
3. JSGATE_* environment variables
4. command-line flags (applied by the caller via `GateConfig.override`)
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from jsgate.exceptions import ConfigError


logger = logging.getLogger(__name__)

CONFIG_TABLE = ("tool", "jsgate")

ENV_OUTPUT_FORMAT = "JSGATE_OUTPUT_FORMAT"
ENV_JOBS = "JSGATE_JOBS"
ENV_TIMEOUT = "JSGATE_TIMEOUT"
ENV_ESLINT = "JSGATE_ESLINT"


def _default_jobs() -> int:
    return os.cpu_count() or 1


@dataclass
class GateConfig:
    """Settings for one gate run."""

    output_format: str = ""
    jobs: int = field(default_factory=_default_jobs)
    timeout: Optional[float] = None
    eslint: str = "eslint"
    eslint_args: list[str] = field(default_factory=lambda: list[str]())
    eslint_timeout: float = 60.0
    run_fallback: bool = True
    allow_eval: bool = True
    ignore_patterns: list[str] = field(default_factory=lambda: list[str]())

    def override(self, **values: Any) -> "GateConfig":
        """Return a copy with every non-None value applied."""
        changes = {key: value for key, value in values.items() if value is not None}
        return replace(self, **changes)


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert a raw value to the type of the field's default."""
    if name == "timeout":
        if value is None or value == "":
            return None
        return _positive_float(name, value)
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("1", "true", "yes", "on"):
            return True
        if isinstance(value, str) and value.lower() in ("0", "false", "no", "off"):
            return False
        raise ConfigError(f"{name} must be a boolean, got {value!r}")
    if isinstance(default, int):
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{name} must be an integer, got {value!r}") from e
        if number < 1:
            raise ConfigError(f"{name} must be at least 1, got {number}")
        return number
    if isinstance(default, float):
        return _positive_float(name, value)
    if isinstance(default, list):
        if isinstance(value, str):
            return value.split()
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return list(value)
        raise ConfigError(f"{name} must be a list of strings, got {value!r}")
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be a string, got {value!r}")
    return value


def _positive_float(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}")
    return number


def apply_values(config: GateConfig, values: Mapping[str, Any], source: str) -> GateConfig:
    """
    Apply raw key/value settings to a config.

    Invalid values are logged and skipped so a bad setting never blocks a check-in.

    Args:
        config: Config to start from
        values: Raw settings (keys may use '-' or '_')
        source: Where the values came from, for log messages

    Returns:
        New config with the valid values applied
    """
    known = {f.name: getattr(config, f.name) for f in fields(config)}
    changes: dict[str, Any] = {}
    for raw_key, value in values.items():
        key = raw_key.replace("-", "_")
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{raw_key}' in {source}")
            continue
        try:
            changes[key] = _coerce(key, value, known[key])
        except ConfigError as e:
            logger.warning(f"{e.message} in {source} - using {known[key]!r}")
    return replace(config, **changes)


def load_toml_table(path: Path) -> dict[str, Any]:
    """Return the [tool.jsgate] table from a TOML file, or {} if absent."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Could not read configuration from {path}: {e}")
        return {}

    table: Any = data
    for key in CONFIG_TABLE:
        table = table.get(key, {}) if isinstance(table, dict) else {}
    if not isinstance(table, dict):
        logger.warning(f"[{'.'.join(CONFIG_TABLE)}] in {path} is not a table")
        return {}
    return table


def env_values(environ: Mapping[str, str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for env_name, key in (
        (ENV_OUTPUT_FORMAT, "output_format"),
        (ENV_JOBS, "jobs"),
        (ENV_TIMEOUT, "timeout"),
        (ENV_ESLINT, "eslint"),
    ):
        if environ.get(env_name):
            values[key] = environ[env_name]
    return values


def load_config(
    root: Optional[Path] = None,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GateConfig:
    """
    Build the configuration for a run.

    Args:
        root: Repository root holding pyproject.toml (defaults to cwd)
        config_file: Explicit TOML file, used instead of pyproject.toml
        environ: Environment mapping (defaults to os.environ)
    """
    config = GateConfig()

    toml_path = config_file or (root or Path.cwd()) / "pyproject.toml"
    table = load_toml_table(toml_path)
    if table:
        config = apply_values(config, table, str(toml_path))

    env = env_values(os.environ if environ is None else environ)
    if env:
        config = apply_values(config, env, "environment")

    return config
