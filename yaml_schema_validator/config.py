"""
Configuration for a validation run.

Settings come from three layers, later ones winning: built-in defaults, an
optional YAML config file, then command-line flags.  The config file keeps
everything under a top-level ``validator:`` mapping; keys may be written in
kebab-case or snake_case.

Usage:
    >>> from yaml_schema_validator.config import load_config
    >>> config = load_config("validator.yml")
    >>> config.validate()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigError
from .fetcher import DEFAULT_HTTP_TIMEOUT
from .output import ReportType

logger = logging.getLogger(__name__)

CONFIG_SECTION = "validator"


@dataclass
class ValidatorConfig:
    """Settings for one validation run.

    Attributes:
        files: Input files (``-`` reads standard input)
        schema: Schema path or URL used when ``schema_override`` is enabled
        schema_override: Use ``schema`` instead of each document's ``$schema``
        report_type: Output format
        report_file_name: Write the report here instead of stdout
        http_timeout: Timeout in seconds for remote schema downloads
        ignore_ssl_errors: Skip TLS certificate verification (opt-in only)
        color: Colour ok/invalid in the text report
        workers: Threads used to validate several files
        log_level: Root logging level
    """
    files: List[str] = field(default_factory=list)
    schema: Optional[str] = None
    schema_override: bool = False
    report_type: ReportType = ReportType.TEXT
    report_file_name: Optional[str] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    ignore_ssl_errors: bool = False
    color: bool = True
    workers: int = 1
    log_level: str = "WARNING"

    def validate(self) -> None:
        """Raise :class:`ConfigError` if the run cannot start."""
        if not self.files:
            raise ConfigError("At least one YAML/JSON file must be provided as a non-option argument")
        if self.schema_override and not self.schema:
            raise ConfigError("Schema path must be provided when schema override is enabled")
        if self.http_timeout <= 0:
            raise ConfigError(f"HTTP timeout must be positive, got {self.http_timeout}")
        if self.workers < 1:
            raise ConfigError(f"Workers must be at least 1, got {self.workers}")

    def merged(self, overrides: Dict[str, Any]) -> "ValidatorConfig":
        """Return a copy with every non-None entry of *overrides* applied."""
        return replace(self, **_coerce({k: v for k, v in overrides.items() if v is not None}))


_FIELD_NAMES = {f.name for f in fields(ValidatorConfig)}
_BOOL_FIELDS = ("schema_override", "ignore_ssl_errors", "color")
_BOOL_SPELLINGS = {
    "true": True, "yes": True, "on": True, "1": True,
    "false": False, "no": False, "off": False, "0": False,
}


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _BOOL_SPELLINGS:
        return _BOOL_SPELLINGS[value.strip().lower()]
    raise ConfigError(f"'{name}' must be true or false, got {value!r}")


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(values)
    for name in _BOOL_FIELDS:
        if name in out:
            out[name] = _as_bool(name, out[name])
    try:
        if "report_type" in out:
            out["report_type"] = ReportType.parse(out["report_type"])
        if "http_timeout" in out:
            out["http_timeout"] = float(out["http_timeout"])
        if "workers" in out:
            out["workers"] = int(out["workers"])
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc
    if "files" in out:
        files = out["files"]
        if isinstance(files, str):
            files = [files]
        if not isinstance(files, list):
            raise ConfigError(f"'files' must be a list of paths, got {type(files).__name__}")
        out["files"] = [str(f) for f in files]
    return out


def config_from_mapping(data: Dict[str, Any]) -> ValidatorConfig:
    """Build a config from a ``validator`` mapping (kebab or snake keys)."""
    values: Dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).replace("-", "_")
        if name not in _FIELD_NAMES:
            raise ConfigError(f"Unknown configuration key: {key}")
        values[name] = value
    return ValidatorConfig().merged(values)


def load_config(config_path: Optional[str] = None) -> ValidatorConfig:
    """Load settings from a YAML config file.

    Args:
        config_path: Path to the file; None returns the defaults.

    Returns:
        A populated :class:`ValidatorConfig`

    Raises:
        ConfigError: Missing file, invalid YAML, or unknown keys
    """
    if config_path is None:
        return ValidatorConfig()

    path = Path(config_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Error parsing configuration file {config_path}: {exc}") from exc

    if data is None:
        logger.warning(f"Configuration file {config_path} is empty, using defaults")
        return ValidatorConfig()
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' section must be a mapping")

    config = config_from_mapping(section)
    logger.info(f"Loaded configuration from {config_path}")
    return config
