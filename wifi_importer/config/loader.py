from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default: config/import.yml)
- Validate against the packaged JSON schema (config_schema.json)
- Apply defaults for missing keys
- Apply environment overrides (WIFI_IMPORTER_BACKEND / WIFI_IMPORTER_ENCODING)
"""

__all__ = [
    "BACKENDS",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "ImportConfig",
    "NmcliConfig",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

BACKENDS = ("mock", "nmcli")

ENV_BACKEND = "WIFI_IMPORTER_BACKEND"
ENV_ENCODING = "WIFI_IMPORTER_ENCODING"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class NmcliConfig:
    binary: str = "nmcli"
    connection_prefix: str = ""


@dataclass(frozen=True)
class ImportConfig:
    csv_file: str | None = None  # CLI 引数が優先
    encoding: str = "utf-8"
    backend: str = "mock"
    error_log_dir: str = "./logs"
    nmcli: NmcliConfig = field(default_factory=NmcliConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or the data violates it
            (unknown keys, wrong types, unknown backend).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _apply_env_overrides(cfg: ImportConfig) -> ImportConfig:
    backend = os.getenv(ENV_BACKEND) or cfg.backend
    if backend not in BACKENDS:
        raise ConfigError(f"{ENV_BACKEND} must be one of {', '.join(BACKENDS)}: {backend!r}")
    encoding = os.getenv(ENV_ENCODING) or cfg.encoding
    return ImportConfig(
        csv_file=cfg.csv_file,
        encoding=encoding,
        backend=backend,
        error_log_dir=cfg.error_log_dir,
        nmcli=cfg.nmcli,
    )


def load_config(path: Path | None = None) -> ImportConfig:
    """Load configuration.

    When path is None the default location is tried and a missing file simply
    means "all defaults". An explicitly given path must exist.
    """
    explicit = path is not None
    cfg_path = path if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {cfg_path}")
        data: dict[str, Any] = {}
    else:
        try:
            data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config root must be a mapping: {cfg_path}")

    _validate_config_schema(data)

    nmcli_raw = data.get("nmcli") or {}
    cfg = ImportConfig(
        csv_file=data.get("csv_file"),
        encoding=data.get("encoding", "utf-8"),
        backend=data.get("backend", "mock"),
        error_log_dir=data.get("error_log_dir", "./logs"),
        nmcli=NmcliConfig(
            binary=nmcli_raw.get("binary", "nmcli"),
            connection_prefix=nmcli_raw.get("connection_prefix", ""),
        ),
    )
    return _apply_env_overrides(cfg)
