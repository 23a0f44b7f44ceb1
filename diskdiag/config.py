"""
diskdiag.config
AUTHOR: carter-vin

Disk sensor configuration

- single field: path (volume root / drive to query)
- empty path resolves to the host's primary drive root at validation time
- no other validation
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

from diskdiag.logging import emit_event

WINDOWS_DEFAULT_DISK_PATH = "C:\\"
POSIX_DEFAULT_DISK_PATH = "/"

# Env var override for the CLI harness; wins over --path and --config
DISK_PATH_ENV = "DISKDIAG_PATH"


class ConfigError(ValueError):
    """Raised when a raw config payload cannot be turned into a DiskConfig."""


@dataclass(frozen=True)
class DiskConfig:
    path: str = ""


def default_disk_path() -> str:
    """
    Primary drive root for this host
    """
    if os.name == "nt":
        return WINDOWS_DEFAULT_DISK_PATH
    return POSIX_DEFAULT_DISK_PATH


def parse_config(payload: Mapping[str, Any]) -> DiskConfig:
    """
    Build a DiskConfig from a loosely-typed mapping

    - missing / None path -> ""
    - unknown keys ignored
    """
    if not isinstance(payload, Mapping):
        raise ConfigError(f"config must be a mapping, got {type(payload).__name__}")

    path = payload.get("path")
    if path is None:
        return DiskConfig(path="")

    if not isinstance(path, str):
        raise ConfigError(f"config.path must be a string, got {type(path).__name__}")

    return DiskConfig(path=path)


def load_config_file(config_path: Path) -> DiskConfig:
    """
    Read a JSON object file into a DiskConfig
    """
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config {config_path}: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigError(f"config {config_path} must contain a JSON object")

    return parse_config(payload)


def validate_config(config: DiskConfig, *, default_path: str) -> DiskConfig:
    """
    Resolve config for use by the sensor

    Returns a new DiskConfig; the input is never mutated.
    """
    if config.path:
        return config

    emit_event("config_defaulted", default_path=default_path)
    return replace(config, path=default_path)
