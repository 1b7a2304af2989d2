"""Configuration parsing and normalization helpers for cococo.

Brief:
  This module contains the configuration-parsing utilities used by the CLI
  entrypoint. It centralizes:
    - the typed ConverterConfig model
    - reading and schema-validating YAML config files
    - merging command line overrides on top of file values

Inputs:
  - YAML config files and argparse namespaces

Outputs:
  - ConverterConfig instances and the remaining CLI-level settings
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .config_schema import validate_config

# Keys of the YAML file that map straight onto ConverterConfig fields.
CONVERTER_KEYS = (
    "excluded_file_extensions",
    "ignored_paths",
    "legacy_mode",
    "max_workers",
    "tool_command",
)


class ConverterConfig(BaseModel):
    """Brief: Typed configuration model for Converter.

    Inputs:
      - excluded_file_extensions: Suffixes whose files are skipped (e.g.
        [".h", ".m"]); None disables the filter.
      - ignored_paths: Substrings whose files are skipped (e.g. ["Pods/"]);
        None disables the filter.
      - legacy_mode: Call xccov without ``--archive`` for older Xcode versions.
      - max_workers: Upper bound on concurrent xccov invocations per archive;
        None uses the number of CPUs.
      - tool_command: Executable that provides ``xccov`` (default ``xcrun``).

    Outputs:
      - ConverterConfig instance with normalized field types.
    """

    model_config = ConfigDict(extra="forbid")

    excluded_file_extensions: Optional[List[str]] = None
    ignored_paths: Optional[List[str]] = None
    legacy_mode: bool = False
    max_workers: Optional[int] = Field(default=None, ge=1)
    tool_command: str = Field(default="xcrun", min_length=1)


def load_config_file(config_path: str, *, unknown_keys: str = "warn") -> Dict[str, Any]:
    """Brief: Read and schema-validate a YAML config file.

    Inputs:
      - config_path: Path to the YAML configuration file.
      - unknown_keys: Policy passed through to validate_config().

    Outputs:
      - dict: Parsed configuration mapping; an empty file yields {}.

    Raises:
      - ValueError: When the YAML is malformed, the root is not a mapping, or
        schema validation fails.
      - OSError: When the file cannot be read.
    """

    with open(os.path.expanduser(config_path), "r", encoding="utf-8") as f:
        try:
            cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(cfg, dict):
        raise ValueError("Configuration root must be a mapping")

    validate_config(cfg, config_path=config_path, unknown_keys=unknown_keys)
    return cfg


def build_converter_config(
    cfg: Optional[Dict[str, Any]] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> ConverterConfig:
    """Brief: Merge file values and CLI overrides into a ConverterConfig.

    Inputs:
      - cfg: Parsed YAML mapping (may be None or contain unrelated keys).
      - overrides: CLI values; entries whose value is None are ignored so
        that an unset flag never clobbers a file value.

    Outputs:
      - ConverterConfig.

    Raises:
      - ValueError: When the merged values fail model validation (pydantic's
        ValidationError is a ValueError subclass).

    Example:
      >>> build_converter_config({"legacy_mode": True}, overrides={"max_workers": 2})
      ConverterConfig(excluded_file_extensions=None, ignored_paths=None, legacy_mode=True, max_workers=2, tool_command='xcrun')
    """

    merged: Dict[str, Any] = {}
    for key in CONVERTER_KEYS:
        if cfg and cfg.get(key) is not None:
            merged[key] = cfg[key]
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    return ConverterConfig(**merged)
