"""JSON Schema-based validation for cococo YAML configuration.

This module centralizes validating the optional ``--config`` YAML file using
a JSON Schema document shipped next to it as ``config-schema.json``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator, ValidationError
from jsonschema.exceptions import SchemaError

logger = logging.getLogger(__name__)


def get_default_schema_path() -> Path:
    """Brief: Resolve the default JSON Schema path for configuration.

    Inputs:
      - None.

    Outputs:
      - Path to the bundled ``config-schema.json``.
    """

    return Path(__file__).resolve().parent / "config-schema.json"


def _load_schema(schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """Brief: Load the JSON Schema document from disk.

    Inputs:
      - schema_path: Optional explicit path to the schema file.

    Outputs:
      - dict: Parsed schema.
    """

    path = schema_path or get_default_schema_path()
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _format_errors(errors: List[ValidationError], *, config_path: Optional[str]) -> str:
    """Brief: Format jsonschema validation errors into a human-readable string.

    Inputs:
      - errors: List of jsonschema.ValidationError instances.
      - config_path: Optional path to the YAML config being validated.

    Outputs:
      - String suitable for display in logs or CLI output.
    """

    lines: List[str] = [f"Invalid configuration in {config_path or '<config dict>'}:"]
    for err in errors:
        instance_path = "/".join(str(p) for p in err.path) or "<root>"
        schema_path = "/".join(str(p) for p in err.schema_path)
        lines.append(f"- {instance_path}: {err.message} (schema: {schema_path})")
    return "\n".join(lines)


def _split_extra_property_errors(
    errors: List[ValidationError],
) -> tuple[List[ValidationError], List[ValidationError]]:
    """Brief: Partition validation errors into extra-property vs other errors."""

    extra: List[ValidationError] = []
    other: List[ValidationError] = []
    for err in errors:
        if err.validator in {"additionalProperties", "unevaluatedProperties"}:
            extra.append(err)
        else:
            other.append(err)
    return extra, other


def validate_config(
    cfg: Dict[str, Any],
    *,
    schema_path: Optional[Path] = None,
    config_path: Optional[str] = None,
    unknown_keys: str = "warn",
) -> None:
    """Brief: Validate a parsed YAML configuration mapping against JSON Schema.

    Inputs:
      - cfg: Dict loaded from YAML (top-level configuration mapping).
      - schema_path: Optional explicit schema path; defaults to the bundled
        ``config-schema.json``.
      - config_path: Optional path of the YAML file, used in messages only.
      - unknown_keys: Policy for keys the schema does not describe:

        - "ignore": drop extra-property errors entirely.
        - "warn": (default) log them as a warning, not fatal.
        - "error": treat them as fatal alongside other errors.

    Outputs:
      - None on success.

    Raises:
      - ValueError: when any non-extra error is found, when ``unknown_keys``
        is "error" and extra keys exist, when the policy itself is invalid,
        or when the schema cannot be loaded.

    Example:
      >>> validate_config({"legacy_mode": True, "ignored_paths": ["Pods/"]})
    """

    if unknown_keys not in {"ignore", "warn", "error"}:
        raise ValueError(
            f"unknown_keys policy must be 'ignore', 'warn', or 'error', got {unknown_keys!r}"
        )

    effective_schema_path = schema_path or get_default_schema_path()
    try:
        schema = _load_schema(effective_schema_path)
        Draft202012Validator.check_schema(schema)
    except (OSError, json.JSONDecodeError, SchemaError) as exc:
        raise ValueError(
            f"Failed to load configuration schema at {effective_schema_path}: {exc}"
        ) from exc

    validator = Draft202012Validator(schema)
    all_errors = sorted(
        validator.iter_errors(cfg), key=lambda e: [str(p) for p in e.path]
    )
    if not all_errors:
        return None

    extra_errors, other_errors = _split_extra_property_errors(all_errors)

    # Include extra-key errors alongside fatal ones so the whole picture shows.
    if other_errors:
        raise ValueError(
            _format_errors(other_errors + extra_errors, config_path=config_path)
        )

    message = _format_errors(extra_errors, config_path=config_path)
    if unknown_keys == "ignore":
        return None
    if unknown_keys == "warn":
        logger.warning(message)
        return None
    raise ValueError(message)
