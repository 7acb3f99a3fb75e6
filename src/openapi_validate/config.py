"""Resolve :class:`~openapi_validate.models.ValidatorOptions` from layered sources.

Precedence (high to low):

1. Explicit overrides (CLI flags, or keyword arguments from application code)
2. Environment variables ``OPENAPI_VALIDATE_DRAFT`` and
   ``OPENAPI_VALIDATE_FORMAT_CHECKING``
3. Project config (``./openapi-validate.json``)
4. Defaults

Library users who build :class:`ValidatorOptions` themselves never touch
this module; it exists for the CLI and for applications that want the same
environment-driven behaviour.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from openapi_validate.exceptions import ConfigError
from openapi_validate.models import ValidatorOptions

PROJECT_CONFIG_FILENAME = "openapi-validate.json"

ENV_DRAFT = "OPENAPI_VALIDATE_DRAFT"
ENV_FORMAT_CHECKING = "OPENAPI_VALIDATE_FORMAT_CHECKING"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def load_project_config(directory: Optional[Path] = None) -> dict[str, Any]:
    """Load ``openapi-validate.json`` from *directory* (default: the cwd).

    Returns:
        The parsed object, or an empty dict when the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = (directory or Path.cwd()) / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got {value!r}")


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    draft = os.environ.get(ENV_DRAFT)
    if draft:
        overrides["draft"] = draft
    format_checking = os.environ.get(ENV_FORMAT_CHECKING)
    if format_checking:
        overrides["format_checking"] = _parse_bool(ENV_FORMAT_CHECKING, format_checking)
    return overrides


def resolve_options(
    draft: Optional[str] = None,
    format_checking: Optional[bool] = None,
    directory: Optional[Path] = None,
) -> ValidatorOptions:
    """Merge all option sources into one :class:`ValidatorOptions`.

    Args:
        draft: Explicit draft override (highest precedence).
        format_checking: Explicit format-checking override.
        directory: Where to look for the project config file.

    Raises:
        ConfigError: If any source holds an invalid value.
    """
    # 4 + 3. Defaults, then project config
    merged: dict[str, Any] = dict(load_project_config(directory))
    # 2. Environment
    merged.update(_env_overrides())
    # 1. Explicit overrides
    if draft is not None:
        merged["draft"] = draft
    if format_checking is not None:
        merged["format_checking"] = format_checking

    try:
        return ValidatorOptions.model_validate(merged)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid validator options: {exc}") from exc
