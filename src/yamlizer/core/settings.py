"""
Reader settings for yamlizer.

Settings are resolved in this order:
1. Values passed explicitly to load_settings()
2. Environment variables (YAMLIZER_MAX_DEPTH, YAMLIZER_LOG_LEVEL)
3. ``[tool.yamlizer]`` in pyproject.toml, or the top level of yamlizer.toml
4. Defaults

Usage:
    from yamlizer.core.settings import load_settings

    settings = load_settings(project_dir=Path("."))
    value = deserialize(Config, text, settings=settings)
"""

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MAX_DEPTH_ENV_VAR = "YAMLIZER_MAX_DEPTH"
LOG_LEVEL_ENV_VAR = "YAMLIZER_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class ReaderSettings:
    """Tunable limits and logging for the reader."""

    max_depth: int = 100  # deepest collection nesting accepted
    log_level: str = "WARNING"  # level the CLI configures logging with


DEFAULT_SETTINGS = ReaderSettings()
_FIELD_TYPES: dict[str, type] = {"max_depth": int, "log_level": str}


def _from_toml(project_dir: Path) -> dict[str, Any]:
    """Read settings from yamlizer.toml or pyproject.toml in ``project_dir``."""
    own = project_dir / "yamlizer.toml"
    if own.exists():
        with open(own, "rb") as f:
            return tomllib.load(f)

    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
        return data.get("tool", {}).get("yamlizer", {})

    return {}


def _checked_file_values(data: dict[str, Any]) -> dict[str, Any]:
    """Keep the file settings that have the expected type, warning about the rest."""
    values: dict[str, Any] = {}
    for key, value in data.items():
        expected = _FIELD_TYPES.get(key)
        if expected is None:
            logger.warning("Ignoring unknown yamlizer setting '%s'", key)
        elif isinstance(value, bool) or not isinstance(value, expected):
            logger.warning(
                "Invalid yamlizer setting %s = %r, expected %s. Ignoring.",
                key,
                value,
                expected.__name__,
            )
        else:
            values[key] = value
    return values


def _from_env() -> dict[str, Any]:
    values: dict[str, Any] = {}

    raw_depth = os.environ.get(MAX_DEPTH_ENV_VAR, "").strip()
    if raw_depth:
        try:
            values["max_depth"] = int(raw_depth)
        except ValueError:
            logger.warning(
                "Invalid %s value '%s', expected an integer. Ignoring.",
                MAX_DEPTH_ENV_VAR,
                raw_depth,
            )

    raw_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip()
    if raw_level:
        values["log_level"] = raw_level

    return values


def _validated(settings: ReaderSettings) -> ReaderSettings:
    """Replace invalid values with defaults, warning about each."""
    if settings.max_depth < 1:
        logger.warning(
            "max_depth must be positive, got %d. Using %d.",
            settings.max_depth,
            DEFAULT_SETTINGS.max_depth,
        )
        settings = replace(settings, max_depth=DEFAULT_SETTINGS.max_depth)

    level = settings.log_level.upper()
    if level not in _LOG_LEVELS:
        logger.warning(
            "Unknown log level '%s'. Valid values: %s. Using %s.",
            settings.log_level,
            ", ".join(_LOG_LEVELS),
            DEFAULT_SETTINGS.log_level,
        )
        level = DEFAULT_SETTINGS.log_level
    return replace(settings, log_level=level)


def load_settings(project_dir: Path | None = None, **overrides: Any) -> ReaderSettings:
    """
    Resolve reader settings.

    Args:
        project_dir: Directory searched for yamlizer.toml / pyproject.toml.
            None skips file configuration.
        **overrides: Explicit values; None values are ignored.

    Returns:
        ReaderSettings with every source applied

    Examples:
        >>> load_settings(max_depth=8).max_depth
        8
    """
    values: dict[str, Any] = {}

    if project_dir is not None:
        values.update(_checked_file_values(_from_toml(project_dir)))

    values.update(_from_env())
    values.update({k: v for k, v in overrides.items() if v is not None})

    settings = _validated(ReaderSettings(**values))
    logger.debug("Resolved reader settings: %s", settings)
    return settings
