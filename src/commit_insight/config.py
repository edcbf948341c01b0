"""Configuration loading and management for Commit Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.commit-insight.toml)
    3. Project config (./commit-insight.toml)
    4. Explicit config file (--config)
    5. Environment variables (COMMIT_INSIGHT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(days=30, verbose=True)
    >>> config.days
    30
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError, InvalidPathError

Verbosity = Literal["quiet", "normal", "verbose"]
OutputFormat = Literal["rich", "json", "quiet"]

ENV_PREFIX = "COMMIT_INSIGHT_"
GLOBAL_CONFIG_NAME = ".commit-insight.toml"
PROJECT_CONFIG_NAME = "commit-insight.toml"

_VERBOSITIES = ("quiet", "normal", "verbose")
_OUTPUT_FORMATS = ("rich", "json", "quiet")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Reporting window:
            days: Look-back window in days, counted from the moment of analysis

        Display:
            top_files: Number of most-edited files kept in the result
            top_authors: Number of authors shown in the terminal table
            output_format: Terminal output format (rich, json, quiet)
            verbosity: Logging verbosity level

        Git integration:
            git_timeout_seconds: Timeout for each git subprocess
            max_output_mb: Cap on git log output read into memory
    """

    days: int = 90

    top_files: int = 10
    top_authors: int = 10
    output_format: OutputFormat = "rich"
    verbosity: Verbosity = "normal"

    git_timeout_seconds: int = 30
    max_output_mb: int = 50

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.days <= 0:
            raise InvalidConfigError("days", self.days, "Days must be a positive number.")
        if self.top_files < 1:
            raise InvalidConfigError("top_files", self.top_files, "must be at least 1")
        if self.top_authors < 1:
            raise InvalidConfigError("top_authors", self.top_authors, "must be at least 1")
        if self.output_format not in _OUTPUT_FORMATS:
            raise InvalidConfigError(
                "output_format", self.output_format, f"expected one of {', '.join(_OUTPUT_FORMATS)}"
            )
        if self.verbosity not in _VERBOSITIES:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"expected one of {', '.join(_VERBOSITIES)}"
            )
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError(
                "git_timeout_seconds", self.git_timeout_seconds, "must be at least 1"
            )
        if self.max_output_mb < 1:
            raise InvalidConfigError("max_output_mb", self.max_output_mb, "must be at least 1")


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        InvalidPathError: If an explicit config file does not exist
        ConfigurationError: If a config file is unreadable or has unknown keys
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise InvalidPathError(config_file, "config file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # --verbose and --quiet map onto the verbosity field; --quiet wins
    for flag in ("verbose", "quiet"):
        if overrides.pop(flag, False):
            overrides["verbosity"] = flag

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from COMMIT_INSIGHT_* environment variables.

    Supported environment variables:
        COMMIT_INSIGHT_DAYS: int
        COMMIT_INSIGHT_TOP_FILES: int
        COMMIT_INSIGHT_TOP_AUTHORS: int
        COMMIT_INSIGHT_OUTPUT_FORMAT: rich/json/quiet
        COMMIT_INSIGHT_VERBOSITY: quiet/normal/verbose
        COMMIT_INSIGHT_GIT_TIMEOUT_SECONDS: int
        COMMIT_INSIGHT_MAX_OUTPUT_MB: int
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Convert an environment string to an int or string field value.

    Raises:
        ValueError: If an int field gets a non-integer value
    """
    if type_hint is int:
        return int(value)
    if type_hint is str or getattr(type_hint, "__origin__", None) is Literal:
        return value.strip().lower()
    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict.

    Raises:
        ConfigurationError: If no TOML parser is available or parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
