"""Configuration loading for rustgeiger.

Configuration sources are merged in priority order:
    1. Defaults (defined in ScanConfig)
    2. Global config (~/.rustgeiger.toml)
    3. Project config (./rustgeiger.toml)
    4. Explicit config file
    5. Environment variables (RUSTGEIGER_* prefix)
    6. Keyword overrides

Example:
    >>> config = load_config(include_tests=False)
    >>> config.include_tests
    False
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITY_LEVELS = ("quiet", "normal", "verbose")

ENV_PREFIX = "RUSTGEIGER_"
CONFIG_FILENAME = "rustgeiger.toml"


@dataclass(frozen=True)
class ScanConfig:
    """Settings for a single-file unsafe scan.

    Attributes:
        include_tests: Count code under #[test] functions and #[cfg(test)] modules
        verbosity: Logging verbosity level
        encoding: Codec used to decode files read by scan_file()
    """

    include_tests: bool = True
    verbosity: Verbosity = "normal"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.include_tests, bool):
            raise InvalidConfigError("include_tests", self.include_tests, "must be a boolean")
        if self.verbosity not in _VERBOSITY_LEVELS:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"must be one of {', '.join(_VERBOSITY_LEVELS)}"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise InvalidConfigError("encoding", self.encoding, "unknown codec")


DEFAULT_CONFIG = ScanConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ScanConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (e.g. include_tests=False)

    Returns:
        Validated ScanConfig instance

    Raises:
        ConfigurationError: If a config file is missing, unreadable or invalid
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # Boolean verbosity flags, as passed by command-line front ends
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update(overrides)

    try:
        return ScanConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from RUSTGEIGER_* environment variables.

    Supported environment variables:
        RUSTGEIGER_INCLUDE_TESTS: bool (true/false/1/0/yes/no/on/off)
        RUSTGEIGER_VERBOSITY: quiet/normal/verbose
        RUSTGEIGER_ENCODING: codec name
    """
    type_hints = get_type_hints(ScanConfig)
    result: dict[str, Any] = {}

    for field_name in ScanConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            result[field_name] = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    if type_hint is bool:
        lower = value.strip().lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    # str and Literal fields are validated by ScanConfig itself
    return value.strip()


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file, reading either the top level or a [rustgeiger] table.

    Raises:
        ConfigurationError: If TOML support is missing or parsing fails
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
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("rustgeiger", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [rustgeiger] must be a table")
    return dict(section)
