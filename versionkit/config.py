"""Configuration file loader for versionkit.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``versionkit.toml``: settings under the ``[versionkit]`` table
- ``pyproject.toml``: settings under the ``[tool.versionkit]`` table

Discovery order:

1. Explicit path from ``--config`` or ``VERSIONKIT_CONFIG``
2. ``versionkit.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.versionkit]`` section

Configuration precedence: defaults < config file < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``versionkit.toml``)::

    [versionkit]
    progress_interval = 0.5
    max_iterations = 100000
    debug_tree = false
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field

from versionkit.exceptions import ConfigError
from versionkit.utils.logger import get_logger
from versionkit.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_DEBUG_TREE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_PROGRESS_INTERVAL,
    PYPROJECT_FILE_NAME,
)

logger = get_logger("config")


@dataclass
class VersionKitConfig:
    """Parsed and validated versionkit configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        progress_interval: Seconds of search used to calibrate how often
            the resolver delegate receives a progress tick.
        max_iterations: Abort a search after this many iterations;
            ``0`` means unlimited.
        debug_tree: Log every processed requirement, indented by search
            depth, at DEBUG level.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    progress_interval: float = DEFAULT_PROGRESS_INTERVAL
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    debug_tree: bool = DEFAULT_DEBUG_TREE

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "progress_interval": self.progress_interval,
            "max_iterations": self.max_iterations,
            "debug_tree": self.debug_tree,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Path given with ``--config``; it must exist.

    Returns:
        The file to load, or ``None`` to run with defaults.

    Raises:
        ConfigError: ``explicit_path`` does not name a file.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        return resolved

    cwd = Path.cwd()
    candidates = (
        (cwd / CONFIG_FILE_NAME, lambda path: True),
        (cwd / PYPROJECT_FILE_NAME, _pyproject_has_versionkit_section),
    )
    for path, accepts in candidates:
        if path.is_file() and accepts(path):
            logger.debug("Discovered configuration file %s", path)
            return path

    return None


def _pyproject_has_versionkit_section(path: Path) -> bool:
    """Return True if ``path`` has a ``[tool.versionkit]`` table.

    An unreadable or invalid pyproject.toml counts as having none.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring %s: %s", path, exc)
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "versionkit" in tool


def _section_of(raw: Dict[str, Any], path: Path) -> Dict[str, Any]:
    """Return the settings table of ``path``, or an empty one.

    Raises:
        ConfigError: The ``versionkit`` key holds something other than a table.
    """
    if path.name == PYPROJECT_FILE_NAME:
        table_name = "tool.versionkit"
        tool = raw.get("tool", {})
        section = tool.get("versionkit", {}) if isinstance(tool, dict) else {}
    else:
        table_name = "versionkit"
        section = raw.get("versionkit", {})

    if not isinstance(section, dict):
        raise ConfigError(
            f"[{table_name}] must be a table, got {type(section).__name__}",
            config_path=str(path),
        )
    return section


def load_config(config_path: Optional[Path] = None) -> VersionKitConfig:
    """Load and validate the resolver settings.

    Args:
        config_path: Explicit configuration file. ``None`` discovers one
            with :func:`discover_config_file`.

    Returns:
        The validated settings; defaults when no file or no table is found.

    Raises:
        ConfigError: The file cannot be parsed or holds an invalid setting.
    """
    path = discover_config_file(config_path)
    if path is None:
        return VersionKitConfig()

    logger.info("Loading configuration from %s", path)
    section = _section_of(_read_toml(path), path)

    config = _parse_section(section, config_path=str(path))
    config.source_path = path
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


# ---------------------------------------------------------------------------
# Option validation
# ---------------------------------------------------------------------------


def _non_negative_number(option: str, value: Any, config_path: str) -> float:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(
            f"{option} must be a number, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    if value < 0:
        raise ConfigError(
            f"{option} must not be negative, got {value}",
            config_path=config_path,
            option=option,
        )
    return float(value)


def _non_negative_int(option: str, value: Any, config_path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"{option} must be an integer, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    if value < 0:
        raise ConfigError(
            f"{option} must not be negative, got {value}",
            config_path=config_path,
            option=option,
        )
    return value


def _boolean(option: str, value: Any, config_path: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(
            f"{option} must be a boolean, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    return value


#: Validator for every supported option, keyed by option name.
_OPTIONS: Dict[str, Callable[[str, Any, str], Any]] = {
    "progress_interval": _non_negative_number,
    "max_iterations": _non_negative_int,
    "debug_tree": _boolean,
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> VersionKitConfig:
    """Validate a ``[versionkit]`` or ``[tool.versionkit]`` table.

    Options missing from ``section`` keep their defaults.

    Raises:
        ConfigError: Unknown keys, incorrect types or out-of-range values.
    """
    unknown = sorted(set(section) - set(_OPTIONS))
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            config_path=config_path,
        )

    values = {
        option: _OPTIONS[option](option, value, config_path)
        for option, value in section.items()
    }
    logger.debug("Settings from %s: %s", config_path, values)
    return VersionKitConfig(**values)
