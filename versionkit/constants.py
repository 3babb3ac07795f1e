"""
Centralized constants for versionkit.

This module defines immutable configuration values used across versionkit,
including resolver tuning defaults, configuration file names and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, Tuple

# ---------------------------------------------------------------------------
# Version model
# ---------------------------------------------------------------------------

#: Canonical ``MAJOR.MINOR.PATCH[-pre][+build]`` pattern (matched ignoring case).
VERSION_PATTERN: Final[str] = (
    r"\A[0-9]+\.[0-9]+\.[0-9]+"
    r"(-[0-9a-z-]+(\.[0-9a-z-]+)*)?"
    r"(\+[0-9a-z-]+(\.[0-9a-z-]+)*)?\Z"
)

#: Operator assumed when a requirement string carries only a version.
DEFAULT_OPERATOR: Final[str] = "="

# ---------------------------------------------------------------------------
# Resolver defaults
# ---------------------------------------------------------------------------

#: Name of the resolution group used when a flat dependency list is given.
DEFAULT_GROUP: Final[str] = "default"

#: Seconds of search used to calibrate the progress tick rate.
DEFAULT_PROGRESS_INTERVAL: Final[float] = 1.0

#: Upper bound on search iterations; ``0`` disables the ceiling.
DEFAULT_MAX_ITERATIONS: Final[int] = 0

#: Whether the requirement tree is logged while searching.
DEFAULT_DEBUG_TREE: Final[bool] = False

# ---------------------------------------------------------------------------
# Configuration files
# ---------------------------------------------------------------------------

#: Dedicated configuration file, settings under ``[versionkit]``.
CONFIG_FILE_NAME: Final[str] = "versionkit.toml"

#: Shared project file, settings under ``[tool.versionkit]``.
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"

#: Environment variable holding an explicit configuration path.
CONFIG_ENV_VAR: Final[str] = "VERSIONKIT_CONFIG"

#: Output formats accepted by ``versionkit resolve``.
OUTPUT_FORMATS: Final[Tuple[str, ...]] = ("table", "json")

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
