"""
Utility helpers for versionkit.

This package provides reusable utilities used across versionkit, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Version successor and classification helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from versionkit.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from versionkit.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_error,
    print_report,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from versionkit.utils.version_utils import (
    bump,
    get_update_type,
    is_valid_next_version,
    next_major,
    next_minor,
    next_patch,
    next_pre_release,
    next_versions,
    optimistic_requirement,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_report",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "level_for_verbosity",
    "is_logging_configured",
    # Version utilities
    "bump",
    "next_major",
    "next_minor",
    "next_patch",
    "next_pre_release",
    "next_versions",
    "is_valid_next_version",
    "optimistic_requirement",
    "get_update_type",
]
