"""
Custom exception hierarchy for versionkit.

This module defines structured exception types used across versionkit.
All exceptions inherit from :class:`VersionKitError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Backtracking inside the resolver is not modelled with exceptions; only
outcomes that end a resolution surface as one of the types below.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, MutableMapping, Optional, Sequence

if TYPE_CHECKING:
    from versionkit.models.conflict import Conflict


class VersionKitError(Exception):
    """Base exception for all versionkit errors.

    All versionkit-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Construction errors
# ---------------------------------------------------------------------------


class MalformedVersionError(VersionKitError, ValueError):
    """Raised when a string is not a valid semantic version.

    Args:
        message: Error description.
        version: The rejected input.
    """

    __slots__ = ("version",)

    def __init__(self, message: str, *, version: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "version", _truncate(version) if version is not None else None)

        super().__init__(message, details)

        self.version = version


class UnsupportedOperatorError(VersionKitError, ValueError):
    """Raised when a requirement uses an unknown comparison operator.

    Args:
        message: Error description.
        operator: The rejected operator token.
        requirement: The full requirement string being parsed.
    """

    __slots__ = ("operator", "requirement")

    def __init__(
        self,
        message: str,
        *,
        operator: Optional[str] = None,
        requirement: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "operator", operator)
        _add_if(details, "requirement", requirement)

        super().__init__(message, details)

        self.operator = operator
        self.requirement = requirement


# ---------------------------------------------------------------------------
# Resolution errors
# ---------------------------------------------------------------------------


class ResolverError(VersionKitError):
    """Base class for failures that end a dependency resolution."""


class NoMatchingVersionError(ResolverError):
    """Raised when a root dependency has no candidate version at all.

    Args:
        message: Error description.
        name: Library that could not be located.
        requirement: Rendered requirement list of the dependency.
        available: Versions the data provider knows about.
    """

    __slots__ = ("name", "requirement", "available")

    def __init__(
        self,
        message: str,
        *,
        name: Optional[str] = None,
        requirement: Optional[str] = None,
        available: Optional[Sequence[str]] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "name", name)
        _add_if(details, "requirement", requirement or None)
        if available is not None:
            details["available"] = ", ".join(available) if available else "<none>"

        super().__init__(message, details)

        self.name = name
        self.requirement = requirement
        self.available: List[str] = list(available or [])


class VersionConflictError(ResolverError):
    """Raised when no combination of versions satisfies every requirement.

    The error aggregates every conflict recorded during the search rather
    than only the first failure.

    Args:
        message: Error description.
        conflicts: Mapping of library name to its most recent conflict.
    """

    __slots__ = ("conflicts",)

    def __init__(
        self,
        message: str,
        *,
        conflicts: Optional[Mapping[str, "Conflict"]] = None,
    ) -> None:
        self.conflicts: Dict[str, "Conflict"] = dict(conflicts or {})

        details: MutableMapping[str, Any] = {}
        if self.conflicts:
            details["conflicts"] = ", ".join(self.conflicts)

        super().__init__(message, details)

    @property
    def names(self) -> List[str]:
        """Names of the libraries involved, in recording order."""
        return list(self.conflicts)

    @property
    def explanation(self) -> str:
        """Multi-line report of every conflict and its requesting chain."""
        if not self.conflicts:
            return self.message
        return "\n\n".join(
            conflict.explanation() for conflict in self.conflicts.values()
        )


class ResolutionTooDeepError(ResolverError):
    """Raised when the search exceeds the configured iteration ceiling.

    Args:
        message: Error description.
        iterations: Iterations performed when the search was aborted.
    """

    __slots__ = ("iterations",)

    def __init__(self, message: str, *, iterations: Optional[int] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "iterations", iterations)

        super().__init__(message, details)

        self.iterations = iterations


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------


class ConfigError(VersionKitError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file involved.
        option: Offending option name, if the error concerns one.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class IndexFileError(VersionKitError):
    """Raised when a library index file cannot be loaded.

    Args:
        message: Error description.
        file_path: Path to the index file.
        library: Library entry being read when the error occurred.
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "library", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        library: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "library", library)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.library = library
        self.original_error = original_error
