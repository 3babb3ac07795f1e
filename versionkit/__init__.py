"""
versionkit: semantic versions and dependency resolution.

versionkit models SemVer versions and requirements and resolves groups of
library dependencies into one consistent set of versions, using a
backtracking search with conflict-directed backjumping.

Features include:
    • Strict and lenient SemVer parsing with full precedence ordering
    • Requirement operators ``=, !=, >, <, >=, <=`` and optimistic ``~>``
    • Multi-group resolution sharing one version per library
    • Conflict reports naming every clashing requirement and its chain
    • TOML library indexes and a Click-based CLI

Example::

    >>> from versionkit import Resolver, StaticDataProvider
    >>> provider = StaticDataProvider({"A": {"1.0.0": []}})
    >>> Resolver(provider).resolve(["A"]).versions()
    {'A': '1.0.0'}
"""

from __future__ import annotations

from versionkit.__version__ import __version__
from versionkit.models import (
    Conflict,
    Dependency,
    Operator,
    Requirement,
    RequirementList,
    SpecGroup,
    Version,
)
from versionkit.core import (
    DataProvider,
    DataProviderCache,
    ResolutionResult,
    Resolver,
    ResolverDelegate,
    StaticDataProvider,
)
from versionkit.exceptions import (
    MalformedVersionError,
    NoMatchingVersionError,
    UnsupportedOperatorError,
    VersionConflictError,
    VersionKitError,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "versionkit Contributors"
__license__ = "Apache-2.0"
__description__ = "Semantic version model and backtracking dependency resolver."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    # Models
    "Version",
    "Operator",
    "Requirement",
    "RequirementList",
    "Dependency",
    "SpecGroup",
    "Conflict",
    # Resolution
    "DataProvider",
    "DataProviderCache",
    "ResolverDelegate",
    "StaticDataProvider",
    "Resolver",
    "ResolutionResult",
    # Errors
    "VersionKitError",
    "MalformedVersionError",
    "UnsupportedOperatorError",
    "NoMatchingVersionError",
    "VersionConflictError",
]
