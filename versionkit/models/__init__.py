"""
Unified data model exports for versionkit.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``versionkit.models`` instead of individual submodules.

Example:
    >>> from versionkit.models import Version, Requirement, Dependency
"""

from __future__ import annotations

from versionkit.models.version import Version
from versionkit.models.requirement import Operator, Requirement, RequirementList
from versionkit.models.dependency import Dependency, SpecGroup
from versionkit.models.conflict import Conflict

__all__ = [
    "Version",
    "Operator",
    "Requirement",
    "RequirementList",
    "Dependency",
    "SpecGroup",
    "Conflict",
]
