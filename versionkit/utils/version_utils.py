"""
Version helper functions for versionkit.

Functional counterparts of the successor operations on
:class:`~versionkit.models.version.Version` that accept either a Version or
a (leniently parsed) string, plus classification of the change between two
versions.
"""

from __future__ import annotations

from typing import List, Optional, Union

from versionkit.models.version import Version
from versionkit.models.requirement import Requirement
from versionkit.exceptions import MalformedVersionError

VersionLike = Union[str, Version]

__all__ = [
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


def bump(version: VersionLike, index: int) -> Version:
    """Bump the number component at ``index`` (0=major, 1=minor, 2=patch).

    Components after ``index`` are reset to zero and pre-release and build
    metadata are dropped.

    Raises:
        ValueError: ``index`` is outside ``0..2``.
        MalformedVersionError: ``version`` cannot be parsed.
    """
    index = int(index)
    if index not in (0, 1, 2):
        raise ValueError(f"Unsupported index `{index}`")

    components = list(Version.parse(version).number_component[: index + 1])
    components[index] += 1
    return Version.parse(".".join(str(component) for component in components))


def next_major(version: VersionLike) -> Version:
    return bump(version, 0)


def next_minor(version: VersionLike) -> Version:
    return bump(version, 1)


def next_patch(version: VersionLike) -> Version:
    return bump(version, 2)


def next_pre_release(version: VersionLike) -> Optional[Version]:
    return Version.parse(version).next_pre_release()


def next_versions(version: VersionLike) -> List[Version]:
    """Return every version ``version`` may directly evolve into.

    Example:
        >>> [str(v) for v in next_versions("1.2.3-rc.1")]
        ['2.0.0', '1.3.0', '1.2.4', '1.2.3-rc.2']
    """
    return Version.parse(version).next_versions()


def is_valid_next_version(version: VersionLike, candidate: VersionLike) -> bool:
    """Return True if ``candidate`` is a direct successor of ``version``."""
    return Version.parse(version).is_valid_next_version(candidate)


def optimistic_requirement(version: VersionLike) -> Requirement:
    """Return the recommended ``~>`` requirement for consumers of ``version``."""
    return Requirement.parse(Version.parse(version).optimistic_recommendation())


def get_update_type(
    current_version: Optional[VersionLike],
    target_version: Optional[VersionLike],
) -> str:
    """Determine the semantic change between two versions.

    Returns:
        One of:
            - ``"new"``         : No current version exists
            - ``"same"``        : Versions are equal (build metadata ignored)
            - ``"downgrade"``   : Target version is lower than current
            - ``"major"``       : Major version change
            - ``"minor"``       : Minor version change
            - ``"patch"``       : Patch-level change
            - ``"pre-release"`` : Same release, pre-release identifiers differ
            - ``"unknown"``     : Missing target or invalid version

    Examples:
        >>> get_update_type("1.0.0", "2.0.0")
        'major'
        >>> get_update_type(None, "1.0.0")
        'new'
        >>> get_update_type("1.2.3-rc.1", "1.2.3")
        'pre-release'
    """
    if current_version is None and target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    if target_version is None:
        return "unknown"

    try:
        current = Version.parse(current_version)
        target = Version.parse(target_version)
    except MalformedVersionError:
        return "unknown"

    if target == current:
        return "same"

    if target < current:
        return "downgrade"

    if current.major != target.major:
        return "major"

    if current.minor != target.minor:
        return "minor"

    if current.patch != target.patch:
        return "patch"

    return "pre-release"
