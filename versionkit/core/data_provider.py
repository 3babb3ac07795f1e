"""
Collaborator contracts consumed by the resolver.

The resolver never looks libraries up itself. It asks a
:class:`DataProvider` which versions exist and what each version depends
on, and it reports lifecycle events to a :class:`ResolverDelegate`.

:class:`StaticDataProvider` is an in-memory provider built from plain
mappings, used by the CLI index loader and by tests.

Typical usage::

    provider = StaticDataProvider({
        "A": {"1.0.0": ["B (>= 1.0)"]},
        "B": {"1.0.0": [], "2.0.0": []},
    })
    provider.available_versions("B")        # ["1.0.0", "2.0.0"]
    provider.dependencies_of("A", "1.0.0")  # [Dependency("B", ...)]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from versionkit.models.version import Version
from versionkit.models.dependency import Dependency

__all__ = ["DataProvider", "ResolverDelegate", "StaticDataProvider"]

DependencyLike = Union[str, Dependency]


class DataProvider(ABC):
    """Source of library versions and their dependencies.

    Implementations must behave as pure functions of their arguments for
    the lifetime of a resolution, since results are memoized.
    """

    @abstractmethod
    def available_versions(self, name: str) -> Sequence[str]:
        """Return every known version of ``name`` as version strings.

        Unknown libraries yield an empty sequence.
        """
        raise NotImplementedError

    @abstractmethod
    def dependencies_of(self, name: str, version: Version) -> Sequence[Dependency]:
        """Return the dependencies declared by ``name`` at ``version``."""
        raise NotImplementedError


class ResolverDelegate:
    """Receives resolver lifecycle notifications.

    Every hook is optional; the base implementation does nothing and
    accepts every version.
    """

    def on_group_resolution_start(self, group_name: str) -> None:
        """Called before the dependencies of ``group_name`` are resolved."""

    def on_group_resolution_end(self) -> None:
        """Called after the current group has been resolved."""

    def on_progress_tick(self) -> None:
        """Called periodically (roughly once per second) while searching."""

    def validate_version_for_group(self, version: Version, group: str) -> bool:
        """Veto hook; returning False rejects the candidate as a conflict."""
        return True


class StaticDataProvider(DataProvider):
    """A :class:`DataProvider` backed by an in-memory mapping.

    Args:
        libraries: Mapping of library name to a mapping of version string
            to the dependencies of that version. Dependencies may be
            :class:`Dependency` objects or strings such as
            ``"B (>= 1.0, < 2.0)"``.

    Raises:
        MalformedVersionError: A version or dependency string is invalid.
    """

    def __init__(
        self,
        libraries: Optional[Mapping[str, Mapping[str, Iterable[DependencyLike]]]] = None,
    ) -> None:
        self._versions: Dict[str, List[str]] = {}
        self._dependencies: Dict[str, Dict[Version, List[Dependency]]] = {}

        for name, versions in (libraries or {}).items():
            for version, dependencies in versions.items():
                self.add_version(name, version, dependencies)

    def add_version(
        self,
        name: str,
        version: Union[str, Version],
        dependencies: Iterable[DependencyLike] = (),
    ) -> None:
        """Register ``version`` of ``name`` with its dependencies."""
        parsed = Version.parse(version)
        self._versions.setdefault(name, []).append(str(parsed))
        self._dependencies.setdefault(name, {})[parsed] = [
            Dependency.coerce(dependency) for dependency in dependencies
        ]

    @property
    def names(self) -> List[str]:
        return list(self._versions)

    def available_versions(self, name: str) -> List[str]:
        return list(self._versions.get(name, []))

    def dependencies_of(self, name: str, version: Union[str, Version]) -> List[Dependency]:
        return list(self._dependencies.get(name, {}).get(Version.parse(version), []))
