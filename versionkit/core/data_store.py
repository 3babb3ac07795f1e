"""Memoizing front for :class:`~versionkit.core.data_provider.DataProvider`.

The resolver re-asks the same questions across many branches of its
search: which versions of ``B`` exist, what does ``B 1.2.0`` depend on.
Both queries are idempotent, so :class:`DataProviderCache` answers each
one from the underlying provider at most once per resolution.

Typical usage::

    cache = DataProviderCache(StaticDataProvider(libraries))
    cache.available_versions("B")            # hits the provider
    cache.available_versions("B")            # served from cache
    cache.sorted_versions("B")               # parsed, newest first
    cache.libraries_with_unique_versions(["A", "B"])
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple, Union

from versionkit.models.version import Version
from versionkit.models.dependency import Dependency
from versionkit.utils.logger import get_logger
from versionkit.core.data_provider import DataProvider

logger = get_logger("data_store")

# Public API
__all__ = ["DataProviderCache"]


class DataProviderCache:
    """Per-resolution cache wrapped around a :class:`DataProvider`.

    Args:
        data_provider: The provider to query on a cache miss.

    Raises:
        TypeError: If ``data_provider`` is ``None``.
    """

    def __init__(self, data_provider: DataProvider) -> None:
        if data_provider is None:
            raise TypeError("data_provider must not be None; pass a DataProvider instance")

        self.data_provider = data_provider

        # Primary cache: name → version strings as reported by the provider
        self._versions: Dict[str, List[str]] = {}

        # Derived cache: name → parsed versions, newest first
        self._sorted_versions: Dict[str, List[Version]] = {}

        # Secondary cache: "name==version" → declared dependencies
        self._dependencies: Dict[str, List[Dependency]] = {}

    # ------------------------------------------------------------------
    # Memoized provider queries
    # ------------------------------------------------------------------

    def available_versions(self, name: str) -> List[str]:
        """Return the versions of ``name`` known to the provider."""
        if name not in self._versions:
            logger.debug("Cache miss: versions of %s", name)
            self._versions[name] = list(self.data_provider.available_versions(name))
        return self._versions[name]

    def dependencies_of(self, name: str, version: Union[str, Version]) -> List[Dependency]:
        """Return the dependencies declared by ``name`` at ``version``."""
        parsed = Version.parse(version)
        cache_key = f"{name}=={parsed}"

        if cache_key not in self._dependencies:
            logger.debug("Cache miss: dependencies of %s", cache_key)
            self._dependencies[cache_key] = list(
                self.data_provider.dependencies_of(name, parsed)
            )
        return self._dependencies[cache_key]

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------

    def sorted_versions(self, name: str) -> List[Version]:
        """Return the parsed versions of ``name``, highest first.

        Duplicate versions reported by the provider are collapsed.
        """
        if name not in self._sorted_versions:
            parsed = {Version.parse(raw) for raw in self.available_versions(name)}
            self._sorted_versions[name] = sorted(parsed, reverse=True)
        return self._sorted_versions[name]

    def libraries_with_unique_versions(self, names: Iterable[str]) -> List[str]:
        """Select the names for which exactly one version is available.

        Order follows ``names``; repeated names are reported once.
        """
        unique: List[str] = []
        for name in names:
            if name not in unique and len(self.sorted_versions(name)) == 1:
                unique.append(name)
        return unique

    def clear(self) -> None:
        """Drop every cached answer."""
        self._versions.clear()
        self._sorted_versions.clear()
        self._dependencies.clear()

    def cache_size(self) -> Tuple[int, int]:
        """Return the number of cached ``(version lists, dependency lists)``."""
        return len(self._versions), len(self._dependencies)
