"""Backtracking dependency resolution for versionkit.

:class:`Resolver` turns groups of root dependencies into one consistent
activation: exactly one version per library, satisfying every requirement
reachable from the roots. Groups are resolved in order and share their
activations, so a version chosen for one group constrains the next.

The search is depth-first. For each pending requirement the highest
matching version is activated, its dependencies are queued and the search
recurses. Every activation attempt is a *decision point* named after the
library it activates. When a requirement clashes with an earlier
activation, the search does not simply retry the previous decision: it
jumps straight back to the decision point responsible for the clash
(conflict-directed backjumping), skipping alternatives that cannot
affect it.

Jumps are ordinary return values. A frame returns ``_Backtrack(target)``
and every frame hands it upward untouched until it reaches the decision
point named ``target``, which then tries its next candidate.

Typical usage::

    provider = StaticDataProvider({
        "A": {"1.0.0": ["B (~> 1.2.0)"]},
        "B": {"1.2.0": [], "1.2.5": [], "1.3.0": []},
    })
    result = Resolver(provider).resolve({"default": ["A"]})
    result.versions("default")   # {"A": "1.0.0", "B": "1.2.5"}

On failure a :class:`~versionkit.exceptions.VersionConflictError` carries
the whole conflict map and an explanation of every clash.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Union,
)

from versionkit.config import VersionKitConfig
from versionkit.constants import DEFAULT_GROUP
from versionkit.models.version import Version
from versionkit.models.conflict import Conflict
from versionkit.models.dependency import Dependency, SpecGroup
from versionkit.utils.logger import get_logger
from versionkit.core.data_store import DataProviderCache
from versionkit.core.data_provider import DataProvider, ResolverDelegate
from versionkit.exceptions import (
    NoMatchingVersionError,
    ResolutionTooDeepError,
    VersionConflictError,
)

logger = get_logger("resolver")

# Public API
__all__ = [
    "Resolver",
    "ResolutionResult",
    "Activation",
    "SortKey",
    "default_sort_key",
]

DependencyLike = Union[str, Dependency]
GroupsLike = Union[
    Mapping[str, Iterable[DependencyLike]], Iterable[DependencyLike], DependencyLike
]

# ---------------------------------------------------------------------------
# Search outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Solved:
    """Every queued requirement is satisfied by ``activated``."""

    activated: Dict[str, SpecGroup]


@dataclass(frozen=True)
class _Backtrack:
    """Unwind to the decision point named ``target``.

    ``conflict`` names the library whose clash caused the jump; the
    receiving frame adds it to its own conflict set.
    """

    target: str
    conflict: Optional[str] = None


@dataclass(frozen=True)
class _Failed:
    """The attempt failed without demanding a jump elsewhere."""

    conflict: Optional[str] = None


_Outcome = Union[_Solved, _Backtrack, _Failed]


# ---------------------------------------------------------------------------
# Resolution result models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Activation:
    """The version chosen for a library and the platform it was chosen for."""

    version: Version
    platform: Optional[str] = None


@dataclass
class ResolutionResult:
    """Complete result of a successful resolution.

    Attributes:
        activations_by_group: Group name → library name → activation, for
            every library reachable from that group's roots.
        activated: The shared activation set across all groups.
        iterations: Search iterations performed.
    """

    activations_by_group: Dict[str, Dict[str, Activation]]
    activated: Dict[str, SpecGroup] = field(default_factory=dict)
    iterations: int = 0

    def versions(self, group: str = DEFAULT_GROUP) -> Dict[str, str]:
        """Return ``{library: version}`` for one group.

        Raises:
            KeyError: ``group`` was not part of the resolution.
        """
        return {
            name: str(activation.version)
            for name, activation in self.activations_by_group[group].items()
        }

    def summary(self) -> str:
        """Generate a human-readable summary of the resolution.

        Example::

            >>> print(result.summary())
            Resolution Summary:
            ==================================================
            Groups resolved: 1
            Libraries activated: 2
            Iterations: 5
            ...
        """
        lines = [
            "Resolution Summary:",
            "=" * 50,
            f"Groups resolved: {len(self.activations_by_group)}",
            f"Libraries activated: {len(self.activated)}",
            f"Iterations: {self.iterations}",
        ]

        for group, activations in self.activations_by_group.items():
            lines.append("")
            lines.append(f"Group {group}:")
            for name, activation in activations.items():
                suffix = f" [{activation.platform}]" if activation.platform else ""
                lines.append(f"  • {name} {activation.version}{suffix}")

        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "groups": {
                group: {
                    name: {
                        "version": str(activation.version),
                        "platform": activation.platform,
                    }
                    for name, activation in activations.items()
                }
                for group, activations in self.activations_by_group.items()
            },
            "iterations": self.iterations,
        }


# ---------------------------------------------------------------------------
# Requirement ordering
# ---------------------------------------------------------------------------

#: Callable ranking a pending dependency; lower keys are processed first.
SortKey = Callable[[Dependency, "Resolver", Mapping[str, SpecGroup]], Any]


def default_sort_key(
    dependency: Dependency,
    resolver: "Resolver",
    activated: Mapping[str, SpecGroup],
) -> Any:
    """Rank dependencies so the easiest to resolve come first.

    Easiest means, in order: already activated, not asking for a
    pre-release, no conflict recorded so far, fewest matching versions.
    """
    is_activated = dependency.name in activated
    return (
        0 if is_activated else 1,
        1 if dependency.is_pre_release else 0,
        1 if dependency.name in resolver.errors else 0,
        0 if is_activated else resolver.candidate_count(dependency),
    )


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class Resolver:
    """Resolve dependency groups with conflict-directed backjumping.

    A resolver owns all of its search state (the conflict map, the
    decision stack and the memoized searches) and is not meant to be
    shared between threads.

    Args:
        data_provider: Source of versions and dependencies. A bare
            :class:`DataProvider` is wrapped in a :class:`DataProviderCache`.
        delegate: Receives lifecycle and progress notifications.
        config: Resolver tuning; defaults to :class:`VersionKitConfig`.
        sort_key: Ordering heuristic for pending requirements. Only the
            search order depends on it, so swapping it may change which
            of several valid resolutions is found.

    Raises:
        TypeError: If ``data_provider`` is ``None``.

    Example::

        >>> resolver = Resolver(provider, delegate=MyDelegate())
        >>> result = resolver.resolve({"app": ["A (>= 1.0)"], "test": ["T"]})
        >>> print(result.summary())
    """

    def __init__(
        self,
        data_provider: Union[DataProvider, DataProviderCache],
        delegate: Optional[ResolverDelegate] = None,
        *,
        config: Optional[VersionKitConfig] = None,
        sort_key: Optional[SortKey] = None,
    ) -> None:
        if data_provider is None:
            raise TypeError("data_provider must not be None; pass a DataProvider instance")

        if isinstance(data_provider, DataProviderCache):
            self.cache = data_provider
        else:
            self.cache = DataProviderCache(data_provider)

        self.delegate: ResolverDelegate = delegate or ResolverDelegate()
        self.config: VersionKitConfig = config or VersionKitConfig()
        self.sort_key: SortKey = sort_key or default_sort_key

        # Library name → most recent conflict; most recent entry last
        self.errors: Dict[str, Conflict] = {}

        self._stack: List[str] = []
        self._group: str = DEFAULT_GROUP
        self._search_results: Dict[Dependency, List[Version]] = {}
        self._candidate_counts: Dict[Dependency, int] = {}

        self._iteration_counter: int = 0
        self._iteration_rate: Optional[int] = None
        self._started_at: float = 0.0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def iterations(self) -> int:
        return self._iteration_counter

    def resolve(self, dependencies_by_group: GroupsLike) -> ResolutionResult:
        """Resolve every group and return the shared activation.

        Args:
            dependencies_by_group: Mapping of group name to its root
                dependencies, or a flat iterable of root dependencies for
                a single :data:`DEFAULT_GROUP`. A lone dependency is one root.
                Dependencies may be given as strings such as ``"A (>= 1.0)"``.

        Returns:
            :class:`ResolutionResult` with the activation of every group.

        Raises:
            NoMatchingVersionError: A root dependency has no matching version.
            VersionConflictError: No consistent activation exists.
            ResolutionTooDeepError: ``max_iterations`` was exceeded.
        """
        groups = self._coerce_groups(dependencies_by_group)

        self.errors = {}
        self._iteration_counter = 0
        self._iteration_rate = None
        self._started_at = time.monotonic()

        activated: Dict[str, SpecGroup] = {}
        activations_by_group: Dict[str, Dict[str, Activation]] = {}

        for group_name, roots in groups.items():
            self.delegate.on_group_resolution_start(group_name)
            try:
                logger.info(
                    "Resolving group %s (%d root dependencies)", group_name, len(roots)
                )
                activated = self._resolve_group(group_name, roots, activated)
            finally:
                self.delegate.on_group_resolution_end()

            activations_by_group[group_name] = self._group_activations(roots, activated)
            logger.info(
                "Resolved group %s: %d libraries",
                group_name,
                len(activations_by_group[group_name]),
            )

        return ResolutionResult(
            activations_by_group=activations_by_group,
            activated=activated,
            iterations=self._iteration_counter,
        )

    def candidate_count(self, dependency: Dependency) -> int:
        """Return how many versions could satisfy ``dependency``.

        Libraries with a single available version count as one without
        running a search.
        """
        if dependency not in self._candidate_counts:
            self._prime_candidate_counts([dependency])
        return self._candidate_counts[dependency]

    def search(self, dependency: Dependency) -> List[Version]:
        """Return the versions satisfying ``dependency``, highest first."""
        if dependency not in self._search_results:
            self._search_results[dependency] = [
                version
                for version in self.cache.sorted_versions(dependency.name)
                if dependency.satisfied_by(version)
            ]
        return self._search_results[dependency]

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce_groups(dependencies_by_group: GroupsLike) -> Dict[str, List[Dependency]]:
        if isinstance(dependencies_by_group, Mapping):
            items = dependencies_by_group.items()
        elif isinstance(dependencies_by_group, (str, Dependency)):
            items = [(DEFAULT_GROUP, [dependencies_by_group])]
        else:
            items = [(DEFAULT_GROUP, dependencies_by_group)]

        groups: Dict[str, List[Dependency]] = {}
        for group_name, dependencies in items:
            roots = [Dependency.coerce(dep) for dep in dependencies]
            groups[group_name] = [
                dep if dep.is_root else dep.with_required_by(()) for dep in roots
            ]
        return groups

    def _resolve_group(
        self,
        group_name: str,
        roots: Sequence[Dependency],
        activated: Dict[str, SpecGroup],
    ) -> Dict[str, SpecGroup]:
        self._group = group_name
        self._stack = []

        outcome = self._resolve(list(roots), dict(activated), depth=0)
        if isinstance(outcome, _Solved):
            return outcome.activated

        if isinstance(outcome, _Backtrack):
            logger.debug(
                "Jump to %s escaped group %s", outcome.target, group_name
            )
        raise self._version_conflict(group_name)

    def _group_activations(
        self,
        roots: Sequence[Dependency],
        activated: Mapping[str, SpecGroup],
    ) -> Dict[str, Activation]:
        """Collect the activations reachable from ``roots``."""
        result: Dict[str, Activation] = {}
        pending = [dep.name for dep in roots]

        while pending:
            name = pending.pop(0)
            if name in result or name not in activated:
                continue
            spec_group = activated[name]
            result[name] = Activation(spec_group.version, spec_group.platform)
            pending.extend(
                dep.name for dep in spec_group.dependencies_for(spec_group.platform)
            )

        return result

    def _version_conflict(self, group_name: str) -> VersionConflictError:
        names = ", ".join(self.errors) or "<unknown>"
        return VersionConflictError(
            f"Unable to resolve dependencies of group `{group_name}`; "
            f"conflicting libraries: {names}",
            conflicts=self.errors,
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _resolve(
        self,
        reqs: List[Dependency],
        activated: Dict[str, SpecGroup],
        depth: int,
    ) -> _Outcome:
        """Process queued requirements until a new decision is needed."""
        while True:
            self._indicate_progress()

            if not reqs:
                return _Solved(activated)

            self._prime_candidate_counts(
                [dep for dep in reqs if dep.name not in activated]
            )
            reqs = sorted(reqs, key=lambda dep: self.sort_key(dep, self, activated))
            current = reqs.pop(0)

            if self.config.debug_tree:
                logger.debug("%s%s", "  " * depth, current)

            existing = activated.get(current.name)
            if existing is None:
                return self._try_candidates(current, reqs, activated, depth)

            if not current.satisfied_by(existing.version):
                return self._activation_conflict(current, existing)

    def _activation_conflict(self, current: Dependency, existing: SpecGroup) -> _Outcome:
        """Handle a requirement rejected by the version already activated."""
        logger.debug("Conflict: %s rejects activated %s", current, existing)
        self._record_conflict(current.name, Conflict(existing, current))

        # Retry the parent of the failing requirement; a root requirement
        # instead retries the decision that activated the existing version.
        if current.required_by:
            parent: Optional[Dependency] = current.required_by[-1]
        else:
            parent = existing.activated_by

        if parent is None:
            raise self._version_conflict(self._group)

        activator = existing.activated_by
        logger.debug("Jumping to %s", parent.name)
        return _Backtrack(parent.name, activator.name if activator else None)

    def _try_candidates(
        self,
        current: Dependency,
        reqs: List[Dependency],
        activated: Dict[str, SpecGroup],
        depth: int,
    ) -> _Outcome:
        """Try each matching version of ``current``, highest first."""
        conflicts: Set[str] = set()
        candidates = self.search(current)

        if not candidates:
            if current.is_root:
                available = [str(v) for v in self.cache.sorted_versions(current.name)]
                raise NoMatchingVersionError(
                    f"Could not find a version of `{current.name}` "
                    f"matching `{current.requirement_list or 'any version'}`",
                    name=current.name,
                    requirement=str(current.requirement_list),
                    available=available,
                )
            logger.debug("No version of %s matches %s", current.name, current)
            self._record_conflict(current.name, Conflict(None, current))

        for version in candidates:
            outcome = self._resolve_requirement(version, current, reqs, activated, depth)
            if isinstance(outcome, _Failed):
                if outcome.conflict is not None:
                    conflicts.add(outcome.conflict)
                continue
            return outcome

        if not conflicts:
            return _Failed()

        if not current.is_root:
            parent_name = current.required_by[-1].name
            for name in reversed(list(self.errors)):
                if name not in conflicts:
                    continue
                # The closest decision point that can influence the conflict
                pivots = [entry for entry in self._stack if entry in (name, parent_name)]
                target = pivots[-1] if pivots else parent_name
                logger.debug("Jumping to %s over conflict on %s", target, name)
                return _Backtrack(target, name)
            return _Failed()

        for savepoint in reversed(self._stack):
            if savepoint in conflicts:
                logger.debug("Jumping to %s", savepoint)
                return _Backtrack(savepoint)
        return _Failed()

    def _resolve_requirement(
        self,
        version: Version,
        requirement: Dependency,
        reqs: List[Dependency],
        activated: Dict[str, SpecGroup],
        depth: int,
    ) -> _Outcome:
        """Activate ``version`` for ``requirement`` and search below it."""
        chain = requirement.required_by + (requirement,)
        spec_group = SpecGroup(
            requirement.name,
            version,
            dependencies=list(self.cache.dependencies_of(requirement.name, version)),
            required_by=chain,
            platform=requirement.platform,
        )

        if not self.delegate.validate_version_for_group(version, self._group):
            logger.debug("Delegate rejected %s for group %s", spec_group, self._group)
            self._record_conflict(
                requirement.name, Conflict(spec_group, requirement, rejected=True)
            )
            return _Failed(requirement.name)

        logger.debug("Activating %s", spec_group)

        activated = dict(activated)
        activated[requirement.name] = spec_group
        reqs = list(reqs)
        reqs.extend(
            dep.with_required_by(chain)
            for dep in spec_group.dependencies_for(requirement.platform)
        )

        # Push/pop may not pair up across jumps, so truncate to the saved length
        length = len(self._stack)
        self._stack.append(requirement.name)
        try:
            outcome = self._resolve(reqs, activated, depth + 1)
        finally:
            del self._stack[length:]

        if isinstance(outcome, _Backtrack) and outcome.target == requirement.name:
            return _Failed(outcome.conflict)
        return outcome

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _record_conflict(self, name: str, conflict: Conflict) -> None:
        """Store ``conflict`` as the most recent entry for ``name``."""
        self.errors.pop(name, None)
        self.errors[name] = conflict

    def _prime_candidate_counts(self, dependencies: Iterable[Dependency]) -> None:
        pending = [dep for dep in dependencies if dep not in self._candidate_counts]
        if not pending:
            return

        unique = set(
            self.cache.libraries_with_unique_versions(dep.name for dep in pending)
        )
        for dep in pending:
            if dep.name in unique:
                self._candidate_counts[dep] = 1
            else:
                self._candidate_counts[dep] = len(self.search(dep))

    def _indicate_progress(self) -> None:
        """Count an iteration and tick the delegate at the calibrated rate.

        The rate is the number of iterations performed during the first
        ``progress_interval`` seconds, so ticks arrive roughly that often.
        """
        self._iteration_counter += 1

        max_iterations = self.config.max_iterations
        if max_iterations and self._iteration_counter > max_iterations:
            raise ResolutionTooDeepError(
                f"Resolution aborted after {max_iterations} iterations",
                iterations=max_iterations,
            )

        if self._iteration_rate is None:
            elapsed = time.monotonic() - self._started_at
            if elapsed >= self.config.progress_interval:
                self._iteration_rate = self._iteration_counter
                logger.debug(
                    "Progress ticks every %d iterations", self._iteration_rate
                )
        elif self._iteration_counter % self._iteration_rate == 0:
            self.delegate.on_progress_tick()
