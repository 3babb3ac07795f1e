"""Unit tests for versionkit.core.resolver module.

Test Coverage:
- Resolver construction and collaborator wiring
- Highest-version selection and the optimistic operator
- Backtracking to lower versions and conflict-directed backjumping
- Conflict aggregation and explanations
- Multi-group resolution sharing one activation
- Delegate hooks (group lifecycle, progress ticks, version veto)
- Iteration ceiling and requirement tree logging
- ResolutionResult rendering
"""

from __future__ import annotations

import logging
from typing import Dict, Generator, List, Tuple

import pytest

from versionkit.config import VersionKitConfig
from versionkit.models.version import Version
from versionkit.models.dependency import Dependency, SpecGroup
from versionkit.core.data_store import DataProviderCache
from versionkit.core.data_provider import ResolverDelegate, StaticDataProvider
from versionkit.core.resolver import (
    Activation,
    ResolutionResult,
    Resolver,
    default_sort_key,
)
from versionkit.exceptions import (
    NoMatchingVersionError,
    ResolutionTooDeepError,
    VersionConflictError,
)


# ============================================================================
# Helpers
# ============================================================================


class RecordingDelegate(ResolverDelegate):
    """Delegate that records every hook call and can veto versions."""

    def __init__(self, reject: Tuple[str, ...] = ()) -> None:
        self.events: List[str] = []
        self.validated: List[Version] = []
        self.ticks = 0
        self.reject = {Version.parse(v) for v in reject}

    def on_group_resolution_start(self, group_name: str) -> None:
        self.events.append(f"start:{group_name}")

    def on_group_resolution_end(self) -> None:
        self.events.append("end")

    def on_progress_tick(self) -> None:
        self.ticks += 1

    def validate_version_for_group(self, version: Version, group: str) -> bool:
        self.validated.append(version)
        return version not in self.reject


def fifo(dependency, resolver, activated) -> int:
    """Sort key keeping pending requirements in insertion order."""
    return 0


def resolve(
    libraries: Dict[str, Dict[str, List[str]]],
    roots,
    **kwargs,
) -> ResolutionResult:
    return Resolver(StaticDataProvider(libraries), **kwargs).resolve(roots)


@pytest.fixture
def basic_libraries() -> Dict[str, Dict[str, List[str]]]:
    """A depends on B through an optimistic requirement."""
    return {
        "A": {"1.0.0": ["B (~> 1.2.0)"]},
        "B": {"1.2.0": [], "1.2.5": [], "1.3.0": []},
    }


@pytest.fixture
def diamond_conflict() -> Dict[str, Dict[str, List[str]]]:
    """B and C demand different exact versions of D."""
    return {
        "A": {"1.0.0": ["B", "C"]},
        "B": {"1.0.0": ["D (= 1.0)"]},
        "C": {"1.0.0": ["D (= 2.0)"]},
        "D": {"1.0.0": [], "2.0.0": []},
    }


@pytest.fixture
def resolver_records() -> Generator[List[logging.LogRecord], None, None]:
    """Capture records emitted by the resolver logger at DEBUG."""
    records: List[logging.LogRecord] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    target = logging.getLogger("versionkit.resolver")
    handler = _ListHandler(level=logging.DEBUG)
    previous = target.level
    target.addHandler(handler)
    target.setLevel(logging.DEBUG)

    yield records

    target.removeHandler(handler)
    target.setLevel(previous)


# ============================================================================
# Construction
# ============================================================================


@pytest.mark.unit
class TestResolverInit:
    """Tests for Resolver construction."""

    def test_none_provider_raises_type_error(self) -> None:
        """Test a missing data provider is rejected."""
        with pytest.raises(TypeError, match="data_provider must not be None"):
            Resolver(None)  # type: ignore[arg-type]

    def test_wraps_provider_in_cache(self) -> None:
        """Test a bare provider is wrapped in a DataProviderCache."""
        provider = StaticDataProvider()

        resolver = Resolver(provider)

        assert isinstance(resolver.cache, DataProviderCache)
        assert resolver.cache.data_provider is provider

    def test_uses_given_cache(self) -> None:
        """Test an existing cache is used as is."""
        cache = DataProviderCache(StaticDataProvider())

        assert Resolver(cache).cache is cache

    def test_defaults(self) -> None:
        """Test delegate, config and sort key default sensibly."""
        resolver = Resolver(StaticDataProvider())

        assert isinstance(resolver.delegate, ResolverDelegate)
        assert resolver.config == VersionKitConfig()
        assert resolver.sort_key is default_sort_key
        assert resolver.errors == {}
        assert resolver.iterations == 0


# ============================================================================
# Successful resolution
# ============================================================================


@pytest.mark.unit
class TestResolveSuccess:
    """Tests for resolutions that find a consistent activation."""

    def test_selects_highest_matching_version(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test ``~> 1.2.0`` selects the newest 1.2.x release."""
        result = resolve(basic_libraries, {"default": ["A"]})

        assert result.versions("default") == {"A": "1.0.0", "B": "1.2.5"}

    def test_short_optimistic_requirement_allows_minor(self) -> None:
        """Test ``~> 1.2`` admits the next minor version."""
        libraries = {
            "A": {"1.0.0": ["B (~> 1.2)"]},
            "B": {"1.2.0": [], "1.2.5": [], "1.3.0": [], "2.0.0": []},
        }

        result = resolve(libraries, ["A"])

        assert result.versions()["B"] == "1.3.0"

    def test_flat_list_resolves_default_group(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test a flat dependency list is resolved as the default group."""
        result = resolve(basic_libraries, ["A"])

        assert list(result.activations_by_group) == ["default"]

    @pytest.mark.parametrize("root", ["A (>= 1.0)", Dependency("A", ">= 1.0")])
    def test_single_root_not_split(
        self, basic_libraries: Dict[str, Dict[str, List[str]]], root
    ) -> None:
        """Test one string or Dependency is a single root, not an iterable."""
        result = resolve(basic_libraries, root)

        assert result.versions() == {"A": "1.0.0", "B": "1.2.5"}

    def test_accepts_dependency_objects(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test roots may be Dependency objects with a requirement list."""
        result = resolve(basic_libraries, [Dependency("B", "< 1.2.5")])

        assert result.versions() == {"B": "1.2.0"}

    def test_root_with_chain_treated_as_root(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test a root dependency carrying a stale chain is reset to a root."""
        stale = Dependency("B").with_required_by([Dependency("X")])

        result = resolve(basic_libraries, [stale])

        assert result.versions() == {"B": "1.3.0"}

    def test_backtracks_to_lower_version(self) -> None:
        """Test a conflicting candidate is abandoned for a lower version."""
        libraries = {
            "A": {"1.0.0": ["C (= 2.0)"], "2.0.0": ["C (= 1.0)"]},
            "B": {"1.0.0": ["C (= 2.0)"]},
            "C": {"1.0.0": [], "2.0.0": []},
        }

        result = resolve(libraries, ["A", "B"])

        assert result.versions() == {"A": "1.0.0", "B": "1.0.0", "C": "2.0.0"}

    def test_skips_candidate_with_unsatisfiable_dependency(self) -> None:
        """Test a version whose dependency has no match is skipped."""
        libraries = {
            "A": {"1.0.0": ["B (>= 1.0)"], "2.0.0": ["B (>= 5.0)"]},
            "B": {"1.0.0": []},
        }

        result = resolve(libraries, ["A"])

        assert result.versions() == {"A": "1.0.0", "B": "1.0.0"}

    def test_pre_release_candidates_are_considered(self) -> None:
        """Test pre-releases take part in the search like any version."""
        libraries = {"B": {"1.0.0": [], "2.0.0-rc.1": []}}

        result = resolve(libraries, ["B (>= 1.0)"])

        assert result.versions() == {"B": "2.0.0-rc.1"}

    def test_platform_selects_dependencies(self) -> None:
        """Test only dependencies for the requested platform are followed."""
        provider = StaticDataProvider()
        provider.add_version(
            "A",
            "1.0.0",
            [Dependency("W", platform="windows"), Dependency("L", platform="linux")],
        )
        provider.add_version("L", "1.0.0")

        result = Resolver(provider).resolve([Dependency("A", platform="linux")])

        activations = result.activations_by_group["default"]
        assert list(activations) == ["A", "L"]
        assert activations["A"] == Activation(Version("1.0.0"), "linux")

    def test_iterations_reported(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test the result carries the iteration count of the resolver."""
        resolver = Resolver(StaticDataProvider(basic_libraries))

        result = resolver.resolve(["A"])

        assert result.iterations == resolver.iterations == 3


# ============================================================================
# Failed resolution
# ============================================================================


@pytest.mark.unit
class TestResolveFailure:
    """Tests for resolutions that cannot succeed."""

    def test_missing_root_library(self) -> None:
        """Test an unknown root library raises NoMatchingVersionError."""
        with pytest.raises(NoMatchingVersionError) as exc_info:
            resolve({"A": {"1.0.0": []}}, ["Z"])

        assert exc_info.value.name == "Z"
        assert exc_info.value.available == []
        assert exc_info.value.details["available"] == "<none>"

    def test_root_requirement_matches_nothing(self) -> None:
        """Test a root requirement excluding every version is reported."""
        with pytest.raises(NoMatchingVersionError) as exc_info:
            resolve({"A": {"1.0.0": [], "1.1.0": []}}, ["A (>= 5.0)"])

        assert exc_info.value.requirement == ">= 5.0.0"
        assert exc_info.value.available == ["1.1.0", "1.0.0"]

    def test_sibling_requirements_conflict(self) -> None:
        """Test two roots demanding incompatible versions of one library."""
        libraries = {
            "A": {"1.0.0": ["B (>= 1.0)"]},
            "C": {"1.0.0": ["B (< 1.0)"]},
            "B": {"0.9.0": [], "1.0.0": [], "2.0.0": []},
        }

        with pytest.raises(VersionConflictError) as exc_info:
            resolve(libraries, ["A", "C"])

        assert exc_info.value.names == ["B"]
        explanation = exc_info.value.explanation
        assert "B (>= 1.0.0)" in explanation
        assert "B (< 1.0.0)" in explanation

    def test_diamond_conflict(
        self, diamond_conflict: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test transitive exact pins on D cannot be reconciled."""
        with pytest.raises(VersionConflictError) as exc_info:
            resolve(diamond_conflict, ["A"])

        assert exc_info.value.names == ["D"]
        conflict = exc_info.value.conflicts["D"]
        assert conflict.existing is not None
        assert str(conflict.existing.version) == "1.0.0"
        assert conflict.requirement.chain_description() == "A -> C"

    def test_backjump_skips_unrelated_decision(
        self, diamond_conflict: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test alternatives of a library unrelated to the conflict are skipped.

        U is decided between B and C but plays no part in the clash on D,
        so its lower version must never be tried.
        """
        libraries = dict(diamond_conflict)
        libraries["A"] = {"1.0.0": ["B", "U", "C"]}
        libraries["U"] = {"5.0.0": [], "6.0.0": []}
        delegate = RecordingDelegate()

        with pytest.raises(VersionConflictError):
            resolve(libraries, ["A"], delegate=delegate, sort_key=fifo)

        assert Version("6.0.0") in delegate.validated
        assert Version("5.0.0") not in delegate.validated

    def test_conflicting_roots_explained(self) -> None:
        """Test two root requirements on one library produce a full report."""
        libraries = {"B": {"1.0.0": [], "2.0.0": []}}

        with pytest.raises(VersionConflictError) as exc_info:
            resolve(libraries, ["B (>= 2.0)", "B (< 2.0)"])

        assert exc_info.value.conflicts["B"].lines() == [
            "- `B (< 2.0.0)` required at the top level",
            "- `B (>= 2.0.0)` required at the top level, activated at `2.0.0`",
        ]

    def test_transitive_dependency_without_versions(self) -> None:
        """Test a dependency with no acceptable version is recorded."""
        libraries = {"A": {"1.0.0": ["B (>= 5.0)"]}, "B": {"1.0.0": []}}

        with pytest.raises(VersionConflictError) as exc_info:
            resolve(libraries, ["A"])

        conflict = exc_info.value.conflicts["B"]
        assert conflict.existing is None
        assert "no available version of `B` satisfies it" in conflict.explanation()

    def test_error_message_names_group(
        self, diamond_conflict: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test the error message names the failing group and libraries."""
        with pytest.raises(VersionConflictError) as exc_info:
            resolve(diamond_conflict, {"app": ["A"]})

        assert exc_info.value.message == (
            "Unable to resolve dependencies of group `app`; "
            "conflicting libraries: D"
        )

    def test_errors_reset_between_resolutions(
        self, diamond_conflict: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test conflicts from a previous resolve() do not leak."""
        resolver = Resolver(StaticDataProvider(diamond_conflict))

        with pytest.raises(VersionConflictError):
            resolver.resolve(["A"])
        resolver.resolve(["B"])

        assert resolver.errors == {}


# ============================================================================
# Determinism and decision stack
# ============================================================================


class StackSnapshotDelegate(ResolverDelegate):
    """Delegate recording the decision stack each time a version is offered."""

    def __init__(self) -> None:
        self.resolver: Resolver = None  # type: ignore[assignment]
        self.snapshots: List[Tuple[str, Tuple[str, ...]]] = []

    def validate_version_for_group(self, version: Version, group: str) -> bool:
        self.snapshots.append((str(version), tuple(self.resolver._stack)))
        return True


def chosen(result: ResolutionResult) -> Dict[str, str]:
    return {name: str(spec.version) for name, spec in result.activated.items()}


@pytest.mark.unit
class TestDeterminism:
    """Tests that identical input always yields the identical answer."""

    @pytest.fixture
    def backtracking_libraries(self) -> Dict[str, Dict[str, List[str]]]:
        return {
            "A": {"1.0.0": ["C (= 2.0)"], "2.0.0": ["C (= 1.0)"]},
            "B": {"1.0.0": ["C (= 2.0)"]},
            "C": {"1.0.0": [], "2.0.0": []},
            "D": {"1.0.0": [], "1.4.2": [], "2.0.0": []},
        }

    def test_fresh_resolvers_agree(
        self, backtracking_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        groups = {"default": ["A", "B"], "extra": ["D (~> 1.0)"]}

        first = resolve(backtracking_libraries, groups)
        second = resolve(backtracking_libraries, groups)

        assert chosen(first) == chosen(second)
        assert list(first.activated) == list(second.activated)
        assert first.versions() == second.versions()
        assert first.versions("extra") == second.versions("extra")
        assert first.iterations == second.iterations

    def test_same_resolver_twice(
        self, backtracking_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test the caches of a previous run do not change the answer."""
        resolver = Resolver(StaticDataProvider(backtracking_libraries))

        first = resolver.resolve(["A", "B"])
        second = resolver.resolve(["A", "B"])

        assert chosen(first) == chosen(second) == {
            "A": "1.0.0",
            "B": "1.0.0",
            "C": "2.0.0",
        }
        assert first.to_json() == second.to_json()

    def test_conflicts_repeat(
        self, diamond_conflict: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test a failing input reports the same conflicts every time."""
        explanations = []
        for _ in range(2):
            with pytest.raises(VersionConflictError) as exc_info:
                resolve(diamond_conflict, ["A"])
            explanations.append((exc_info.value.names, exc_info.value.explanation))

        assert explanations[0] == explanations[1]


@pytest.mark.unit
class TestDecisionStack:
    """Tests that every attempt leaves the decision stack as it found it."""

    def make_resolver(self, libraries, **kwargs) -> Tuple[Resolver, StackSnapshotDelegate]:
        delegate = StackSnapshotDelegate()
        resolver = Resolver(StaticDataProvider(libraries), delegate=delegate, **kwargs)
        delegate.resolver = resolver
        return resolver, delegate

    def test_empty_after_success(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        resolver, _ = self.make_resolver(basic_libraries)

        resolver.resolve(["A"])

        assert resolver._stack == []

    def test_empty_after_conflict(
        self, diamond_conflict: Dict[str, Dict[str, List[str]]]
    ) -> None:
        resolver, _ = self.make_resolver(diamond_conflict)

        with pytest.raises(VersionConflictError):
            resolver.resolve(["A"])

        assert resolver._stack == []

    def test_empty_after_iteration_ceiling(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        resolver, _ = self.make_resolver(
            basic_libraries, config=VersionKitConfig(max_iterations=1)
        )

        with pytest.raises(ResolutionTooDeepError):
            resolver.resolve(["A"])

        assert resolver._stack == []

    def test_alternatives_see_same_stack(self) -> None:
        """Test each candidate of a backtracked decision starts from one stack.

        A is decided first, so both of its versions must be offered with an
        empty stack and every deeper decision must sit on top of A.
        """
        libraries = {
            "A": {"1.0.0": ["C (= 2.0)"], "2.0.0": ["C (= 1.0)"]},
            "B": {"1.0.0": ["C (= 2.0)"]},
            "C": {"1.0.0": [], "2.0.0": []},
        }
        resolver, delegate = self.make_resolver(libraries, sort_key=fifo)

        result = resolver.resolve(["A", "B"])

        assert result.versions()["A"] == "1.0.0"
        assert [version for version, stack in delegate.snapshots if not stack] == [
            "2.0.0",
            "1.0.0",
        ]
        assert all(stack[0] == "A" for _, stack in delegate.snapshots if stack)
        assert resolver._stack == []


# ============================================================================
# Groups
# ============================================================================


@pytest.mark.unit
class TestMultiGroup:
    """Tests for resolving several groups against one activation."""

    @pytest.fixture
    def libraries(self) -> Dict[str, Dict[str, List[str]]]:
        return {
            "A": {"1.0.0": ["B (>= 1.0)"]},
            "B": {"1.0.0": [], "2.0.0": []},
            "T": {"1.0.0": ["B (< 3.0)"]},
        }

    def test_groups_share_activations(
        self, libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test a library shared by groups has one version everywhere."""
        result = resolve(libraries, {"default": ["A"], "test": ["T"]})

        assert result.versions("default") == {"A": "1.0.0", "B": "2.0.0"}
        assert result.versions("test") == {"T": "1.0.0", "B": "2.0.0"}
        assert set(result.activated) == {"A", "B", "T"}

    def test_later_group_cannot_change_earlier_choice(
        self, libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test a later group conflicting with an earlier activation fails."""
        with pytest.raises(VersionConflictError) as exc_info:
            resolve(libraries, {"default": ["A"], "test": ["B (< 2.0)"]})

        assert "group `test`" in exc_info.value.message
        assert exc_info.value.names == ["B"]

    def test_unknown_group_lookup(
        self, libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test versions() raises KeyError for a group never resolved."""
        result = resolve(libraries, ["A"])

        with pytest.raises(KeyError):
            result.versions("missing")

    def test_group_hooks_called_in_order(
        self, libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test start and end hooks bracket every group."""
        delegate = RecordingDelegate()

        resolve(libraries, {"default": ["A"], "test": ["T"]}, delegate=delegate)

        assert delegate.events == ["start:default", "end", "start:test", "end"]

    def test_end_hook_called_on_failure(
        self, diamond_conflict: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test the end hook runs even when the group fails."""
        delegate = RecordingDelegate()

        with pytest.raises(VersionConflictError):
            resolve(diamond_conflict, ["A"], delegate=delegate)

        assert delegate.events == ["start:default", "end"]


# ============================================================================
# Delegate veto and progress
# ============================================================================


@pytest.mark.unit
class TestDelegate:
    """Tests for delegate-driven behaviour."""

    def test_veto_selects_next_version(self) -> None:
        """Test a rejected candidate is skipped for the next highest."""
        delegate = RecordingDelegate(reject=("2.0.0",))

        result = resolve(
            {"A": {"1.0.0": [], "2.0.0": []}}, ["A"], delegate=delegate
        )

        assert result.versions() == {"A": "1.0.0"}
        assert delegate.validated == [Version("2.0.0"), Version("1.0.0")]

    def test_veto_of_every_version_fails(self) -> None:
        """Test rejecting the only candidate is reported as a conflict."""
        delegate = RecordingDelegate(reject=("1.0.0",))

        with pytest.raises(VersionConflictError) as exc_info:
            resolve({"A": {"1.0.0": []}}, ["A"], delegate=delegate)

        conflict = exc_info.value.conflicts["A"]
        assert conflict.rejected is True
        assert "version `1.0.0` was rejected for this group" in conflict.explanation()

    def test_progress_ticks_after_calibration(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test a zero interval ticks on every iteration after the first."""
        delegate = RecordingDelegate()
        config = VersionKitConfig(progress_interval=0.0)

        result = resolve(basic_libraries, ["A"], delegate=delegate, config=config)

        assert delegate.ticks == result.iterations - 1

    def test_max_iterations_aborts(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test exceeding max_iterations raises ResolutionTooDeepError."""
        delegate = RecordingDelegate()
        config = VersionKitConfig(max_iterations=1)

        with pytest.raises(ResolutionTooDeepError) as exc_info:
            resolve(basic_libraries, ["A"], delegate=delegate, config=config)

        assert exc_info.value.iterations == 1
        assert delegate.events == ["start:default", "end"]

    def test_max_iterations_zero_is_unlimited(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test zero disables the ceiling."""
        result = resolve(
            basic_libraries, ["A"], config=VersionKitConfig(max_iterations=0)
        )

        assert result.versions()["B"] == "1.2.5"


@pytest.mark.unit
class TestDebugTree:
    """Tests for requirement tree logging."""

    def test_tree_logged_when_enabled(
        self,
        basic_libraries: Dict[str, Dict[str, List[str]]],
        resolver_records: List[logging.LogRecord],
    ) -> None:
        """Test each processed requirement is logged, indented by depth."""
        resolve(basic_libraries, ["A"], config=VersionKitConfig(debug_tree=True))

        messages = [record.getMessage() for record in resolver_records]
        assert "A" in messages
        assert "  B (~> 1.2.0)" in messages

    def test_tree_not_logged_by_default(
        self,
        basic_libraries: Dict[str, Dict[str, List[str]]],
        resolver_records: List[logging.LogRecord],
    ) -> None:
        """Test the tree is silent unless debug_tree is set."""
        resolve(basic_libraries, ["A"])

        messages = [record.getMessage() for record in resolver_records]
        assert "  B (~> 1.2.0)" not in messages


# ============================================================================
# Ordering and search
# ============================================================================


@pytest.mark.unit
class TestOrdering:
    """Tests for default_sort_key, candidate_count and search."""

    @pytest.fixture
    def resolver(self) -> Resolver:
        return Resolver(
            StaticDataProvider(
                {
                    "ONE": {"1.0.0": []},
                    "MANY": {"1.0.0": [], "2.0.0": [], "3.0.0": []},
                    "PRE": {"1.0.0-rc.1": [], "1.0.0": []},
                }
            )
        )

    def test_search_highest_first(self, resolver: Resolver) -> None:
        """Test search returns matching versions highest first."""
        dep = Dependency.from_string("MANY (>= 2.0)")

        assert [str(v) for v in resolver.search(dep)] == ["3.0.0", "2.0.0"]

    def test_search_memoized(self, resolver: Resolver) -> None:
        """Test equal dependencies share one search result."""
        first = resolver.search(Dependency.from_string("MANY (>= 2.0)"))

        assert resolver.search(Dependency.from_string("MANY (>= 2.0)")) is first

    def test_candidate_count_unique_library(self, resolver: Resolver) -> None:
        """Test a single-version library counts as one without searching."""
        dep = Dependency.from_string("ONE (>= 5.0)")

        assert resolver.candidate_count(dep) == 1
        assert resolver.search(dep) == []

    def test_candidate_count_searches(self, resolver: Resolver) -> None:
        """Test other libraries count their matching versions."""
        assert resolver.candidate_count(Dependency.from_string("MANY (< 3.0)")) == 2

    def test_activated_first(self, resolver: Resolver) -> None:
        """Test an already activated library sorts before everything else."""
        many = Dependency("MANY")
        one = Dependency("ONE")
        activated = {"MANY": SpecGroup("MANY", Version("3.0.0"))}

        ordered = sorted(
            [one, many], key=lambda d: default_sort_key(d, resolver, activated)
        )

        assert ordered == [many, one]

    def test_pre_release_requirements_last(self, resolver: Resolver) -> None:
        """Test a requirement on a pre-release sorts after stable ones."""
        pre = Dependency.from_string("PRE (>= 1.0.0-rc.1)")
        many = Dependency("MANY")

        ordered = sorted([pre, many], key=lambda d: default_sort_key(d, resolver, {}))

        assert ordered == [many, pre]

    def test_fewer_candidates_first(self, resolver: Resolver) -> None:
        """Test the most constrained dependency is processed first."""
        many = Dependency("MANY")
        one = Dependency("ONE")

        ordered = sorted([many, one], key=lambda d: default_sort_key(d, resolver, {}))

        assert ordered == [one, many]

    def test_recorded_errors_sort_later(self, resolver: Resolver) -> None:
        """Test a library with a recorded conflict is deferred."""
        one = Dependency("ONE")
        many = Dependency("MANY")
        resolver.errors["ONE"] = object()  # type: ignore[assignment]

        ordered = sorted([one, many], key=lambda d: default_sort_key(d, resolver, {}))

        assert ordered == [many, one]

    def test_custom_sort_key_used(
        self, basic_libraries: Dict[str, Dict[str, List[str]]]
    ) -> None:
        """Test a custom sort key is consulted for pending requirements."""
        seen: List[str] = []

        def key(dependency, resolver, activated):
            seen.append(dependency.name)
            return 0

        resolve(basic_libraries, ["A"], sort_key=key)

        assert seen == ["A", "B"]


# ============================================================================
# Result rendering
# ============================================================================


@pytest.mark.unit
class TestResolutionResult:
    """Tests for ResolutionResult rendering."""

    @pytest.fixture
    def result(self) -> ResolutionResult:
        return ResolutionResult(
            activations_by_group={
                "default": {
                    "A": Activation(Version("1.0.0")),
                    "B": Activation(Version("1.2.5"), "linux"),
                }
            },
            activated={
                "A": SpecGroup("A", Version("1.0.0")),
                "B": SpecGroup("B", Version("1.2.5")),
            },
            iterations=3,
        )

    def test_versions(self, result: ResolutionResult) -> None:
        """Test versions() maps library names to version strings."""
        assert result.versions() == {"A": "1.0.0", "B": "1.2.5"}

    def test_summary(self, result: ResolutionResult) -> None:
        """Test summary lists counts and every activation."""
        summary = result.summary()

        assert summary.splitlines()[:5] == [
            "Resolution Summary:",
            "=" * 50,
            "Groups resolved: 1",
            "Libraries activated: 2",
            "Iterations: 3",
        ]
        assert "Group default:" in summary
        assert "  • A 1.0.0" in summary
        assert "  • B 1.2.5 [linux]" in summary

    def test_to_json(self, result: ResolutionResult) -> None:
        """Test to_json produces plain serializable data."""
        assert result.to_json() == {
            "groups": {
                "default": {
                    "A": {"version": "1.0.0", "platform": None},
                    "B": {"version": "1.2.5", "platform": "linux"},
                }
            },
            "iterations": 3,
        }
