"""
Dependency and candidate models for versionkit.

A :class:`Dependency` names a library and constrains it with a
:class:`~versionkit.models.requirement.RequirementList`. It also carries the
``required_by`` chain of dependencies whose activation introduced it. The
resolver uses that chain to pick backjump targets and to explain conflicts;
it never affects whether a version satisfies the dependency.

A :class:`SpecGroup` is one candidate version of a library together with the
sub-dependencies it declares.

Typical usage::

    >>> dep = Dependency.from_string("B (>= 1.0, < 2.0)")
    >>> dep.satisfied_by("1.4.2")
    True
    >>> str(dep)
    'B (>= 1.0.0, < 2.0.0)'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple, Union

from versionkit.models.version import Version
from versionkit.models.requirement import RequirementList
from versionkit.exceptions import MalformedVersionError

__all__ = ["Dependency", "SpecGroup"]

_DEPENDENCY_RE = re.compile(r"\A\s*(?P<name>[^\s()]+)\s*(?:\((?P<requirements>[^()]*)\))?\s*\Z")


@dataclass(frozen=True)
class Dependency:
    """A named library constrained by a requirement list.

    Equality and hashing ignore ``required_by`` so that the same demand
    reached through different chains is treated as one dependency.

    Attributes:
        name: Library identifier.
        requirement_list: Constraints every activated version must meet.
        required_by: Dependencies whose activation introduced this one,
            outermost first. Empty for root dependencies.
        source: Opaque source tag passed through unchanged.
        platform: Platform tag used to select a candidate's dependencies.
    """

    name: str
    requirement_list: RequirementList = field(default_factory=RequirementList)
    required_by: Tuple["Dependency", ...] = field(default=(), compare=False, repr=False)
    source: Optional[str] = None
    platform: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.requirement_list, RequirementList):
            object.__setattr__(
                self, "requirement_list", RequirementList(self.requirement_list)
            )
        object.__setattr__(self, "required_by", tuple(self.required_by))

    @classmethod
    def from_string(cls, text: str, **kwargs: Any) -> "Dependency":
        """Parse ``"Name"`` or ``"Name (<requirement>, ...)"``.

        Raises:
            MalformedVersionError: The string is not in dependency form or
                one of its requirements has an invalid version.
            UnsupportedOperatorError: A requirement has an unknown operator.
        """
        match = _DEPENDENCY_RE.match(text)
        if not match:
            raise MalformedVersionError(f"Malformed dependency: {text!r}", version=text)
        return cls(
            match.group("name"),
            RequirementList(match.group("requirements") or None),
            **kwargs,
        )

    @classmethod
    def coerce(cls, value: Union[str, "Dependency"]) -> "Dependency":
        """Return ``value`` as a Dependency, parsing strings."""
        if isinstance(value, Dependency):
            return value
        return cls.from_string(value)

    @property
    def is_root(self) -> bool:
        """True when the dependency was requested directly."""
        return not self.required_by

    @property
    def is_pre_release(self) -> bool:
        return self.requirement_list.is_pre_release

    def satisfied_by(self, version: Union[str, Version]) -> bool:
        return self.requirement_list.satisfied_by(version)

    def with_required_by(self, chain: Iterable["Dependency"]) -> "Dependency":
        """Return a copy of this dependency introduced through ``chain``."""
        return Dependency(
            self.name,
            self.requirement_list,
            tuple(chain),
            self.source,
            self.platform,
        )

    def chain_description(self) -> str:
        """Render the requesting chain, e.g. ``"A (>= 1.0.0) -> B"``."""
        return " -> ".join(str(parent) for parent in self.required_by)

    def __str__(self) -> str:
        if not len(self.requirement_list):
            return self.name
        return f"{self.name} ({self.requirement_list})"


@dataclass
class SpecGroup:
    """A candidate version of a library and its declared dependencies.

    Attributes:
        name: Library identifier.
        version: Candidate version.
        dependencies: Sub-dependencies declared by this version.
        required_by: Chain that led to the activation, ending with the
            dependency that selected this candidate.
        platform: Platform tag of the activating dependency.
    """

    name: str
    version: Version
    dependencies: List[Dependency] = field(default_factory=list)
    required_by: Tuple[Dependency, ...] = ()
    platform: Optional[str] = None

    def dependencies_for(self, platform: Optional[str] = None) -> List[Dependency]:
        """Return the dependencies applying to ``platform``.

        A dependency without a platform tag applies everywhere.
        """
        return [
            dep
            for dep in self.dependencies
            if dep.platform is None or dep.platform == platform
        ]

    @property
    def activated_by(self) -> Optional[Dependency]:
        """The dependency whose requirement selected this candidate."""
        return self.required_by[-1] if self.required_by else None

    def __str__(self) -> str:
        return f"{self.name} {self.version}"
