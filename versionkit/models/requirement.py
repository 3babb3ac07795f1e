"""
Requirement models for versionkit.

A :class:`Requirement` pairs a comparison :class:`Operator` with a reference
:class:`~versionkit.models.version.Version`. A :class:`RequirementList` is
the conjunction of requirements attached to one dependency.

Supported operators: ``=``, ``!=``, ``>``, ``<``, ``>=``, ``<=`` and the
optimistic ``~>`` which allows any version up to the next significant
release of the reference, as written:

- ``~> 2.1``   matches ``>= 2.1.0`` and ``< 3.0.0``
- ``~> 2.1.0`` matches ``>= 2.1.0`` and ``< 2.2.0``
- ``~> 2``     matches ``>= 2.0.0`` and ``< 3.0.0``

Typical usage::

    >>> Requirement.parse("~> 2.1.0").satisfied_by("2.1.5")
    True
    >>> str(RequirementList(["> 1.2", "< 3"]))
    '> 1.2.0, < 3.0.0'
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from versionkit.models.version import Version
from versionkit.constants import DEFAULT_OPERATOR
from versionkit.exceptions import MalformedVersionError, UnsupportedOperatorError

__all__ = ["Operator", "Requirement", "RequirementList"]


class Operator(Enum):
    """Comparison operators understood by :class:`Requirement`."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    OPTIMISTIC = "~>"

    @classmethod
    def from_symbol(cls, symbol: str, *, requirement: Optional[str] = None) -> "Operator":
        """Look up an operator by its symbol.

        Raises:
            UnsupportedOperatorError: ``symbol`` is not a known operator.
        """
        try:
            return cls(symbol)
        except ValueError:
            raise UnsupportedOperatorError(
                f"Unsupported operator: {symbol!r}",
                operator=symbol,
                requirement=requirement,
            ) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class Requirement:
    """A single operator and reference version constraint.

    Attributes:
        operator: Comparison operator.
        version: Normalized reference version.
        precision: Numeric identifiers of the reference as written, e.g.
            ``(2, 1)`` for ``"2.1"``. Only ``~>`` depends on it.
    """

    operator: Operator
    version: Version
    precision: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not self.precision:
            object.__setattr__(self, "precision", self.version.number_component)

    @classmethod
    def parse(cls, text: Union[str, "Requirement"]) -> "Requirement":
        """Parse ``"<op> <version>"`` or a bare ``"<version>"``.

        Raises:
            UnsupportedOperatorError: Unknown operator token.
            MalformedVersionError: Missing, invalid or trailing version tokens.
        """
        if isinstance(text, Requirement):
            return text

        tokens = str(text).split()
        if not tokens:
            raise MalformedVersionError("Empty requirement", version=str(text))

        if len(tokens) == 1:
            symbol, raw_version = DEFAULT_OPERATOR, tokens[0]
        else:
            symbol, raw_version = tokens[0], " ".join(tokens[1:])

        operator = Operator.from_symbol(symbol, requirement=str(text))
        version = Version.parse(raw_version)

        number = raw_version.split("-", 1)[0].split("+", 1)[0]
        precision = tuple(int(part) for part in number.split("."))
        return cls(operator, version, precision)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def satisfied_by(self, candidate: Union[str, Version]) -> bool:
        """Return True if ``candidate`` meets this requirement."""
        candidate = Version.parse(candidate)
        operator = self.operator

        if operator is Operator.EQ:
            return candidate == self.version
        if operator is Operator.NE:
            return candidate != self.version
        if operator is Operator.GT:
            return candidate > self.version
        if operator is Operator.LT:
            return candidate < self.version
        if operator is Operator.GE:
            return candidate >= self.version
        if operator is Operator.LE:
            return candidate <= self.version
        if operator is Operator.OPTIMISTIC:
            return (
                candidate >= self.version
                and candidate.release_version() < self.optimistic_bound()
            )
        raise UnsupportedOperatorError(
            f"Unsupported operator: {operator!r}", operator=str(operator)
        )

    def optimistic_bound(self) -> Version:
        """Return the exclusive upper bound used by ``~>``.

        This is :meth:`Version.optimistic_bump` at the precision the
        reference was written with.
        """
        return self.version.optimistic_bump(len(self.precision))

    @property
    def is_pre_release(self) -> bool:
        return self.version.is_pre_release

    # ------------------------------------------------------------------
    # Rendering and identity
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        if self.operator is Operator.OPTIMISTIC and len(self.precision) < 3:
            reference = ".".join(str(number) for number in self.precision)
        else:
            reference = str(self.version)
        return f"{self.operator} {reference}"

    def __repr__(self) -> str:
        return f"<Requirement {self}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Requirement):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))


RequirementLike = Union[str, Requirement]


class RequirementList:
    """An ordered, duplicate-free conjunction of requirements.

    Accepts a single requirement, a comma separated string, or an iterable
    of either. Structurally equal requirements are stored once.

    Raises:
        TypeError: An item is neither a string nor a :class:`Requirement`.
    """

    __slots__ = ("_requirements",)

    def __init__(
        self,
        requirements: Union[None, RequirementLike, Iterable[RequirementLike]] = None,
    ) -> None:
        self._requirements: List[Requirement] = []

        if requirements is None:
            return
        if isinstance(requirements, str):
            requirements = [part for part in requirements.split(",") if part.strip()]
        elif isinstance(requirements, Requirement):
            requirements = [requirements]

        for requirement in requirements:
            self.add(requirement)

    def add(self, requirement: RequirementLike) -> bool:
        """Append a requirement unless an equal one is already present.

        Returns:
            True if the requirement was added.
        """
        if isinstance(requirement, str):
            requirement = Requirement.parse(requirement)
        elif not isinstance(requirement, Requirement):
            raise TypeError(
                f"Expected a requirement string or Requirement, "
                f"got {type(requirement).__name__}"
            )

        if requirement in self._requirements:
            return False
        self._requirements.append(requirement)
        return True

    def satisfied_by(self, candidate: Union[str, Version]) -> bool:
        """Return True if every requirement accepts ``candidate``."""
        candidate = Version.parse(candidate)
        return all(requirement.satisfied_by(candidate) for requirement in self._requirements)

    @property
    def is_pre_release(self) -> bool:
        """True if any requirement references a pre-release version."""
        return any(requirement.is_pre_release for requirement in self._requirements)

    @property
    def requirements(self) -> Tuple[Requirement, ...]:
        return tuple(self._requirements)

    def __iter__(self) -> Iterator[Requirement]:
        return iter(self._requirements)

    def __len__(self) -> int:
        return len(self._requirements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequirementList):
            return NotImplemented
        return self._requirements == other._requirements

    def __hash__(self) -> int:
        return hash(tuple(self._requirements))

    def __str__(self) -> str:
        return ", ".join(str(requirement) for requirement in self._requirements)

    def __repr__(self) -> str:
        return f"<RequirementList {self}>"
