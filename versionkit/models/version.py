"""
Semantic version model for versionkit.

A :class:`Version` is the comparator the resolver depends on. It parses
``MAJOR.MINOR.PATCH[-pre][+build]`` strings, orders them according to the
SemVer precedence rules and derives the successor versions used by bump
operations and by the optimistic ``~>`` operator.

Typical usage::

    >>> Version("1.0.0-alpha.1") < Version("1.0.0")
    True
    >>> Version.parse("2.1")  # lenient: pads missing components
    <Version 2.1.0>
    >>> Version("1.2.3").next_versions()
    [<Version 2.0.0>, <Version 1.3.0>, <Version 1.2.4>]
"""

from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple, Union

from versionkit.constants import VERSION_PATTERN
from versionkit.exceptions import MalformedVersionError

__all__ = ["Version", "Identifier"]

#: A single pre-release or build identifier.
Identifier = Union[int, str]

_VERSION_RE = re.compile(VERSION_PATTERN, re.IGNORECASE)
_NUMERIC_RE = re.compile(r"\A[0-9]+\Z")
_SHORT_VERSION_RE = re.compile(r"\A[0-9]+(\.[0-9]+)?\Z")


def _split_identifiers(part: str) -> Tuple[Identifier, ...]:
    """Split a dotted component, converting purely numeric identifiers."""
    if not part:
        return ()
    return tuple(
        int(identifier) if _NUMERIC_RE.match(identifier) else identifier
        for identifier in part.split(".")
    )


def _join(identifiers: Tuple[Identifier, ...]) -> str:
    return ".".join(str(identifier) for identifier in identifiers)


class Version:
    """An immutable semantic version.

    The constructor is strict: the string must already be a full
    three-component version. Use :meth:`parse` for lenient input such as
    ``"1"`` or ``"2.1"``.

    Equality and hashing follow the ordering, so build metadata is ignored
    by both while :meth:`__str__` still renders it.

    Args:
        version: Version string to parse.

    Raises:
        MalformedVersionError: ``version`` does not match the canonical form.
    """

    __slots__ = (
        "_string",
        "_number_component",
        "_pre_release_component",
        "_build_component",
    )

    def __init__(self, version: str) -> None:
        if not isinstance(version, str) or not _VERSION_RE.match(version):
            raise MalformedVersionError(
                f"Malformed version: {version!r}",
                version=str(version),
            )

        main, _, build = version.partition("+")
        number, _, pre_release = main.partition("-")

        self._string = version
        self._number_component: Tuple[int, ...] = tuple(
            int(part) for part in number.split(".")
        )
        self._pre_release_component = _split_identifiers(pre_release)
        self._build_component = _split_identifiers(build)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, value: Union[str, "Version"]) -> "Version":
        """Leniently build a Version, padding short numeric strings.

        Args:
            value: A version string or an existing :class:`Version`.

        Returns:
            The parsed version (``value`` itself if already a Version).

        Raises:
            MalformedVersionError: ``value`` is invalid even after padding.
        """
        if isinstance(value, Version):
            return value
        return cls(cls.normalize(value))

    @staticmethod
    def normalize(version: Any) -> str:
        """Pad a one or two component numeric string with ``.0``.

        Never fails; anything that is not a short numeric string is
        returned unchanged (stripped of surrounding whitespace).

        Example::

            >>> Version.normalize("1")
            '1.0.0'
            >>> Version.normalize("1.2.3-rc.1")
            '1.2.3-rc.1'
        """
        text = str(version).strip()
        if _SHORT_VERSION_RE.match(text):
            missing = 2 - text.count(".")
            text += ".0" * missing
        return text

    @staticmethod
    def is_valid(version: Any) -> bool:
        """Return True if ``version`` is a valid canonical version string."""
        return isinstance(version, str) and _VERSION_RE.match(version) is not None

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def number_component(self) -> Tuple[int, ...]:
        return self._number_component

    @property
    def pre_release_component(self) -> Tuple[Identifier, ...]:
        return self._pre_release_component

    @property
    def build_component(self) -> Tuple[Identifier, ...]:
        return self._build_component

    @property
    def major(self) -> int:
        return self._number_component[0]

    @property
    def minor(self) -> int:
        return self._number_component[1]

    @property
    def patch(self) -> int:
        return self._number_component[2]

    @property
    def is_pre_release(self) -> bool:
        """True when the version carries a pre-release component."""
        return bool(self._pre_release_component)

    # ------------------------------------------------------------------
    # Derived versions
    # ------------------------------------------------------------------

    def release_version(self) -> "Version":
        """Return the version stripped of pre-release and build metadata."""
        return Version(_join(self._number_component))

    def optimistic_bump(self, precision: int = 3) -> "Version":
        """Return the exclusive upper bound implied by ``~> self``.

        ``precision`` is how many numeric identifiers the reference was
        written with. The last written identifier is dropped (when there is
        more than one) and the new last one is incremented, so the default
        is the next minor version.

        Example::

            >>> Version("2.1.7").optimistic_bump()
            <Version 2.2.0>
            >>> Version("2.1.0").optimistic_bump(precision=2)
            <Version 3.0.0>

        Raises:
            ValueError: ``precision`` is not between 1 and 3.
        """
        if not 1 <= precision <= len(self._number_component):
            raise ValueError(f"precision must be between 1 and 3, got {precision}")
        return self._bump(max(precision - 2, 0))

    def next_major(self) -> "Version":
        return self._bump(0)

    def next_minor(self) -> "Version":
        return self._bump(1)

    def next_patch(self) -> "Version":
        return self._bump(2)

    def next_pre_release(self) -> Optional["Version"]:
        """Increment the first numeric pre-release identifier.

        Identifiers after the incremented one are dropped. Returns ``None``
        when there is no pre-release component or none of its identifiers
        is purely numeric.

        Example::

            >>> Version("1.2.3-rc.1.alpha").next_pre_release()
            <Version 1.2.3-rc.2>
        """
        identifiers = list(self._pre_release_component)
        for index, identifier in enumerate(identifiers):
            if isinstance(identifier, int):
                bumped = identifiers[:index] + [identifier + 1]
                return Version(
                    f"{_join(self._number_component)}-{_join(tuple(bumped))}"
                )
        return None

    def next_versions(self) -> List["Version"]:
        """Return every version this one may directly evolve into."""
        candidates = [
            self.next_major(),
            self.next_minor(),
            self.next_patch(),
            self.next_pre_release(),
        ]
        return [candidate for candidate in candidates if candidate is not None]

    def is_valid_next_version(self, candidate: Union[str, "Version"]) -> bool:
        """Return True if ``candidate`` is one of :meth:`next_versions`."""
        return Version.parse(candidate) in self.next_versions()

    def optimistic_recommendation(self) -> str:
        """Return the ``~>`` requirement a consumer of this version should use.

        Pre-1.0 versions are pinned to their patch level since any minor
        bump may break compatibility.

        Example::

            >>> Version("1.9.4").optimistic_recommendation()
            '~> 1.9'
            >>> Version("0.9.4").optimistic_recommendation()
            '~> 0.9.4'
        """
        if self.major == 0:
            return f"~> {_join(self._number_component)}"
        return f"~> {self.major}.{self.minor}"

    def _bump(self, index: int) -> "Version":
        components = list(self._number_component[: index + 1])
        components[index] += 1
        return Version.parse(_join(tuple(components)))

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _sort_key(self) -> Tuple[Any, ...]:
        # Numbers sort below strings, a release sorts above any pre-release,
        # and tuple comparison lets the longer identifier sequence win ties.
        if not self._pre_release_component:
            pre_release: Tuple[Any, ...] = (1,)
        else:
            pre_release = (
                0,
                tuple(
                    (0, identifier, "") if isinstance(identifier, int) else (1, 0, identifier)
                    for identifier in self._pre_release_component
                ),
            )
        return (self._number_component, pre_release)

    def compare(self, other: Any) -> Optional[int]:
        """Three-way comparison.

        Returns:
            ``-1``, ``0`` or ``1``, or ``None`` when ``other`` is not a
            :class:`Version` and the two are therefore incomparable.
        """
        if not isinstance(other, Version):
            return None
        mine, theirs = self._sort_key(), other._sort_key()
        return (mine > theirs) - (mine < theirs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self._string

    def __repr__(self) -> str:
        return f"<Version {self._string}>"
