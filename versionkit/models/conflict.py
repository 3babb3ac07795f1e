"""
Resolution conflict model for versionkit.

A :class:`Conflict` records the most recent unsatisfiable demand against a
library during a search: the activation the demand clashed with (if any)
and the dependency that could not be met.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from versionkit.models.dependency import Dependency, SpecGroup

__all__ = ["Conflict"]


def _describe_requester(dependency: Dependency) -> str:
    if dependency.is_root:
        return "required at the top level"
    return f"required by `{dependency.chain_description()}`"


@dataclass(frozen=True)
class Conflict:
    """One entry of the resolver's conflict map.

    Args:
        existing: Activation ``requirement`` clashed with, or ``None`` when
            no acceptable version could be found.
        requirement: The dependency that could not be satisfied.
        rejected: True when ``existing`` was a candidate vetoed by the
            resolver delegate rather than an activation.
    """

    existing: Optional[SpecGroup]
    requirement: Dependency
    rejected: bool = False

    @property
    def name(self) -> str:
        return self.requirement.name

    def lines(self) -> List[str]:
        """Return one bullet line per conflicting demand."""
        lines = [f"- `{self.requirement}` {_describe_requester(self.requirement)}"]

        if self.existing is None:
            lines.append(f"- no available version of `{self.name}` satisfies it")
        elif self.rejected:
            lines.append(f"- version `{self.existing.version}` was rejected for this group")
        else:
            activator = self.existing.activated_by
            if activator is not None:
                lines.append(
                    f"- `{activator}` {_describe_requester(activator)}, "
                    f"activated at `{self.existing.version}`"
                )
            else:
                lines.append(f"- `{self.existing}` is already activated")
        return lines

    def explanation(self) -> str:
        """Render the conflict as a human-readable block."""
        header = f"Unable to satisfy the following requirements for `{self.name}`:"
        return "\n".join([header, *self.lines()])

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "requirement": str(self.requirement),
            "required_by": [str(parent) for parent in self.requirement.required_by],
            "existing": str(self.existing.version) if self.existing else None,
            "rejected": self.rejected,
        }

    def __str__(self) -> str:
        return self.explanation()
