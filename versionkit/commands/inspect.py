"""Inspect command implementation for versionkit.

Shows the components of a version, the versions it may evolve into and the
``~>`` requirement consumers should use.

Typical usage::

    $ versionkit inspect 1.2.3-rc.1
    $ versionkit inspect 1.2.3 --compare 2.0.0
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional

import click

from versionkit.models.version import Version
from versionkit.exceptions import VersionKitError
from versionkit.utils.console import colorize_update_type, print_error, print_table
from versionkit.utils.version_utils import get_update_type, optimistic_requirement


def _join(identifiers: Any) -> str:
    return ".".join(str(identifier) for identifier in identifiers) or "-"


@click.command("inspect")
@click.argument("version")
@click.option(
    "--compare",
    "other",
    metavar="VERSION",
    help="Classify the change from VERSION to this one.",
)
def inspect_version(version: str, other: Optional[str]) -> None:
    """Show the components and successors of VERSION."""
    try:
        parsed = Version.parse(version)
        target = Version.parse(other) if other is not None else None
    except VersionKitError as exc:
        print_error(f"{exc}")
        sys.exit(1)

    data: List[Dict[str, Any]] = [
        {"Field": "Version", "Value": str(parsed)},
        {"Field": "Major", "Value": parsed.major},
        {"Field": "Minor", "Value": parsed.minor},
        {"Field": "Patch", "Value": parsed.patch},
        {"Field": "Pre-release", "Value": _join(parsed.pre_release_component)},
        {"Field": "Build", "Value": _join(parsed.build_component)},
        {"Field": "Release version", "Value": str(parsed.release_version())},
        {
            "Field": "Next versions",
            "Value": ", ".join(str(v) for v in parsed.next_versions()),
        },
        {"Field": "Recommended requirement", "Value": str(optimistic_requirement(parsed))},
    ]

    if target is not None:
        data.append(
            {
                "Field": f"Change to {target}",
                "Value": colorize_update_type(get_update_type(parsed, target)),
            }
        )

    print_table(
        data,
        headers=["Field", "Value"],
        title=f"Version {parsed}",
        column_styles={"Field": {"style": "bold", "no_wrap": True}},
    )
