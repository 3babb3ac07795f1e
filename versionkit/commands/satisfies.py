"""Satisfies command implementation for versionkit.

Checks candidate versions against a requirement list.

Typical usage::

    $ versionkit satisfies "~> 2.1" 2.1.5 2.9.0 3.0.0
    $ versionkit satisfies ">= 1.0, < 2.0" 1.4
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Tuple

import click

from versionkit.models.version import Version
from versionkit.models.requirement import RequirementList
from versionkit.exceptions import VersionKitError
from versionkit.utils.logger import get_logger
from versionkit.utils.console import print_error, print_success, print_table, print_warning

logger = get_logger("commands.satisfies")


@click.command()
@click.argument("requirement")
@click.argument("versions", nargs=-1, required=True)
def satisfies(requirement: str, versions: Tuple[str, ...]) -> None:
    """Check whether each of VERSIONS satisfies REQUIREMENT.

    REQUIREMENT may combine several constraints separated by commas,
    all of which must hold.

    Exits:
        0 if every version satisfies the requirement, 1 otherwise.
    """
    try:
        requirement_list = RequirementList(requirement)
        parsed = [Version.parse(version) for version in versions]
    except VersionKitError as exc:
        print_error(f"{exc}")
        sys.exit(1)

    logger.debug("Checking %d versions against %s", len(parsed), requirement_list)

    data: List[Dict[str, Any]] = []
    failures = 0
    for version in parsed:
        ok = requirement_list.satisfied_by(version)
        failures += not ok
        data.append(
            {
                "Version": str(version),
                "Satisfied": "[green]yes[/green]" if ok else "[red]no[/red]",
            }
        )

    print_table(
        data,
        title=f"Requirement: {requirement_list}",
        column_styles={"Version": {"style": "bold cyan", "no_wrap": True}},
    )

    if failures:
        print_warning(f"{failures} of {len(parsed)} versions do not satisfy {requirement_list}")
        sys.exit(1)

    print_success(f"All versions satisfy {requirement_list}")
