"""Resolve command implementation for versionkit.

Resolves root dependencies against a TOML library index (see
:mod:`versionkit.core.index`) and prints the chosen version of every
library, or a report of every conflict when no consistent set exists.

Positional dependencies form the ``default`` group. ``--group NAME=DEP``
adds ``DEP`` to group ``NAME``; groups are resolved in order of first
appearance and share one version per library.

Typical usage::

    $ versionkit resolve index.toml "A (>= 1.0)" C

    # Resolve a second group that must agree with the first
    $ versionkit resolve index.toml A --group test="T (~> 2.0)"

    # Machine-readable output
    $ versionkit resolve index.toml A --format json > lock.json
"""

from __future__ import annotations

import sys
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

import click

from versionkit.constants import DEFAULT_GROUP, OUTPUT_FORMATS
from versionkit.core.index import load_index
from versionkit.core.data_provider import ResolverDelegate
from versionkit.core.resolver import ResolutionResult, Resolver
from versionkit.context import VersionKitContext, pass_context
from versionkit.exceptions import VersionConflictError, VersionKitError
from versionkit.utils.logger import get_logger
from versionkit.utils.console import (
    print_error,
    print_report,
    print_success,
    print_table,
)

logger = get_logger("commands.resolve")


class CLIDelegate(ResolverDelegate):
    """Reports resolver progress on stderr."""

    def on_group_resolution_start(self, group_name: str) -> None:
        logger.info("Resolving group %s", group_name)

    def on_progress_tick(self) -> None:
        click.echo(".", err=True, nl=False)


@click.command()
@click.argument(
    "index",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument("dependencies", nargs=-1)
@click.option(
    "--group",
    "-g",
    "group_options",
    multiple=True,
    metavar="NAME=DEPENDENCY",
    help="Add a dependency to a named resolution group (repeatable).",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def resolve(
    ctx: VersionKitContext,
    index: Path,
    dependencies: Tuple[str, ...],
    group_options: Tuple[str, ...],
    format: str,
) -> None:
    """Resolve DEPENDENCIES against the library INDEX.

    Each dependency is a library name optionally followed by requirements
    in parentheses, e.g. ``"B (>= 1.0, < 2.0)"``.

    Exits:
        0 if a consistent set of versions was found, 1 otherwise.
    """
    groups = _build_groups(dependencies, group_options)
    if not groups:
        raise click.UsageError("Provide at least one dependency to resolve.")

    try:
        provider = load_index(index)
        resolver = Resolver(provider, CLIDelegate(), config=ctx.config)
        result = resolver.resolve(groups)

    except VersionConflictError as exc:
        _display_conflict(exc, format)
        sys.exit(1)
    except VersionKitError as exc:
        print_error(f"{exc}")
        sys.exit(1)
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Error in resolve command")
        sys.exit(1)

    if format == "json":
        click.echo(json.dumps(result.to_json(), indent=2))
    else:
        _display_table(result)


def _build_groups(
    dependencies: Tuple[str, ...],
    group_options: Tuple[str, ...],
) -> Dict[str, List[str]]:
    """Assemble ``{group: [dependency, ...]}`` from CLI arguments.

    Raises:
        click.BadParameter: A ``--group`` value is not ``NAME=DEPENDENCY``.
    """
    groups: Dict[str, List[str]] = {}
    if dependencies:
        groups[DEFAULT_GROUP] = list(dependencies)

    for option in group_options:
        name, sep, dependency = option.partition("=")
        if not sep or not name.strip() or not dependency.strip():
            raise click.BadParameter(
                f"expected NAME=DEPENDENCY, got {option!r}",
                param_hint="--group",
            )
        groups.setdefault(name.strip(), []).append(dependency.strip())

    return groups


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _display_table(result: ResolutionResult) -> None:
    """Render the activation of every group as a Rich table."""
    data: List[Dict[str, Any]] = []
    for group, activations in result.activations_by_group.items():
        for name, activation in activations.items():
            data.append(
                {
                    "Group": group,
                    "Library": name,
                    "Version": str(activation.version),
                    "Platform": activation.platform or "-",
                }
            )

    column_styles: Dict[str, Dict[str, Any]] = {
        "Group": {"style": "dim", "no_wrap": True},
        "Library": {"style": "bold cyan", "no_wrap": True},
        "Version": {"justify": "center", "style": "bold green"},
        "Platform": {"justify": "center"},
    }

    print_table(data, title="Resolved Versions", column_styles=column_styles)
    print_success(
        f"Resolved {len(result.activated)} libraries "
        f"in {result.iterations} iterations"
    )


def _display_conflict(exc: VersionConflictError, format: str) -> None:
    """Report a failed resolution."""
    if format == "json":
        payload = {
            "error": exc.message,
            "conflicts": [conflict.to_json() for conflict in exc.conflicts.values()],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    print_report(exc.explanation, title="Version conflict")
    print_error(exc.message)
