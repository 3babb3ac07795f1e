"""
Command-line interface for versionkit.

The ``versionkit`` group applies the global options (configuration file,
verbosity, color), stores them on a :class:`VersionKitContext` and hands
over to one of the subcommands in :mod:`versionkit.commands`.
:func:`main` is the console-script entry point and turns every outcome
into a process exit code.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from versionkit.config import load_config
from versionkit.__version__ import __version__
from versionkit.constants import CONFIG_ENV_VAR
from versionkit.context import VersionKitContext
from versionkit.exceptions import ConfigError, VersionKitError
from versionkit.utils.logger import get_logger, level_for_verbosity, setup_logging
from versionkit.utils.console import print_error, print_warning, reconfigure_console
from versionkit.commands.inspect import inspect_version
from versionkit.commands.resolve import resolve
from versionkit.commands.satisfies import satisfies

logger = get_logger("cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar=CONFIG_ENV_VAR,
    help="Read settings from this file instead of discovering one.",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Log progress (-v) or resolver internals (-vv) to stderr.",
)
@click.option(
    "--color/--no-color",
    default=True,
    envvar="VERSIONKIT_COLOR",
    help="Enable or disable colored output.",
)
@click.version_option(__version__, prog_name="versionkit", message="%(prog)s %(version)s")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """versionkit: semantic versions and dependency resolution.

    \b
    Commands:
      resolve     Pick one version per library from a TOML index
      satisfies   Check versions against a requirement list
      inspect     Show the components and successors of a version

    \b
    Examples:
      versionkit resolve index.toml "A (>= 1.0)" C
      versionkit resolve index.toml A --group test="T (~> 2.0)"
      versionkit satisfies "~> 2.1" 2.1.5 3.0.0
      versionkit -vv resolve index.toml A
    """
    _apply_color(color)
    _configure_logging(verbose)

    try:
        settings = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(EXIT_FAILURE) from exc

    state = VersionKitContext()
    state.config = settings
    state.config_path = config or settings.source_path
    state.verbose = verbose
    state.color = color
    ctx.obj = state

    logger.debug("versionkit v%s (verbosity=%s, color=%s)", __version__, verbose, color)
    if settings.source_path is not None:
        logger.debug("Settings from %s: %s", settings.source_path, settings.to_log_dict())
    else:
        logger.debug("No configuration file, using defaults")


def _apply_color(color: bool) -> None:
    """Export the color choice through ``NO_COLOR`` and rebuild the console."""
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


def _configure_logging(verbose: int) -> None:
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging at %s", logging.getLevelName(level))


cli.add_command(resolve)
cli.add_command(satisfies)
cli.add_command(inspect_version)


def main() -> int:
    """Run the CLI and return its exit code.

    Returns:
        ``0`` on success, ``1`` for versionkit and unexpected errors, Click's
        own code (``2``) for usage errors, and ``130`` when interrupted.
    """
    try:
        cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except VersionKitError as exc:
        print_error(str(exc))
        logger.debug("Error details: %s", exc.details or "<none>", exc_info=True)
        return EXIT_FAILURE
    except (KeyboardInterrupt, click.Abort):
        print_warning("Interrupted")
        return EXIT_INTERRUPTED
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
