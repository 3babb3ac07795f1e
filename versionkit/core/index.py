"""Library index loader for versionkit.

An index file describes the universe of libraries a resolution may draw
from: every version of every library and the dependencies each version
declares. It is a TOML document with a single ``[libraries]`` table::

    [libraries.A]
    "1.0.0" = ["B (>= 1.0)", "C"]
    "1.1.0" = ["B (~> 2.0)"]

    [libraries.B]
    "1.0.0" = []
    "2.0.1" = []

Root dependencies are not part of the index; callers pass them to the
resolver directly.

Typical usage::

    provider = load_index(Path("index.toml"))
    result = Resolver(provider).resolve(["A (>= 1.0)"])
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Mapping

from versionkit.utils.logger import get_logger
from versionkit.core.data_provider import StaticDataProvider
from versionkit.exceptions import (
    IndexFileError,
    MalformedVersionError,
    UnsupportedOperatorError,
)

logger = get_logger("index")

__all__ = ["load_index", "parse_index"]


def load_index(path: Path) -> StaticDataProvider:
    """Read an index file into a :class:`StaticDataProvider`.

    Raises:
        IndexFileError: The file cannot be read, is not valid TOML, or
            describes libraries incorrectly.
    """
    logger.info("Loading library index from %s", path)

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise IndexFileError(
            f"Invalid TOML in {path.name}: {exc}",
            file_path=str(path),
            original_error=exc,
        ) from exc
    except OSError as exc:
        raise IndexFileError(
            f"Cannot read index file {path}",
            file_path=str(path),
            original_error=exc,
        ) from exc

    return parse_index(raw, file_path=str(path))


def parse_index(raw: Mapping[str, Any], *, file_path: str = "<memory>") -> StaticDataProvider:
    """Build a provider from an already parsed index document.

    Raises:
        IndexFileError: The document does not follow the index layout.
    """
    libraries = raw.get("libraries")
    if not isinstance(libraries, dict):
        raise IndexFileError(
            "Index must contain a [libraries] table",
            file_path=file_path,
        )

    provider = StaticDataProvider()
    for name, versions in libraries.items():
        if not isinstance(versions, dict):
            raise IndexFileError(
                f"Library `{name}` must map versions to dependency lists",
                file_path=file_path,
                library=name,
            )
        _add_library(provider, name, versions, file_path=file_path)

    logger.debug("Loaded %d libraries from %s", len(provider.names), file_path)
    return provider


def _add_library(
    provider: StaticDataProvider,
    name: str,
    versions: Dict[str, Any],
    *,
    file_path: str,
) -> None:
    for version, dependencies in versions.items():
        if not isinstance(dependencies, list) or not all(
            isinstance(dep, str) for dep in dependencies
        ):
            raise IndexFileError(
                f"Dependencies of `{name} {version}` must be a list of strings",
                file_path=file_path,
                library=name,
            )
        try:
            provider.add_version(name, version, dependencies)
        except (MalformedVersionError, UnsupportedOperatorError) as exc:
            raise IndexFileError(
                f"Invalid entry for `{name} {version}`: {exc.message}",
                file_path=file_path,
                library=name,
                original_error=exc,
            ) from exc
