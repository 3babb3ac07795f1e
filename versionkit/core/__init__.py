"""
Core functionality exports for versionkit.

This module provides convenient access to the resolution machinery.
Importing from here keeps user-facing imports clean and stable:

    from versionkit.core import Resolver, StaticDataProvider
"""

from __future__ import annotations

from versionkit.core.index import load_index, parse_index
from versionkit.core.data_store import DataProviderCache
from versionkit.core.data_provider import DataProvider, ResolverDelegate, StaticDataProvider
from versionkit.core.resolver import (
    Activation,
    ResolutionResult,
    Resolver,
    default_sort_key,
)

__all__ = [
    "DataProvider",
    "ResolverDelegate",
    "StaticDataProvider",
    "DataProviderCache",
    "Resolver",
    "ResolutionResult",
    "Activation",
    "default_sort_key",
    "load_index",
    "parse_index",
]
