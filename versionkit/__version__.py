"""
versionkit package version.

Single source of truth for the distribution version, read by the CLI's
``--version`` option and re-exported as :data:`versionkit.__version__`.

This is a packaging version, not a :class:`versionkit.models.Version`:
development builds carry a PEP 440 ``.devN`` suffix.
"""

__version__ = "0.1.0.dev0"
