"""Click subcommands registered by :mod:`versionkit.cli`."""
