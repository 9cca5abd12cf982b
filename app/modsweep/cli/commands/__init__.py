"""CLI commands for modsweep.

This package contains all subcommand implementations.
"""

from modsweep.cli.commands import clean, config, patterns

__all__ = ["clean", "config", "patterns"]
