"""CLI commands for savectl.

This package contains all subcommand implementations.
"""

from savectl.cli.commands import backups, config, export, migrate, perms, placeholders, size

__all__ = ["backups", "config", "export", "migrate", "perms", "placeholders", "size"]
