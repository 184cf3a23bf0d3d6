"""CLI package for savectl.

This package contains the Typer application and all subcommands.
"""

from savectl.cli.main import app

__all__ = ["app"]
