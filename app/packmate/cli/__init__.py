"""CLI package for packmate.

This package contains the Typer application and all subcommands.
"""

from packmate.cli.main import app

__all__ = ["app"]
