"""CLI commands for packmate.

This package contains all subcommand implementations.
"""

from packmate.cli.commands import catalog, config, flagged, generate, status, verify

__all__ = ["catalog", "config", "flagged", "generate", "status", "verify"]
