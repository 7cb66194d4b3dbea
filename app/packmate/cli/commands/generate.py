"""Script and one-liner generation commands.

This module provides `packmate script`, which writes a complete install
script, and `packmate command`, which prints a single install command.
"""

import os
import stat
from pathlib import Path
from typing import Annotated

import typer

from packmate.cli.types import get_catalog
from packmate.core.generation import generate_command, generate_install_script
from packmate.models.catalog import Catalog
from packmate.models.manager import PackageManagerId, get_package_manager
from packmate.utils.formatting import print_error, print_success, print_warning

AppIds = Annotated[list[str], typer.Argument(help="Application ids to install.")]
ManagerOption = Annotated[
    PackageManagerId,
    typer.Option(
        "--manager",
        "-m",
        help="Target package manager.",
        case_sensitive=False,
    ),
]


def _warn_unresolved(catalog: Catalog, app_ids: list[str], manager: PackageManagerId) -> None:
    """Warn about selected ids that will not appear in the output."""
    for app_id in app_ids:
        app = catalog.get(app_id)
        if app is None:
            print_warning(f"Unknown application: {app_id}")
        elif not app.is_available_for(manager):
            print_warning(f"{app.name} is not available on {get_package_manager(manager).name}")


def script(
    ctx: typer.Context,
    app_ids: AppIds,
    manager: ManagerOption,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the script to this file instead of stdout.",
        ),
    ] = None,
) -> None:
    """Generate an install script for the selected applications.

    Examples:
        packmate script firefox vlc -m flatpak
        packmate script git vscode -m winget -o install.ps1
    """
    catalog = get_catalog(ctx)
    _warn_unresolved(catalog, app_ids, manager)
    text = generate_install_script(app_ids, manager, catalog)

    if output is None:
        typer.echo(text, nl=False)
        return

    try:
        output.write_text(text, encoding="utf-8")
        mode = output.stat().st_mode
        os.chmod(output, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        print_error(f"Could not write {output}: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Wrote {get_package_manager(manager).name} install script to {output}")


def command(
    ctx: typer.Context,
    app_ids: AppIds,
    manager: ManagerOption,
) -> None:
    """Print a one-line install command for the selected applications.

    Examples:
        packmate command git jq ripgrep -m homebrew
    """
    catalog = get_catalog(ctx)
    _warn_unresolved(catalog, app_ids, manager)
    typer.echo(generate_command(app_ids, manager, catalog))
