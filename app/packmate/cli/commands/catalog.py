"""Catalog browsing commands.

Provides `packmate managers` and `packmate apps` for exploring which
package managers are supported and which applications each one offers.
"""

from typing import Annotated

import typer
from rich.table import Table

from packmate.cli.types import get_catalog
from packmate.models.manager import (
    PACKAGE_MANAGERS,
    OSFamily,
    PackageManagerId,
    get_managers_by_os,
)
from packmate.utils.formatting import console, print_info


def managers(
    os_family: Annotated[
        OSFamily | None,
        typer.Option(
            "--os",
            help="Only show managers for this operating system.",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """List supported package managers.

    Examples:
        packmate managers
        packmate managers --os linux
    """
    descriptors = (
        get_managers_by_os(os_family) if os_family is not None else list(PACKAGE_MANAGERS.values())
    )

    table = Table(
        title="Package Managers",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("ID", style="info", no_wrap=True)
    table.add_column("Name", style="app.name")
    table.add_column("OS")
    table.add_column("Script")
    table.add_column("Verifiable", justify="center")
    table.add_column("Install command", style="muted")

    for pm in descriptors:
        table.add_row(
            pm.id.value,
            pm.name,
            pm.os_family.value,
            pm.dialect.value,
            "[verified]yes[/]" if pm.verifiable else "[muted]no[/]",
            pm.install_prefix,
        )

    console.print(table)


def apps(
    ctx: typer.Context,
    manager: Annotated[
        PackageManagerId | None,
        typer.Option(
            "--manager",
            "-m",
            help="Only show applications offered on this manager.",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """List catalog applications and where they are available.

    Examples:
        packmate apps
        packmate apps -m flatpak
    """
    catalog = get_catalog(ctx)
    entries = catalog.apps_for(manager) if manager is not None else catalog.apps

    if not entries:
        print_info("No applications found.")
        return

    title = f"Applications ({PACKAGE_MANAGERS[manager].name})" if manager else "Applications"
    table = Table(title=title, header_style="bold_header", border_style="border")
    table.add_column("ID", style="info", no_wrap=True)
    table.add_column("Name", style="app.name")
    table.add_column("Category", style="muted")
    if manager is not None:
        table.add_column("Package")
    else:
        table.add_column("Managers", style="muted")

    for app in entries:
        if manager is not None:
            last = app.target_for(manager) or ""
        else:
            last = ", ".join(pm.value for pm in PackageManagerId if app.is_available_for(pm))
        table.add_row(app.id, app.name, app.category or "-", last)

    console.print(table)
    console.print(f"\n[dim]{len(entries)} application(s)[/dim]")
