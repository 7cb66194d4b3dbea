"""Verification commands.

This module provides `packmate verify run`, the authenticated full pass
meant for a scheduler, and `packmate verify package` for checking one
application on one manager.
"""

from typing import Annotated

import typer
from rich.table import Table

from packmate.api import handlers
from packmate.cli.types import get_catalog, get_config, open_store, require_ok
from packmate.core.config import CRON_SECRET_ENV
from packmate.models.manager import PackageManagerId
from packmate.models.verification import VerificationResult
from packmate.utils.formatting import (
    console,
    create_results_table,
    format_result_row,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Verify catalog package identifiers against their registries.",
    no_args_is_help=True,
)


@app.command()
def run(
    ctx: typer.Context,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            "-t",
            envvar=CRON_SECRET_ENV,
            help="Verification secret (bearer token).",
            show_envvar=True,
        ),
    ] = None,
) -> None:
    """Verify every (app, manager) pair in the catalog.

    Requires the configured verification secret. Results are appended to
    the result store and a summary is printed.

    Examples:
        packmate verify run --token "$SECRET"
        PACKMATE_CRON_SECRET=... packmate verify run
    """
    config = get_config(ctx)
    catalog = get_catalog(ctx)
    authorization = f"Bearer {token}" if token else None

    with open_store(ctx) as store:
        with console.status("[info]Verifying packages...[/]"):
            response = handlers.trigger_verification(
                authorization,
                store=store,
                catalog=catalog,
                config=config,
            )
    require_ok(response)
    _print_summary(response.body)


@app.command()
def package(
    ctx: typer.Context,
    app_id: Annotated[str, typer.Argument(help="Application id.")],
    manager: Annotated[
        PackageManagerId,
        typer.Argument(help="Package manager id.", case_sensitive=False),
    ],
) -> None:
    """Verify one application on one package manager.

    Examples:
        packmate verify package firefox flatpak
    """
    config = get_config(ctx)
    catalog = get_catalog(ctx)

    with open_store(ctx) as store:
        response = handlers.verify_package(
            app_id,
            {"packageManagerId": manager.value},
            store=store,
            catalog=catalog,
            config=config,
        )
    require_ok(response)

    result = VerificationResult.from_dict(response.body)
    table = create_results_table(title="Verification Result")
    table.add_row(*format_result_row(result))
    console.print(table)
    if result.is_flagged:
        print_warning("Result flagged for manual review.")


def _print_summary(summary: dict[str, int]) -> None:
    """Print the counts of a full verification run."""
    table = Table(title="Verification Summary", header_style="bold_header", border_style="border")
    table.add_column("Outcome")
    table.add_column("Count", justify="right")
    table.add_row("[verified]Verified[/]", str(summary["verified"]))
    table.add_row("[failed]Failed[/]", str(summary["failed"]))
    table.add_row("[flagged]Errors[/]", str(summary["errors"]))
    table.add_row("[unverifiable]Unverifiable[/]", str(summary["unverifiable"]))
    table.add_row("[bold]Total[/]", f"[bold]{summary['total']}[/]")
    console.print(table)

    if summary["failed"] or summary["errors"]:
        print_warning("Some packages need attention. See `packmate flagged list`.")
    else:
        print_success("All verifiable packages found.")
