"""Status command for viewing current verification results.

This module provides the `packmate status` command, which shows the
current result of every verified pair or of a single pair.
"""

import json
from typing import Annotated

import typer

from packmate.api import handlers
from packmate.cli.types import open_store, require_ok
from packmate.models.manager import PackageManagerId
from packmate.models.verification import VerificationResult, VerificationStatus
from packmate.utils.formatting import (
    console,
    create_results_table,
    format_result_row,
    format_status,
    print_info,
)

app = typer.Typer(
    name="status",
    help="Show current verification results.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def status(
    ctx: typer.Context,
    app_id: Annotated[
        str | None,
        typer.Option("--app", "-a", help="Only show this application."),
    ] = None,
    manager: Annotated[
        PackageManagerId | None,
        typer.Option(
            "--manager",
            "-m",
            help="Only show this package manager.",
            case_sensitive=False,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show the current verification result of each (app, manager) pair.

    With both --app and --manager, shows that pair, or "pending" if it was
    never verified.

    Examples:
        packmate status
        packmate status -m winget
        packmate status --app firefox --manager snap --json
    """
    manager_id = manager.value if manager is not None else None

    with open_store(ctx) as store:
        response = handlers.verification_status(app_id, manager_id, store=store)
    require_ok(response)

    if isinstance(response.body, dict):
        _print_single(response.body, json_output)
        return

    documents = [
        d
        for d in response.body
        if (app_id is None or d["appId"] == app_id)
        and (manager_id is None or d["packageManagerId"] == manager_id)
    ]

    if json_output:
        typer.echo(json.dumps(documents, indent=2))
        return

    if not documents:
        print_info("No verification results found.")
        return

    table = create_results_table()
    for document in documents:
        table.add_row(*format_result_row(VerificationResult.from_dict(document)))
    console.print(table)


def _print_single(document: dict[str, object], json_output: bool) -> None:
    """Print the result or pending placeholder of one pair."""
    if json_output:
        typer.echo(json.dumps(document, indent=2))
        return

    if document.get("timestamp") is None:
        console.print(
            f"{document['appId']} on {document['packageManagerId']}: "
            f"{format_status(VerificationStatus.PENDING)}"
        )
        return

    table = create_results_table()
    table.add_row(*format_result_row(VerificationResult.from_dict(document)))
    console.print(table)
