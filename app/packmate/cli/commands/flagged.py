"""Manual review commands.

Provides `packmate flagged list` to show results awaiting review and
`packmate flagged resolve` to clear a review flag.
"""

import json
from typing import Annotated

import typer

from packmate.api import handlers
from packmate.cli.types import open_store, require_ok
from packmate.models.manager import PackageManagerId
from packmate.models.verification import VerificationResult
from packmate.store.results import DEFAULT_SORT_FIELD, SORT_FIELDS
from packmate.utils.formatting import (
    console,
    create_results_table,
    format_result_row,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Review results flagged for manual review.",
    no_args_is_help=True,
)


@app.command("list")
def list_flagged(
    ctx: typer.Context,
    manager: Annotated[
        PackageManagerId | None,
        typer.Option(
            "--manager",
            "-m",
            help="Only show this package manager.",
            case_sensitive=False,
        ),
    ] = None,
    sort_by: Annotated[
        str,
        typer.Option(
            "--sort",
            "-s",
            help=f"Sort field, descending: {', '.join(SORT_FIELDS)}.",
        ),
    ] = DEFAULT_SORT_FIELD,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """List results flagged for manual review.

    Examples:
        packmate flagged list
        packmate flagged list -m winget --sort appId
    """
    manager_id = manager.value if manager is not None else None
    with open_store(ctx) as store:
        response = handlers.list_flagged(manager_id, sort_by, store=store)
    require_ok(response)

    if json_output:
        typer.echo(json.dumps(response.body, indent=2))
        return

    if not response.body:
        print_success("Nothing flagged for review.")
        return

    table = create_results_table(title="Flagged for Review")
    for document in response.body:
        table.add_row(*format_result_row(VerificationResult.from_dict(document)))
    console.print(table)
    console.print(f"\n[dim]{len(response.body)} flagged result(s)[/dim]")


@app.command()
def resolve(
    ctx: typer.Context,
    app_id: Annotated[str, typer.Argument(help="Application id.")],
    manager: Annotated[
        PackageManagerId,
        typer.Argument(help="Package manager id.", case_sensitive=False),
    ],
) -> None:
    """Clear the review flag of the newest flagged result for a pair.

    Examples:
        packmate flagged resolve discord winget
    """
    body = {"appId": app_id, "packageManagerId": manager.value}
    with open_store(ctx) as store:
        response = handlers.resolve_flagged(body, store=store)
    require_ok(response)
    print_success(f"Resolved review flag for {app_id} on {manager.value}.")
    print_info("Run `packmate verify package` to record a fresh result.")
