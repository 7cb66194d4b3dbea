"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from packmate.core.theme import get_theme
from packmate.models.verification import VerificationResult, VerificationStatus


def _detect_color_system() -> str | None:
    """Use truecolor on interactive terminals, otherwise let Rich decide."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())

STATUS_ICONS: dict[VerificationStatus, str] = {
    VerificationStatus.VERIFIED: "✔",  # Check mark
    VerificationStatus.FAILED: "✘",  # Ballot x
    VerificationStatus.PENDING: "…",  # Ellipsis
    VerificationStatus.UNVERIFIABLE: "–",  # En dash
}


def create_results_table(title: str = "Verification Status") -> Table:
    """Create a pre-configured table for verification results.

    Args:
        title: Table title.

    Returns:
        Rich Table with App, Manager, Package, Status, Checked and Note
        columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("App", no_wrap=True, style="app.name")
    table.add_column("Manager", style="info")
    table.add_column("Package", style="text")
    table.add_column("Status")
    table.add_column("Checked", style="muted")
    table.add_column("Note", style="muted", overflow="ellipsis")
    return table


def format_status(status: VerificationStatus, flagged: bool = False) -> str:
    """Format a verification status with color markup."""
    text = f"[status.{status.value}]{status.value}[/]"
    if flagged:
        text += " [flagged]⚑[/]"  # Flag
    return text


def format_result_row(result: VerificationResult) -> tuple[str, str, str, str, str, str, str]:
    """Format a verification result as a table row.

    Returns:
        Tuple of (icon, app, manager, package, status, checked, note).
    """
    style = f"status.{result.status.value}"
    icon = f"[{style}]{STATUS_ICONS[result.status]}[/]"
    checked = result.parsed_timestamp.strftime("%Y-%m-%d %H:%M")
    return (
        icon,
        result.app_id,
        result.package_manager_id,
        result.package_name,
        format_status(result.status, result.is_flagged),
        checked,
        result.error_message or "-",
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
