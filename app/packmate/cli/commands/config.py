"""Configuration commands.

Provides `packmate config show` to display the effective configuration
and `packmate config init` to write a default config file.
"""

from typing import Annotated

import typer
from rich.table import Table

from packmate.cli.types import get_config
from packmate.core.config import CRON_SECRET_ENV, ConfigError, PackmateConfig, save_config
from packmate.core.paths import get_config_path
from packmate.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the packmate configuration.",
    no_args_is_help=True,
)


def _mask(secret: str | None) -> str:
    if not secret:
        return "[muted](not set)[/]"
    return "*" * 8


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config = get_config(ctx)
    config_path = ctx.ensure_object(dict).get("config_path") or get_config_path()

    table = Table(title="Configuration", header_style="bold_header", border_style="border")
    table.add_column("Key", style="info", no_wrap=True)
    table.add_column("Value")

    table.add_row("config file", f"{config_path}" + ("" if config_path.exists() else " (missing)"))
    table.add_row("results_path", str(config.effective_results_path))
    table.add_row("catalog_path", str(config.catalog_path) if config.catalog_path else "(bundled)")
    table.add_row("cron_secret", _mask(config.effective_cron_secret))
    table.add_row("request_timeout", f"{config.request_timeout}s")
    table.add_row("max_retries", str(config.max_retries))
    table.add_row("retry_base_delay", f"{config.retry_base_delay}s")
    table.add_row("request_delay", f"{config.request_delay}s")
    console.print(table)

    if config.effective_cron_secret and config.effective_cron_secret != config.cron_secret:
        print_info(f"cron_secret taken from ${CRON_SECRET_ENV}")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    config_path = ctx.ensure_object(dict).get("config_path") or get_config_path()

    if config_path.exists() and not force:
        print_error(f"Config already exists: {config_path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(PackmateConfig(), config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
