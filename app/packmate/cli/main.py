"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from packmate import __version__
from packmate.cli.commands import catalog, config, flagged, generate, status, verify
from packmate.utils.formatting import err_console

app = typer.Typer(
    name="packmate",
    help="Cross-platform install scripts and package verification.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"packmate version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route packmate logs to stderr through Rich.

    --verbose enables DEBUG, --quiet limits output to errors, the default
    is WARNING.
    """
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    handler = RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log errors.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to use instead of ~/.config/packmate/config.toml.",
        ),
    ] = None,
) -> None:
    """packmate - install scripts for 11 package managers.

    Pick applications from the catalog, get a ready-to-run install script
    or one-liner, and keep the catalog honest by verifying package ids
    against the package registries.
    """
    configure_logging(verbose, quiet)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path


app.command("managers")(catalog.managers)
app.command("apps")(catalog.apps)
app.command("script")(generate.script)
app.command("command")(generate.command)
app.add_typer(verify.app, name="verify")
app.add_typer(status.app, name="status")
app.add_typer(flagged.app, name="flagged")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
