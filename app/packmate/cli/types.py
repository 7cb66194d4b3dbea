"""Shared types and utilities for CLI commands.

This module provides the helpers every command uses to load the
configuration, the catalog and the result store, exiting with a readable
error instead of a traceback when one of them is unusable.
"""

from pathlib import Path

import typer

from packmate.api.handlers import ApiResponse
from packmate.core.catalog import CatalogError, load_catalog
from packmate.core.config import ConfigError, PackmateConfig, load_config_or_default
from packmate.models.catalog import Catalog
from packmate.store.results import ResultStore
from packmate.utils.formatting import print_error


def get_config(ctx: typer.Context) -> PackmateConfig:
    """Load the configuration selected by the global --config option.

    The result is cached on the context so nested commands load it once.

    Raises:
        typer.Exit: If the config file exists but is invalid.
    """
    obj = ctx.ensure_object(dict)
    config = obj.get("config")
    if isinstance(config, PackmateConfig):
        return config

    config_path: Path | None = obj.get("config_path")
    try:
        config = load_config_or_default(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    obj["config"] = config
    return config


def get_catalog(ctx: typer.Context) -> Catalog:
    """Load the catalog named in the configuration, or the bundled one.

    Raises:
        typer.Exit: If the catalog cannot be loaded.
    """
    config = get_config(ctx)
    try:
        return load_catalog(config.catalog_path)
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def open_store(ctx: typer.Context) -> ResultStore:
    """Create the result store for the configured results file.

    The store opens lazily; callers close it with a with-block.
    """
    return ResultStore(get_config(ctx).effective_results_path)


def require_ok(response: ApiResponse) -> None:
    """Exit with the handler's error message unless the response succeeded.

    Raises:
        typer.Exit: With code 1 for any non-2xx response.
    """
    if response.ok:
        return
    body = response.body if isinstance(response.body, dict) else {}
    message = body.get("error", f"Request failed with status {response.status_code}")
    if details := body.get("details"):
        message = f"{message}: {details}"
    print_error(message)
    raise typer.Exit(code=1)
