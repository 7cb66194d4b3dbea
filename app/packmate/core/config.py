"""Packmate configuration and settings.

This module provides the configuration model and I/O functions for
packmate: where verification results and the catalog live, the shared
secret guarding the scheduled verification trigger, and the registry
request policy (timeout, retries, backoff, politeness delay).

Configuration is stored in ~/.config/packmate/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from packmate.core.paths import get_config_path, get_results_path

logger = logging.getLogger(__name__)

# Environment variable overriding the configured cron secret
CRON_SECRET_ENV = "PACKMATE_CRON_SECRET"


class PackmateConfig(BaseModel):
    """Configuration for packmate.

    Attributes:
        results_path: JSONL file holding verification results. None means
            the XDG state default.
        catalog_path: Catalog TOML to use instead of the bundled one.
        cron_secret: Shared secret for the scheduled verification trigger.
        request_timeout: Per-request registry timeout in seconds.
        max_retries: Attempts per registry request (including the first).
        retry_base_delay: Initial backoff delay in seconds, doubled per retry.
        request_delay: Pause between registry requests in a full run.
    """

    model_config = ConfigDict(extra="forbid")

    results_path: Annotated[
        Path | None,
        Field(description="Verification results file (None = XDG default)"),
    ] = None
    catalog_path: Annotated[
        Path | None,
        Field(description="Catalog file (None = bundled catalog)"),
    ] = None
    cron_secret: Annotated[
        str | None,
        Field(description="Bearer secret for the verification trigger"),
    ] = None
    request_timeout: Annotated[
        float,
        Field(gt=0, le=120, description="Registry request timeout in seconds"),
    ] = 10.0
    max_retries: Annotated[
        int,
        Field(ge=1, le=10, description="Attempts per registry request"),
    ] = 3
    retry_base_delay: Annotated[
        float,
        Field(ge=0, le=60, description="Initial retry backoff in seconds"),
    ] = 1.0
    request_delay: Annotated[
        float,
        Field(ge=0, le=10, description="Delay between registry requests"),
    ] = 0.1

    @property
    def effective_results_path(self) -> Path:
        """Results file path, falling back to the XDG state default."""
        return self.results_path or get_results_path()

    @property
    def effective_cron_secret(self) -> str | None:
        """Cron secret with the environment variable taking precedence.

        An empty value in either place counts as not configured.
        """
        return os.environ.get(CRON_SECRET_ENV) or self.cron_secret or None


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> PackmateConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated PackmateConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return PackmateConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> PackmateConfig:
    """Load configuration, falling back to defaults when no file exists.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return PackmateConfig()


def save_config(config: PackmateConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The PackmateConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: PackmateConfig) -> dict[str, object]:
    """Convert PackmateConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are left out.
    """
    result: dict[str, object] = {
        "request_timeout": config.request_timeout,
        "max_retries": config.max_retries,
        "retry_base_delay": config.retry_base_delay,
        "request_delay": config.request_delay,
    }
    if config.results_path is not None:
        result["results_path"] = str(config.results_path)
    if config.catalog_path is not None:
        result["catalog_path"] = str(config.catalog_path)
    if config.cron_secret is not None:
        result["cron_secret"] = config.cron_secret
    return result
