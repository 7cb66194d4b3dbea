"""Catalog file I/O operations.

This module loads the application catalog from TOML and validates it with
the Pydantic catalog models. Without an explicit path the catalog bundled
with the package is used.
"""

import tomllib
from importlib import resources
from pathlib import Path

from pydantic import ValidationError

from packmate.models.catalog import Catalog

BUNDLED_CATALOG = "catalog.toml"


class CatalogError(Exception):
    """Base exception for catalog-related errors."""


class CatalogNotFoundError(CatalogError):
    """Raised when the catalog file is not found."""


class CatalogParseError(CatalogError):
    """Raised when the catalog file cannot be parsed."""


class CatalogValidationError(CatalogError):
    """Raised when the catalog content is invalid."""


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate an application catalog.

    Args:
        path: Path to a catalog TOML file. If None, loads the bundled catalog.

    Returns:
        Validated Catalog object.

    Raises:
        CatalogNotFoundError: If the catalog file doesn't exist.
        CatalogParseError: If the TOML syntax is invalid.
        CatalogValidationError: If the content doesn't match the schema.
    """
    if path is None:
        bundled = resources.files("packmate.data").joinpath(BUNDLED_CATALOG)
        return parse_catalog(bundled.read_text(encoding="utf-8"))

    if not path.exists():
        raise CatalogNotFoundError(f"Catalog not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Failed to read catalog: {e}") from e

    return parse_catalog(text)


def parse_catalog(text: str) -> Catalog:
    """Parse catalog TOML text.

    Raises:
        CatalogParseError: If the TOML syntax is invalid.
        CatalogValidationError: If the content doesn't match the schema.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise CatalogParseError(f"Invalid TOML syntax: {e}") from e

    try:
        return Catalog.model_validate(data)
    except ValidationError as e:
        raise CatalogValidationError(f"Invalid catalog content: {e}") from e
