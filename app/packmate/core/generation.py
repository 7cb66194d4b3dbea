"""Install script and one-liner generation.

This module is the entry point for turning a selection of catalog
application ids into text for a package manager. Resolution against the
catalog happens here; the generators only see resolved packages.
"""

import logging
from collections.abc import Iterable
from datetime import date

from packmate.models.catalog import Catalog
from packmate.models.manager import PackageManagerId
from packmate.scripts import get_generator

logger = logging.getLogger(__name__)


def generate_install_script(
    app_ids: Iterable[str],
    manager: PackageManagerId | str,
    catalog: Catalog,
    generated: date | None = None,
) -> str:
    """Generate an install script for the selected applications.

    Args:
        app_ids: Selected application identifiers. Unknown ids and apps not
            offered on the manager are ignored.
        manager: Target package manager.
        catalog: Catalog used to resolve package identifiers.
        generated: Date shown in the banner. Defaults to today.

    Returns:
        Script text in the manager's dialect.

    Raises:
        ValueError: If the manager id is unknown.
    """
    generator = get_generator(manager)
    packages = catalog.resolve(list(app_ids), generator.manager_id)
    logger.debug(
        "Generating %s script for %d package(s)", generator.manager_id.value, len(packages)
    )
    return generator.generate(packages, generated)


def generate_command(
    app_ids: Iterable[str],
    manager: PackageManagerId | str,
    catalog: Catalog,
) -> str:
    """Generate a one-line install command for the selected applications.

    Raises:
        ValueError: If the manager id is unknown.
    """
    generator = get_generator(manager)
    packages = catalog.resolve(list(app_ids), generator.manager_id)
    return generator.generate_command(packages)
