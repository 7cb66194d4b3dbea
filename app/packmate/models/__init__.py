"""Data models for packmate.

This module exports the core data structures used throughout the application.
"""

from packmate.models.catalog import Catalog, CatalogApp, ResolvedPackage
from packmate.models.manager import (
    PACKAGE_MANAGERS,
    OSFamily,
    PackageManager,
    PackageManagerId,
    ScriptDialect,
    get_managers_by_os,
    get_package_manager,
    unverifiable_managers,
    verifiable_managers,
)
from packmate.models.verification import (
    VerificationResult,
    VerificationStatus,
    VerificationSummary,
    pending_placeholder,
)

__all__ = [
    "PACKAGE_MANAGERS",
    "Catalog",
    "CatalogApp",
    "OSFamily",
    "PackageManager",
    "PackageManagerId",
    "ResolvedPackage",
    "ScriptDialect",
    "VerificationResult",
    "VerificationStatus",
    "VerificationSummary",
    "get_managers_by_os",
    "get_package_manager",
    "pending_placeholder",
    "unverifiable_managers",
    "verifiable_managers",
]
