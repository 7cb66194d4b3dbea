"""Registry verifiers for the package managers that expose a public API.

This module exports the verifier classes and get_verifier() to look one
up by manager id.
"""

import httpx

from packmate.models.manager import PackageManagerId
from packmate.verification.verifiers.base import (
    InvalidPackageIdError,
    RateLimitError,
    RegistryError,
    RegistryNetworkError,
    RegistryResponseError,
    RegistryUnavailableError,
    Verifier,
)
from packmate.verification.verifiers.chocolatey import ChocolateyVerifier
from packmate.verification.verifiers.flatpak import FlatpakVerifier
from packmate.verification.verifiers.homebrew import HomebrewVerifier
from packmate.verification.verifiers.snap import SnapVerifier
from packmate.verification.verifiers.winget import WingetVerifier

VERIFIERS: dict[PackageManagerId, type[Verifier]] = {
    PackageManagerId.HOMEBREW: HomebrewVerifier,
    PackageManagerId.CHOCOLATEY: ChocolateyVerifier,
    PackageManagerId.WINGET: WingetVerifier,
    PackageManagerId.FLATPAK: FlatpakVerifier,
    PackageManagerId.SNAP: SnapVerifier,
}


def get_verifier(manager_id: PackageManagerId | str, client: httpx.Client) -> Verifier | None:
    """Return a verifier for a manager, or None if it has no registry API."""
    verifier_cls = VERIFIERS.get(PackageManagerId(manager_id))
    if verifier_cls is None:
        return None
    return verifier_cls(client)


__all__ = [
    "VERIFIERS",
    "ChocolateyVerifier",
    "FlatpakVerifier",
    "HomebrewVerifier",
    "InvalidPackageIdError",
    "RateLimitError",
    "RegistryError",
    "RegistryNetworkError",
    "RegistryResponseError",
    "RegistryUnavailableError",
    "SnapVerifier",
    "Verifier",
    "WingetVerifier",
    "get_verifier",
]
