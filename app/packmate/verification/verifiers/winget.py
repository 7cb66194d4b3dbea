"""Winget package verifier.

Winget manifests live in the microsoft/winget-pkgs GitHub repository under
``manifests/<first letter>/<Publisher>/<Name...>``; a package exists when
its manifest directory does.
"""

import time
from dataclasses import dataclass

import httpx

from packmate.models.manager import PackageManagerId
from packmate.verification.verifiers.base import (
    InvalidPackageIdError,
    RateLimitError,
    RegistryError,
    Verifier,
)

WINGET_GITHUB_API_BASE = "https://api.github.com/repos/microsoft/winget-pkgs/contents/manifests"


@dataclass(frozen=True, slots=True)
class WingetId:
    """A winget identifier split into its manifest path parts."""

    publisher: str
    name: str

    @property
    def first_letter(self) -> str:
        return self.publisher[0].lower()

    @property
    def manifest_path(self) -> str:
        return "/".join([self.first_letter, self.publisher, *self.name.split(".")])


def parse_winget_id(package_name: str) -> WingetId:
    """Parse a ``Publisher.Name`` winget identifier.

    Raises:
        InvalidPackageIdError: If the identifier lacks a publisher or name.
    """
    publisher, sep, name = package_name.strip().partition(".")
    if not sep or not publisher or not name or " " in package_name.strip():
        msg = "Invalid Winget package ID format. Expected: Publisher.PackageName"
        raise InvalidPackageIdError(msg)
    return WingetId(publisher=publisher, name=name)


class WingetVerifier(Verifier):
    """Verifier backed by the GitHub contents API."""

    registry_name = "GitHub API"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.WINGET

    def build_url(self, package_name: str) -> str:
        return f"{WINGET_GITHUB_API_BASE}/{parse_winget_id(package_name).manifest_path}"

    def headers(self) -> dict[str, str]:
        return {"Accept": "application/vnd.github.v3+json"}

    def error_for(self, response: httpx.Response) -> RegistryError:
        # GitHub signals exhausted unauthenticated quota with 403
        if response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            retry_after = _seconds_until_reset(response.headers.get("X-RateLimit-Reset"))
            suffix = f". Retry after {retry_after:g}s" if retry_after is not None else ""
            return RateLimitError(f"Rate limited by GitHub API{suffix}", retry_after)
        return super().error_for(response)


def _seconds_until_reset(reset: str | None) -> float | None:
    """Convert an X-RateLimit-Reset epoch timestamp to a delay in seconds."""
    if reset is None:
        return None
    try:
        return max(0.0, float(reset) - time.time())
    except ValueError:
        return None
