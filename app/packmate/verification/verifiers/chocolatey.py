"""Chocolatey community repository verifier."""

import httpx

from packmate.models.manager import PackageManagerId
from packmate.verification.verifiers.base import RegistryResponseError, Verifier

CHOCOLATEY_API_BASE = "https://community.chocolatey.org/api/v2/Packages()"


def escape_odata_string(value: str) -> str:
    """Escape a value for an OData string literal by doubling single quotes."""
    return value.replace("'", "''")


class ChocolateyVerifier(Verifier):
    """Verifier backed by the Chocolatey OData feed.

    The feed answers 200 with an empty result set for unknown packages, so
    existence is decided from the body rather than the status code.
    """

    registry_name = "Chocolatey API"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.CHOCOLATEY

    def build_url(self, package_name: str) -> str:
        return f"{CHOCOLATEY_API_BASE}?$filter=Id eq '{escape_odata_string(package_name.strip())}'"

    def headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    def interpret(self, response: httpx.Response) -> bool:
        if response.status_code == 404:
            return False
        if not response.is_success:
            raise self.error_for(response)

        try:
            data = response.json()
        except ValueError as e:
            msg = "Invalid JSON response from Chocolatey API"
            raise RegistryResponseError(msg) from e

        container = data.get("d") if isinstance(data, dict) else None
        if isinstance(container, dict):
            results = container.get("results")
        else:
            # Some feed versions return the result list directly under "d"
            results = container
        if not isinstance(results, list):
            msg = "Unexpected response shape from Chocolatey API"
            raise RegistryResponseError(msg)
        return len(results) > 0
