"""Flathub appstream verifier."""

from urllib.parse import quote

from packmate.models.manager import PackageManagerId
from packmate.verification.verifiers.base import InvalidPackageIdError, Verifier

FLATHUB_API_BASE = "https://flathub.org/api/v2/appstream"


class FlatpakVerifier(Verifier):
    """Verifier backed by the Flathub appstream API."""

    registry_name = "Flathub API"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.FLATPAK

    def build_url(self, package_name: str) -> str:
        app_id = package_name.strip()
        if not app_id or " " in app_id:
            msg = f"Invalid Flatpak application id: {package_name!r}"
            raise InvalidPackageIdError(msg)
        return f"{FLATHUB_API_BASE}/{quote(app_id, safe='.-_')}"
