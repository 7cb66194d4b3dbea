"""Snap store verifier."""

from urllib.parse import quote

from packmate.models.manager import PackageManagerId
from packmate.verification.verifiers.base import InvalidPackageIdError, Verifier

SNAPCRAFT_API_BASE = "https://api.snapcraft.io/v2/snaps/info"


def snap_name(package_name: str) -> str:
    """Strip install flags (``--classic``, ``--edge``, ...) from a snap identifier."""
    names = [t for t in package_name.split() if not t.startswith("--")]
    return names[0] if names else ""


class SnapVerifier(Verifier):
    """Verifier backed by the Snapcraft store API."""

    registry_name = "Snapcraft API"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.SNAP

    def build_url(self, package_name: str) -> str:
        name = snap_name(package_name)
        if not name:
            msg = f"Invalid snap identifier: {package_name!r}"
            raise InvalidPackageIdError(msg)
        return f"{SNAPCRAFT_API_BASE}/{quote(name, safe='-')}"

    def headers(self) -> dict[str, str]:
        return {"Snap-Device-Series": "16"}
