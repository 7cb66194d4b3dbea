"""Homebrew formula and cask verifier."""

from urllib.parse import quote

from packmate.models.manager import PackageManagerId
from packmate.verification.verifiers.base import InvalidPackageIdError, Verifier

HOMEBREW_API_BASE = "https://formulae.brew.sh/api"


class HomebrewVerifier(Verifier):
    """Verifier backed by the formulae.brew.sh JSON API.

    Identifiers prefixed with ``--cask`` are looked up as casks, all
    others as formulae.
    """

    registry_name = "Homebrew API"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.HOMEBREW

    def build_url(self, package_name: str) -> str:
        tokens = package_name.split()
        is_cask = "--cask" in tokens
        names = [t for t in tokens if t != "--cask"]
        if len(names) != 1:
            msg = f"Invalid Homebrew package identifier: {package_name!r}"
            raise InvalidPackageIdError(msg)
        kind = "cask" if is_cask else "formula"
        return f"{HOMEBREW_API_BASE}/{kind}/{quote(names[0], safe='@+')}.json"
