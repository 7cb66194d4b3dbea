"""Zypper script generator for openSUSE based systems."""

from typing import ClassVar

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator, Privilege


class ZypperGenerator(PosixScriptGenerator):
    """Generator for zypper install scripts."""

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(
        privilege=Privilege.REFUSE_ROOT,
        lock_path="/var/run/zypp.pid",
    )
    executable = "zypper"
    missing_message = "Zypper not found. This script is for openSUSE-based systems."
    failure_hints = (("not found", "Package not found"),)

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.ZYPPER

    @property
    def label(self) -> str:
        return "Zypper (openSUSE)"

    def is_installed_body(self) -> str:
        return 'rpm -q "$1" &>/dev/null\n'

    def install_command(self) -> str:
        return 'sudo zypper --non-interactive install --auto-agree-with-licenses "$pkg"'

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        return (
            'info "Refreshing repos..."\n'
            "with_retry sudo zypper --non-interactive refresh >/dev/null "
            '&& success "Refreshed" || warn "Refresh failed, continuing..."\n'
        )
