"""APT script generator for Debian and Ubuntu based systems."""

from typing import ClassVar

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator, Privilege


class AptGenerator(PosixScriptGenerator):
    """Generator for apt-get install scripts.

    Waits for the dpkg frontend lock, refreshes the package index once and
    checks installation state through dpkg-query.
    """

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(
        privilege=Privilege.REFUSE_ROOT,
        lock_path="/var/lib/dpkg/lock-frontend",
    )
    executable = "apt-get"
    missing_message = "APT not found. This script is for Debian/Ubuntu-based systems."
    failure_hints = (
        ("Unable to locate package", "Package not found"),
        ("dpkg was interrupted", "dpkg interrupted - try: sudo dpkg --configure -a"),
    )

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.APT

    @property
    def label(self) -> str:
        return "APT (Debian/Ubuntu)"

    def is_installed_body(self) -> str:
        return (
            'dpkg-query -W -f=\'${Status}\' "$1" 2>/dev/null | grep -q "install ok installed"\n'
        )

    def install_command(self) -> str:
        return 'sudo DEBIAN_FRONTEND=noninteractive apt-get install -y "$pkg"'

    def lock_condition(self) -> str:
        # The lock file always exists; it is held, not created, while in use
        return f"sudo fuser {self.quirks.lock_path} >/dev/null 2>&1"

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        return (
            'info "Updating package lists..."\n'
            "with_retry sudo apt-get update -qq >/dev/null "
            '&& success "Updated" || warn "Update failed, continuing..."\n'
        )
