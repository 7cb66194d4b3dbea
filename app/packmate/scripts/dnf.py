"""DNF script generator for Fedora based systems."""

from typing import ClassVar

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator, Privilege

# Packages only available from RPM Fusion
RPM_FUSION_PACKAGES = frozenset({"steam", "vlc", "ffmpeg", "obs-studio"})

RPM_FUSION_FREE = (
    "https://mirrors.rpmfusion.org/free/fedora/rpmfusion-free-release-$(rpm -E %fedora).noarch.rpm"
)
RPM_FUSION_NONFREE = (
    "https://mirrors.rpmfusion.org/nonfree/fedora/"
    "rpmfusion-nonfree-release-$(rpm -E %fedora).noarch.rpm"
)


class DnfGenerator(PosixScriptGenerator):
    """Generator for dnf install scripts.

    Enables RPM Fusion first when the selection contains a package that
    Fedora itself does not ship.
    """

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(privilege=Privilege.REFUSE_ROOT)
    executable = "dnf"
    missing_message = "DNF not found. This script is for Fedora-based systems."
    failure_hints = (("No match", "Package not found"),)

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.DNF

    @property
    def label(self) -> str:
        return "DNF (Fedora)"

    def is_installed_body(self) -> str:
        return 'rpm -q "$1" &>/dev/null\n'

    def install_command(self) -> str:
        return 'sudo dnf install -y "$pkg"'

    def needs_rpm_fusion(self, targets: list[InstallTarget]) -> bool:
        """Check whether any selected package comes from RPM Fusion."""
        return any(t.package in RPM_FUSION_PACKAGES for t in targets)

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        if not self.needs_rpm_fusion(targets):
            return ""
        return (
            "if ! dnf repolist 2>/dev/null | grep -q rpmfusion; then\n"
            '    info "Enabling RPM Fusion..."\n'
            "    sudo dnf install -y \\\n"
            f'        "{RPM_FUSION_FREE}" \\\n'
            f'        "{RPM_FUSION_NONFREE}" \\\n'
            '        >/dev/null 2>&1 && success "RPM Fusion enabled" || warn "RPM Fusion setup failed"\n'
            "fi\n"
        )
