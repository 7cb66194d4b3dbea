"""Flatpak script generator.

Flatpak apps are installed per user from Flathub, so the script needs no
root. Selections of three or more apps are installed as one parallel
batch.
"""

from typing import ClassVar

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator

FLATHUB_REPO = "https://dl.flathub.org/repo/flathub.flatpakrepo"


class FlatpakGenerator(PosixScriptGenerator):
    """Generator for flatpak install scripts."""

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(parallel_threshold=3)
    executable = "flatpak"
    missing_message = "Flatpak not installed"
    install_hint = "Install: sudo apt/dnf/pacman install flatpak"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.FLATPAK

    def is_installed_body(self) -> str:
        return 'flatpak list --app --columns=application 2>/dev/null | grep -Fxq "$1"\n'

    def install_command(self) -> str:
        return 'flatpak install flathub -y "$pkg"'

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        return (
            "if ! flatpak remotes 2>/dev/null | grep -q flathub; then\n"
            '    info "Adding Flathub..."\n'
            f"    flatpak remote-add --if-not-exists flathub {FLATHUB_REPO} "
            '&& success "Flathub added" || warn "Could not add Flathub, continuing..."\n'
            "fi\n"
        )

    def footer(self) -> str:
        return 'echo\ninfo "Restart session for apps to appear in menu."\n'
