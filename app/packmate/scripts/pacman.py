"""Pacman script generator for Arch based systems."""

from typing import ClassVar

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator, Privilege


class PacmanGenerator(PosixScriptGenerator):
    """Generator for pacman install scripts."""

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(
        privilege=Privilege.REFUSE_ROOT,
        lock_path="/var/lib/pacman/db.lck",
    )
    executable = "pacman"
    missing_message = "Pacman not found. This script is for Arch-based systems."
    failure_hints = (
        ("target not found", "Package not found"),
        ("signature", "GPG issue - try: sudo pacman-key --refresh-keys"),
    )

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.PACMAN

    @property
    def label(self) -> str:
        return "Pacman (Arch)"

    def is_installed_body(self) -> str:
        return 'pacman -Qi "$1" &>/dev/null\n'

    def install_command(self) -> str:
        return 'sudo pacman -S --needed --noconfirm "$pkg"'

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        return (
            'info "Syncing databases..."\n'
            "with_retry sudo pacman -Sy --noconfirm >/dev/null "
            '&& success "Synced" || warn "Sync failed, continuing..."\n'
        )
