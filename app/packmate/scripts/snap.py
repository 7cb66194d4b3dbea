"""Snap script generator.

Snaps that need classic confinement carry a ``--classic`` marker in their
catalog identifier. The marker is stripped before querying and passed to
``snap install`` only for those snaps.
"""

from typing import ClassVar

from packmate.models.catalog import ResolvedPackage
from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator

CLASSIC_FLAG = "--classic"


class SnapGenerator(PosixScriptGenerator):
    """Generator for snap install scripts."""

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(flag_marker=CLASSIC_FLAG)
    executable = "snap"
    missing_message = "Snap not installed"
    install_hint = "Install: sudo apt/dnf/pacman install snapd"
    failure_hints = (
        ("not found", "Snap not found"),
        ("classic", "Requires --classic flag"),
    )

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.SNAP

    def is_installed_body(self) -> str:
        return 'snap list "$1" &>/dev/null\n'

    def install_command(self) -> str:
        return 'sudo snap install "$pkg" $flags'

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        return (
            "if command -v systemctl &>/dev/null && ! systemctl is-active --quiet snapd; then\n"
            '    info "Starting snapd..."\n'
            "    sudo systemctl enable --now snapd.socket >/dev/null 2>&1 && sleep 2 "
            '&& success "snapd started" || warn "Could not start snapd, continuing..."\n'
            "fi\n"
        )

    def build_command(self, packages: list[ResolvedPackage]) -> str:
        """Build the one-liner, one call per classic snap.

        ``snap install --classic`` applies to every snap named in the call,
        so classic snaps are installed individually.
        """
        regular: list[str] = []
        commands: list[str] = []
        classic: list[str] = []
        for target in self.targets(packages):
            if target.flag:
                classic.append(target.package)
            else:
                regular.append(target.package)
        if regular:
            commands.append(f"sudo snap install {' '.join(regular)}")
        commands.extend(f"sudo snap install {name} {CLASSIC_FLAG}" for name in classic)
        return " && ".join(commands)
