"""MacPorts script generator for macOS."""

from typing import ClassVar

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator, Privilege


class MacPortsGenerator(PosixScriptGenerator):
    """Generator for port install scripts.

    MacPorts installs into /opt/local and must run as root, so the script
    is meant to be started with sudo.
    """

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(privilege=Privilege.REQUIRE_ROOT)
    executable = "port"
    missing_message = "MacPorts not found."
    install_hint = "Install from https://www.macports.org/install.php"
    failure_hints = (
        ("Error: Port .* not found", "Port not found"),
        ("Error: Unable to execute port", "Port execution failed"),
    )

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.MACPORTS

    def is_installed_body(self) -> str:
        return 'port installed "$1" 2>/dev/null | grep -q "(active)"\n'

    def install_command(self) -> str:
        return 'port install "$pkg"'

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        return (
            'info "Updating MacPorts..."\n'
            'port selfupdate >/dev/null 2>&1 && success "Updated" || warn "Update failed, continuing..."\n'
        )
