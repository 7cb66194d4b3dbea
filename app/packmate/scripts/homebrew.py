"""Homebrew script generator for macOS (and Linuxbrew).

Casks are marked with a ``--cask`` prefix in the catalog. They are grouped
separately in one-liners and skipped when the script runs on Linux, where
Homebrew only supports formulae.
"""

from typing import ClassVar

from packmate.models.catalog import ResolvedPackage
from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, InstallTarget, PosixScriptGenerator, Privilege

CASK_FLAG = "--cask"


class HomebrewGenerator(PosixScriptGenerator):
    """Generator for brew install scripts."""

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(
        privilege=Privilege.REFUSE_ROOT,
        flag_marker=CASK_FLAG,
    )
    executable = "brew"
    missing_message = "Homebrew not found. Install from https://brew.sh"
    failure_hints = (
        ("No available formula", "Formula not found"),
        ("No Cask with this name", "Cask not found"),
    )

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.HOMEBREW

    def is_installed_body(self) -> str:
        return (
            'if [ "$2" == "--cask" ]; then\n'
            '    brew list --cask 2>/dev/null | grep -Fxq "$1"\n'
            "else\n"
            '    brew list --formula 2>/dev/null | grep -Fxq "$1"\n'
            "fi\n"
        )

    def install_command(self) -> str:
        return 'brew install $flags "$pkg"'

    def pre_install(self) -> str:
        return (
            'if [ "$flags" == "--cask" ] && [ "$IS_MACOS" = false ]; then\n'
            '    printf "\\r\\033[K${YELLOW}○${NC} %s ${DIM}(cask skipped on Linux)${NC}\\n" "$name"\n'
            '    SKIPPED+=("$name")\n'
            "    return 0\n"
            "fi\n"
        )

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        return (
            "IS_MACOS=false\n"
            'if [[ "$OSTYPE" == "darwin"* ]]; then\n'
            "    IS_MACOS=true\n"
            "fi\n"
            "\n"
            'if [ "$IS_MACOS" = true ]; then\n'
            '    info "Detected macOS"\n'
            "else\n"
            '    info "Detected Linux - formulae only (casks will be skipped)"\n'
            "fi\n"
            "\n"
            'info "Updating Homebrew..."\n'
            'brew update >/dev/null 2>&1 && success "Updated" || warn "Update failed, continuing..."\n'
        )

    def build_command(self, packages: list[ResolvedPackage]) -> str:
        formulae: list[str] = []
        casks: list[str] = []
        for target in self.targets(packages):
            (casks if target.flag else formulae).append(target.package)
        commands: list[str] = []
        if formulae:
            commands.append(f"brew install {' '.join(formulae)}")
        if casks:
            commands.append(f"brew install {CASK_FLAG} {' '.join(casks)}")
        return " && ".join(commands)
