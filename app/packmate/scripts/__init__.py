"""Install script generators for all supported package managers.

This package provides one ScriptGenerator per package manager. Use
get_generator() to look one up by manager id.
"""

from packmate.models.manager import PackageManagerId
from packmate.scripts.apt import AptGenerator
from packmate.scripts.base import (
    NO_PACKAGES_COMMAND,
    GeneratorQuirks,
    InstallTarget,
    PosixScriptGenerator,
    PowerShellScriptGenerator,
    Privilege,
    ScriptGenerator,
)
from packmate.scripts.chocolatey import ChocolateyGenerator
from packmate.scripts.dnf import DnfGenerator
from packmate.scripts.escape import escape_powershell_string, escape_shell_string
from packmate.scripts.flatpak import FlatpakGenerator
from packmate.scripts.homebrew import HomebrewGenerator
from packmate.scripts.macports import MacPortsGenerator
from packmate.scripts.pacman import PacmanGenerator
from packmate.scripts.scoop import ScoopGenerator
from packmate.scripts.snap import SnapGenerator
from packmate.scripts.winget import WingetGenerator
from packmate.scripts.zypper import ZypperGenerator

GENERATORS: dict[PackageManagerId, type[ScriptGenerator]] = {
    PackageManagerId.WINGET: WingetGenerator,
    PackageManagerId.CHOCOLATEY: ChocolateyGenerator,
    PackageManagerId.SCOOP: ScoopGenerator,
    PackageManagerId.HOMEBREW: HomebrewGenerator,
    PackageManagerId.MACPORTS: MacPortsGenerator,
    PackageManagerId.APT: AptGenerator,
    PackageManagerId.DNF: DnfGenerator,
    PackageManagerId.PACMAN: PacmanGenerator,
    PackageManagerId.ZYPPER: ZypperGenerator,
    PackageManagerId.FLATPAK: FlatpakGenerator,
    PackageManagerId.SNAP: SnapGenerator,
}


def get_generator(manager_id: PackageManagerId | str) -> ScriptGenerator:
    """Return the generator for a package manager.

    Raises:
        ValueError: If the identifier is not a known package manager.
    """
    return GENERATORS[PackageManagerId(manager_id)]()


__all__ = [
    "GENERATORS",
    "NO_PACKAGES_COMMAND",
    "AptGenerator",
    "ChocolateyGenerator",
    "DnfGenerator",
    "FlatpakGenerator",
    "GeneratorQuirks",
    "HomebrewGenerator",
    "InstallTarget",
    "MacPortsGenerator",
    "PacmanGenerator",
    "PosixScriptGenerator",
    "PowerShellScriptGenerator",
    "Privilege",
    "ScoopGenerator",
    "ScriptGenerator",
    "SnapGenerator",
    "WingetGenerator",
    "ZypperGenerator",
    "escape_powershell_string",
    "escape_shell_string",
    "get_generator",
]
