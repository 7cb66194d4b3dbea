"""Package manager descriptors.

This module defines the fixed set of package managers packmate can
generate scripts for, along with the metadata needed to pick a script
dialect and decide whether a manager's registry can be queried.
"""

from dataclasses import dataclass
from enum import Enum


class PackageManagerId(str, Enum):
    """Enumeration of supported package managers."""

    # Windows
    WINGET = "winget"
    CHOCOLATEY = "chocolatey"
    SCOOP = "scoop"
    # macOS
    HOMEBREW = "homebrew"
    MACPORTS = "macports"
    # Linux
    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    FLATPAK = "flatpak"
    SNAP = "snap"


class OSFamily(str, Enum):
    """Operating system family a package manager runs on."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


class ScriptDialect(str, Enum):
    """Scripting language of generated install scripts.

    Attributes:
        POSIX: Bash script with ANSI colors (Linux and macOS managers).
        POWERSHELL: PowerShell script with #Requires directives (Windows).
    """

    POSIX = "posix"
    POWERSHELL = "powershell"

    @property
    def file_extension(self) -> str:
        """Return the conventional file extension for this dialect."""
        return ".ps1" if self == ScriptDialect.POWERSHELL else ".sh"


@dataclass(frozen=True, slots=True)
class PackageManager:
    """Static description of a package manager.

    Attributes:
        id: Stable manager identifier.
        name: Human-readable name used in banners and tables.
        os_family: Operating system family the manager belongs to.
        install_prefix: Command prefix used for one-line install commands.
        verifiable: Whether the manager exposes a public registry API.
    """

    id: PackageManagerId
    name: str
    os_family: OSFamily
    install_prefix: str
    verifiable: bool

    @property
    def dialect(self) -> ScriptDialect:
        """Script dialect selected by the manager's OS family."""
        if self.os_family == OSFamily.WINDOWS:
            return ScriptDialect.POWERSHELL
        return ScriptDialect.POSIX


PACKAGE_MANAGERS: dict[PackageManagerId, PackageManager] = {
    pm.id: pm
    for pm in (
        PackageManager(
            PackageManagerId.WINGET, "Winget", OSFamily.WINDOWS, "winget install -e --id", True
        ),
        PackageManager(
            PackageManagerId.CHOCOLATEY, "Chocolatey", OSFamily.WINDOWS, "choco install -y", True
        ),
        PackageManager(PackageManagerId.SCOOP, "Scoop", OSFamily.WINDOWS, "scoop install", False),
        PackageManager(
            PackageManagerId.HOMEBREW, "Homebrew", OSFamily.MACOS, "brew install", True
        ),
        PackageManager(
            PackageManagerId.MACPORTS, "MacPorts", OSFamily.MACOS, "sudo port install", False
        ),
        PackageManager(PackageManagerId.APT, "APT", OSFamily.LINUX, "sudo apt install -y", False),
        PackageManager(PackageManagerId.DNF, "DNF", OSFamily.LINUX, "sudo dnf install -y", False),
        PackageManager(
            PackageManagerId.PACMAN,
            "Pacman",
            OSFamily.LINUX,
            "sudo pacman -S --needed --noconfirm",
            False,
        ),
        PackageManager(
            PackageManagerId.ZYPPER, "Zypper", OSFamily.LINUX, "sudo zypper install -y", False
        ),
        PackageManager(
            PackageManagerId.FLATPAK, "Flatpak", OSFamily.LINUX, "flatpak install flathub -y", True
        ),
        PackageManager(PackageManagerId.SNAP, "Snap", OSFamily.LINUX, "sudo snap install", True),
    )
}


def get_package_manager(manager_id: PackageManagerId | str) -> PackageManager:
    """Look up a package manager descriptor.

    Args:
        manager_id: Manager identifier (enum member or its string value).

    Returns:
        The matching PackageManager.

    Raises:
        ValueError: If the identifier is not a known package manager.
    """
    return PACKAGE_MANAGERS[PackageManagerId(manager_id)]


def get_managers_by_os(os_family: OSFamily | str) -> list[PackageManager]:
    """Return all package managers belonging to one OS family."""
    family = OSFamily(os_family)
    return [pm for pm in PACKAGE_MANAGERS.values() if pm.os_family == family]


def verifiable_managers() -> frozenset[PackageManagerId]:
    """Return the ids of managers with a queryable registry."""
    return frozenset(pm.id for pm in PACKAGE_MANAGERS.values() if pm.verifiable)


def unverifiable_managers() -> frozenset[PackageManagerId]:
    """Return the ids of managers without a public registry API."""
    return frozenset(pm.id for pm in PACKAGE_MANAGERS.values() if not pm.verifiable)
