"""Unit tests for package manager descriptors."""

import pytest
from packmate.models.manager import (
    PACKAGE_MANAGERS,
    OSFamily,
    PackageManagerId,
    ScriptDialect,
    get_managers_by_os,
    get_package_manager,
    unverifiable_managers,
    verifiable_managers,
)


class TestPackageManagers:
    """Tests for the PACKAGE_MANAGERS table."""

    def test_all_ids_described(self) -> None:
        """Every PackageManagerId has exactly one descriptor."""
        assert set(PACKAGE_MANAGERS) == set(PackageManagerId)
        assert len(PACKAGE_MANAGERS) == 11

    def test_verifiable_set(self) -> None:
        """Exactly winget, chocolatey, homebrew, flatpak and snap are verifiable."""
        assert verifiable_managers() == {
            PackageManagerId.WINGET,
            PackageManagerId.CHOCOLATEY,
            PackageManagerId.HOMEBREW,
            PackageManagerId.FLATPAK,
            PackageManagerId.SNAP,
        }

    def test_unverifiable_is_complement(self) -> None:
        """Unverifiable managers are the rest of the table."""
        assert unverifiable_managers() == set(PackageManagerId) - verifiable_managers()
        assert PackageManagerId.APT in unverifiable_managers()

    def test_windows_managers_use_powershell(self) -> None:
        """Windows managers produce PowerShell scripts, all others bash."""
        for pm in PACKAGE_MANAGERS.values():
            expected = (
                ScriptDialect.POWERSHELL if pm.os_family == OSFamily.WINDOWS else ScriptDialect.POSIX
            )
            assert pm.dialect == expected

    def test_file_extension(self) -> None:
        """Dialects map to their conventional extensions."""
        assert ScriptDialect.POWERSHELL.file_extension == ".ps1"
        assert ScriptDialect.POSIX.file_extension == ".sh"


class TestLookup:
    """Tests for descriptor lookup helpers."""

    def test_get_by_string(self) -> None:
        """Lookup accepts the plain string id."""
        pm = get_package_manager("homebrew")
        assert pm.id == PackageManagerId.HOMEBREW
        assert pm.name == "Homebrew"

    def test_get_unknown_raises(self) -> None:
        """Unknown ids raise ValueError."""
        with pytest.raises(ValueError):
            get_package_manager("emerge")

    def test_by_os(self) -> None:
        """Managers are grouped by operating system."""
        windows = {pm.id for pm in get_managers_by_os(OSFamily.WINDOWS)}
        macos = {pm.id for pm in get_managers_by_os("macos")}
        linux = get_managers_by_os(OSFamily.LINUX)

        assert windows == {
            PackageManagerId.WINGET,
            PackageManagerId.CHOCOLATEY,
            PackageManagerId.SCOOP,
        }
        assert macos == {PackageManagerId.HOMEBREW, PackageManagerId.MACPORTS}
        assert len(linux) == 6
