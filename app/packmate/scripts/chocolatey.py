"""Chocolatey script generator for Windows."""

from typing import ClassVar

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import GeneratorQuirks, PowerShellScriptGenerator, Privilege


class ChocolateyGenerator(PowerShellScriptGenerator):
    """Generator for choco PowerShell scripts.

    Chocolatey installs machine-wide, so the script declares
    ``#Requires -RunAsAdministrator`` and PowerShell refuses to start it
    from a non-elevated session.
    """

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks(privilege=Privilege.REQUIRE_ROOT)
    executable = "choco"
    function_stem = "Choco"
    install_url = "https://chocolatey.org/install"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.CHOCOLATEY

    def is_installed_body(self) -> str:
        return (
            "$result = choco list --local-only --exact $PackageId 2>$null\n"
            'return [bool]($result -match "^$([regex]::Escape($PackageId))\\s")\n'
        )

    def install_command(self) -> str:
        return "choco install $PackageId -y --no-progress"
