"""Winget script generator for Windows."""

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import PowerShellScriptGenerator


class WingetGenerator(PowerShellScriptGenerator):
    """Generator for winget PowerShell scripts.

    Source and package agreements are accepted up front so installs run
    unattended.
    """

    executable = "winget"
    function_stem = "Winget"
    install_url = "https://aka.ms/getwinget"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.WINGET

    def is_installed_body(self) -> str:
        return (
            "$result = winget list --id $PackageId --exact --accept-source-agreements 2>$null\n"
            "return [bool]($result -match [regex]::Escape($PackageId))\n"
        )

    def install_command(self) -> str:
        return (
            "winget install -e --id $PackageId --silent "
            "--accept-source-agreements --accept-package-agreements"
        )
