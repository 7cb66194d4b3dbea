"""Scoop script generator for Windows.

Scoop identifiers may name a bucket (``extras/firefox``). Buckets other
than the default one are added before installing.
"""

from packmate.models.manager import PackageManagerId
from packmate.scripts.base import InstallTarget, PowerShellScriptGenerator
from packmate.scripts.escape import escape_powershell_string


class ScoopGenerator(PowerShellScriptGenerator):
    """Generator for scoop PowerShell scripts."""

    executable = "scoop"
    function_stem = "Scoop"
    install_url = "https://scoop.sh"

    @property
    def manager_id(self) -> PackageManagerId:
        return PackageManagerId.SCOOP

    def is_installed_body(self) -> str:
        return (
            "$appName = $PackageId.Split('/')[-1]\n"
            "$result = scoop list 2>$null | Where-Object { $_.Name -eq $appName }\n"
            "return $null -ne $result\n"
        )

    def install_command(self) -> str:
        return "scoop install $PackageId"

    def buckets(self, targets: list[InstallTarget]) -> list[str]:
        """Return the distinct buckets referenced by the selection, in order."""
        seen: list[str] = []
        for target in targets:
            if "/" in target.package:
                bucket = target.package.split("/", 1)[0]
                if bucket not in seen:
                    seen.append(bucket)
        return seen

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        lines: list[str] = []
        for bucket in self.buckets(targets):
            quoted = escape_powershell_string(bucket)
            lines.append(
                f"if (-not (scoop bucket list | Where-Object {{ $_.Name -eq '{quoted}' }})) {{\n"
                f"    Write-Info 'Adding bucket {quoted}...'\n"
                f"    scoop bucket add '{quoted}' 2>&1 | Out-Null\n"
                "    if ($LASTEXITCODE -eq 0) { Write-Success 'Bucket added' } "
                "else { Write-Warn 'Could not add bucket, continuing...' }\n"
                "}\n"
            )
        return "".join(lines)
