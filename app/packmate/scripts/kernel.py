"""Shared boilerplate of generated install scripts.

Every generated script is assembled from the same building blocks: a
banner, colored output helpers, progress and summary printers, counters,
and a retry wrapper with exponential backoff. This module holds those
blocks for both script dialects (bash and PowerShell). Generators only add
the manager-specific parts on top.
"""

from datetime import date

PRODUCT_NAME = "PACKMATE"
PRODUCT_TAGLINE = "Cross-Platform App Installer"

BANNER_ART = (
    "██████╗  █████╗  ██████╗██╗  ██╗███╗   ███╗ █████╗ ████████╗███████╗",
    "██╔══██╗██╔══██╗██╔════╝██║ ██╔╝████╗ ████║██╔══██╗╚══██╔══╝██╔════╝",
    "██████╔╝███████║██║     █████╔╝ ██╔████╔██║███████║   ██║   █████╗",
    "██╔═══╝ ██╔══██║██║     ██╔═██╗ ██║╚██╔╝██║██╔══██║   ██║   ██╔══╝",
    "██║     ██║  ██║╚██████╗██║  ██╗██║ ╚═╝ ██║██║  ██║   ██║   ███████╗",
    "╚═╝     ╚═╝  ╚═╝ ╚═════╝╚═╝  ╚═╝╚═╝     ╚═╝╚═╝  ╚═╝   ╚═╝   ╚══════╝",
)

RULE = "─" * 77

# Retry policy baked into generated scripts
SCRIPT_RETRY_ATTEMPTS = 3
SCRIPT_RETRY_DELAY = 5

# Initial per-package estimate (seconds) used for the ETA before any install finished
INITIAL_AVG_TIME = 8


def section(title: str) -> str:
    """Return a bash/PowerShell comment block introducing a script section."""
    return f"# {RULE}\n#  {title}\n# {RULE}\n"


# =============================================================================
# POSIX (bash)
# =============================================================================


def posix_header(manager_name: str, count: int, generated: date) -> str:
    """Build the shebang, banner and shell options of a bash script.

    Args:
        manager_name: Display name of the package manager.
        count: Number of packages the script installs.
        generated: Date shown in the banner.

    Returns:
        Header text ending with a blank line.
    """
    lines = ["#!/bin/bash", "#"]
    lines.extend(f"#  {row}" for row in BANNER_ART)
    lines.extend(
        [
            "#",
            f"#  {PRODUCT_TAGLINE}",
            "#",
            f"#  Package Manager: {manager_name}",
            f"#  Packages: {count}",
            f"#  Generated: {generated.isoformat()}",
            "#",
            f"# {RULE}",
            "",
            # Per-package failures are recorded, never fatal
            "set -uo pipefail",
            "",
        ]
    )
    return "\n".join(lines) + "\n"


_POSIX_HELPERS = r"""# Colors only when writing to a terminal
if [ -t 1 ]; then
    RED='\033[0;31m' GREEN='\033[0;32m' YELLOW='\033[1;33m'
    BLUE='\033[0;34m' CYAN='\033[0;36m' BOLD='\033[1m' DIM='\033[2m' NC='\033[0m'
else
    RED='' GREEN='' YELLOW='' BLUE='' CYAN='' BOLD='' DIM='' NC=''
fi

info()    { echo -e "${BLUE}::${NC} $1"; }
success() { echo -e "${GREEN}✓${NC} $1"; }
warn()    { echo -e "${YELLOW}!${NC} $1"; }
error()   { echo -e "${RED}✗${NC} $1" >&2; }
skip()    { echo -e "${DIM}○${NC} $1 ${DIM}(already installed)${NC}"; }
timing()  { echo -e "${GREEN}✓${NC} $1 ${DIM}($2s)${NC}"; }

trap 'printf "\n"; warn "Installation cancelled by user"; print_summary; exit 130' INT
"""

_POSIX_FUNCTIONS = r"""
show_progress() {
    local current=$1 total=$2 name=$3
    local percent=$((current * 100 / total))
    local remaining=$((total - current))
    local eta=$((remaining * AVG_TIME))
    local eta_str
    if [ "$eta" -ge 60 ]; then
        eta_str="~$((eta / 60))m"
    else
        eta_str="~${eta}s"
    fi
    printf "\r\033[K[%d%%] (%d/%d) Installing %s... ${DIM}%s left${NC}" "$percent" "$current" "$total" "$name" "$eta_str"
}

update_avg_time() {
    local new_time=$1
    local sum=$new_time
    local t
    if [ ${#INSTALL_TIMES[@]} -gt 0 ]; then
        for t in "${INSTALL_TIMES[@]}"; do
            sum=$((sum + t))
        done
    fi
    INSTALL_TIMES+=("$new_time")
    AVG_TIME=$((sum / ${#INSTALL_TIMES[@]}))
}

run_cmd() {
    "$@" 2>&1
}

with_retry() {
    local max_attempts=@ATTEMPTS@
    local attempt=1
    local delay=@DELAY@
    local output

    while [ $attempt -le $max_attempts ]; do
        if output=$(run_cmd "$@"); then
            echo "$output"
            return 0
        fi

        if echo "$output" | grep -qiE "network|connection|timeout|timed out|unreachable|resolve"; then
            if [ $attempt -lt $max_attempts ]; then
                warn "Network error, retrying in ${delay}s... (attempt $attempt/$max_attempts)" >&2
                sleep $delay
                delay=$((delay * 2))
                attempt=$((attempt + 1))
                continue
            fi
        fi

        echo "$output"
        return 1
    done
    return 1
}

print_summary() {
    local end_time
    end_time=$(date +%s)
    local duration=$((end_time - START_TIME))
    local mins=$((duration / 60))
    local secs=$((duration % 60))
    local installed=${#SUCCEEDED[@]}
    local skipped_count=${#SKIPPED[@]}
    local failed_count=${#FAILED[@]}

    echo
    echo "@RULE@"
    if [ $failed_count -eq 0 ]; then
        if [ $skipped_count -gt 0 ]; then
            echo -e "${GREEN}✓${NC} Done! $installed installed, $skipped_count already installed ${DIM}(${mins}m ${secs}s)${NC}"
        else
            echo -e "${GREEN}✓${NC} All $TOTAL packages installed! ${DIM}(${mins}m ${secs}s)${NC}"
        fi
    else
        echo -e "${YELLOW}!${NC} $installed installed, $skipped_count skipped, $failed_count failed ${DIM}(${mins}m ${secs}s)${NC}"
        echo
        echo -e "${RED}Failed:${NC}"
        local pkg
        for pkg in "${FAILED[@]}"; do
            echo "  • $pkg"
        done
    fi
    echo "@RULE@"
}
"""


def posix_utils(total: int) -> str:
    """Build the bash helper functions and counters for a script.

    Args:
        total: Number of packages the script installs.

    Returns:
        Bash source defining colors, message helpers, the Ctrl+C trap,
        counters, progress, average-time tracking, retry and summary.
    """
    counters = "\n".join(
        [
            f"TOTAL={total}",
            "CURRENT=0",
            "FAILED=()",
            "SUCCEEDED=()",
            "SKIPPED=()",
            "INSTALL_TIMES=()",
            "START_TIME=$(date +%s)",
            f"AVG_TIME={INITIAL_AVG_TIME}",
        ]
    )
    functions = (
        _POSIX_FUNCTIONS.replace("@ATTEMPTS@", str(SCRIPT_RETRY_ATTEMPTS))
        .replace("@DELAY@", str(SCRIPT_RETRY_DELAY))
        .replace("@RULE@", RULE)
    )
    return section("Colors & Utilities") + "\n" + _POSIX_HELPERS + "\n" + counters + "\n" + functions


def posix_empty_script(manager_name: str) -> str:
    """Build the no-op bash script used when nothing was selected."""
    return (
        "#!/bin/bash\n"
        f"# No packages selected for {manager_name}\n"
        'echo "No packages selected" >&2\n'
        "exit 0\n"
    )


# =============================================================================
# PowerShell
# =============================================================================


def powershell_header(
    manager_name: str,
    count: int,
    generated: date,
    require_admin: bool = False,
) -> str:
    """Build the #Requires directives and comment-based help of a script.

    Args:
        manager_name: Display name of the package manager.
        count: Number of packages the script installs.
        generated: Date shown in the help block.
        require_admin: Add ``#Requires -RunAsAdministrator``.

    Returns:
        Header text ending with a blank line.
    """
    lines = ["#Requires -Version 5.1"]
    if require_admin:
        lines.append("#Requires -RunAsAdministrator")
    lines.extend(
        [
            "<#",
            ".SYNOPSIS",
            f"    Packmate - {PRODUCT_TAGLINE}",
            ".DESCRIPTION",
            f"    {PRODUCT_NAME} - {PRODUCT_TAGLINE}",
            "",
            f"    Package Manager: {manager_name}",
            f"    Packages: {count}",
            f"    Generated: {generated.isoformat()}",
            "#>",
            "",
            '$ErrorActionPreference = "Continue"',
            '$ProgressPreference = "SilentlyContinue"',
            "",
        ]
    )
    return "\n".join(lines) + "\n"


_POWERSHELL_HELPERS = """\
function Write-Info { param([string]$Message) Write-Host ":: " -ForegroundColor Blue -NoNewline; Write-Host $Message }
function Write-Success { param([string]$Message) Write-Host "[OK] " -ForegroundColor Green -NoNewline; Write-Host $Message }
function Write-Warn { param([string]$Message) Write-Host "[!] " -ForegroundColor Yellow -NoNewline; Write-Host $Message }
function Write-Err { param([string]$Message) Write-Host "[X] " -ForegroundColor Red -NoNewline; Write-Host $Message }
function Write-Skip { param([string]$Message) Write-Host "[o] $Message (already installed)" -ForegroundColor DarkGray }
function Write-Timing { param([string]$Message, [int]$Seconds) Write-Host "[OK] " -ForegroundColor Green -NoNewline; Write-Host "$Message ($($Seconds)s)" }
"""

_POWERSHELL_FUNCTIONS = """
function Show-Progress {
    param([int]$Current, [int]$Total, [string]$Name)
    $percent = [math]::Floor($Current * 100 / $Total)
    $eta = ($Total - $Current) * $script:AvgTime
    if ($eta -ge 60) { $etaStr = "~$([math]::Floor($eta / 60))m" } else { $etaStr = "~$($eta)s" }
    Write-Host "[$percent%] ($Current/$Total) Installing $Name... " -NoNewline
    Write-Host "$etaStr left" -ForegroundColor DarkGray
}

function Update-AvgTime {
    param([int]$Seconds)
    $script:InstallTimes += $Seconds
    $sum = 0
    foreach ($t in $script:InstallTimes) { $sum += $t }
    $script:AvgTime = [math]::Floor($sum / $script:InstallTimes.Count)
}

function Invoke-WithRetry {
    param([scriptblock]$Command)
    $maxAttempts = @ATTEMPTS@
    $delay = @DELAY@
    for ($attempt = 1; $attempt -le $maxAttempts; $attempt++) {
        $script:LastOutput = & $Command 2>&1 | Out-String
        if ($LASTEXITCODE -eq 0) { return $true }
        if ($attempt -lt $maxAttempts) {
            Write-Warn "Attempt $attempt/$maxAttempts failed, retrying in $($delay)s..."
            Start-Sleep -Seconds $delay
            $delay = $delay * 2
        }
    }
    return $false
}

function Print-Summary {
    $duration = ((Get-Date) - $script:StartTime).TotalSeconds
    $mins = [math]::Floor($duration / 60)
    $secs = [math]::Floor($duration % 60)
    $installed = $script:Succeeded.Count
    $skippedCount = $script:Skipped.Count
    $failedCount = $script:Failed.Count
    Write-Host ""
    Write-Host "@RULE@"
    if ($failedCount -eq 0) {
        if ($skippedCount -gt 0) {
            Write-Success "Done! $installed installed, $skippedCount already installed ($($mins)m $($secs)s)"
        } else {
            Write-Success "All $script:Total packages installed! ($($mins)m $($secs)s)"
        }
    } else {
        Write-Warn "$installed installed, $skippedCount skipped, $failedCount failed ($($mins)m $($secs)s)"
        Write-Host ""
        Write-Host "Failed:" -ForegroundColor Red
        foreach ($pkg in $script:Failed) { Write-Host "  - $pkg" }
    }
    Write-Host "@RULE@"
}
"""


def powershell_utils(total: int) -> str:
    """Build the PowerShell helper functions and counters for a script.

    Args:
        total: Number of packages the script installs.

    Returns:
        PowerShell source defining message helpers, counters, progress,
        average-time tracking, retry and summary.
    """
    counters = "\n".join(
        [
            f"$script:Total = {total}",
            "$script:Current = 0",
            "$script:Failed = @()",
            "$script:Succeeded = @()",
            "$script:Skipped = @()",
            "$script:InstallTimes = @()",
            f"$script:AvgTime = {INITIAL_AVG_TIME}",
            '$script:LastOutput = ""',
            "$script:StartTime = Get-Date",
        ]
    )
    functions = (
        _POWERSHELL_FUNCTIONS.replace("@ATTEMPTS@", str(SCRIPT_RETRY_ATTEMPTS))
        .replace("@DELAY@", str(SCRIPT_RETRY_DELAY))
        .replace("@RULE@", RULE)
    )
    return section("Colors & Utilities") + "\n" + _POWERSHELL_HELPERS + "\n" + counters + "\n" + functions


def powershell_empty_script(manager_name: str) -> str:
    """Build the no-op PowerShell script used when nothing was selected."""
    return (
        f"# No packages selected for {manager_name}\n"
        'Write-Host "No packages selected" -ForegroundColor Yellow\n'
        "return\n"
    )
