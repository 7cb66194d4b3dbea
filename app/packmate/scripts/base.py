"""Abstract base classes for install script generators.

This module defines the ScriptGenerator interface that every package
manager generator implements, the quirk flags a generator can declare,
and the two drivers (bash and PowerShell) that assemble a complete script
from the shared kernel and the manager-specific snippets.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import ClassVar

from packmate.models.catalog import ResolvedPackage
from packmate.models.manager import PackageManager, PackageManagerId, get_package_manager
from packmate.scripts import kernel
from packmate.scripts.escape import escape_powershell_string, escape_shell_string

# One-liner returned when nothing was selected
NO_PACKAGES_COMMAND = "# No packages selected"


class Privilege(str, Enum):
    """Privilege convention enforced before any install attempt.

    Attributes:
        NONE: No check; the script uses sudo where needed.
        REFUSE_ROOT: Abort when run as root (user-level package managers).
        REQUIRE_ROOT: Abort unless run as root or administrator.
    """

    NONE = "none"
    REFUSE_ROOT = "refuse_root"
    REQUIRE_ROOT = "require_root"


@dataclass(frozen=True, slots=True)
class GeneratorQuirks:
    """Capability flags that vary between package managers.

    Attributes:
        privilege: Privilege convention checked during pre-flight.
        flag_marker: Token that marks a confinement or kind flag inside a
            package identifier (e.g. '--classic', '--cask'). It is split off
            before querying and reapplied only on the install call.
        parallel_threshold: Install in one parallel batch when at least
            this many packages are selected. None disables parallel mode.
        lock_path: Lock file to wait on before touching the package database.
    """

    privilege: Privilege = Privilege.NONE
    flag_marker: str | None = None
    parallel_threshold: int | None = None
    lock_path: str | None = None

    def __post_init__(self) -> None:
        """Validate quirk values after initialization."""
        if self.parallel_threshold is not None and self.parallel_threshold < 2:
            msg = f"Parallel threshold must be at least 2, got {self.parallel_threshold}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class InstallTarget:
    """A resolved package with its flag split off.

    Attributes:
        name: Display name.
        package: Package identifier without the flag marker.
        flag: The flag marker if the identifier carried it, else ''.
    """

    name: str
    package: str
    flag: str = ""


class ScriptGenerator(ABC):
    """Abstract base class for all install script generators.

    A generator turns a list of resolved packages into either a complete
    install script or a one-line install command for one package manager.
    Generators are stateless; the same input always yields the same text
    apart from the generation date in the banner.

    Example:
        >>> generator = get_generator("homebrew")
        >>> script = generator.generate(catalog.resolve(["git"], "homebrew"))
    """

    quirks: ClassVar[GeneratorQuirks] = GeneratorQuirks()

    @property
    @abstractmethod
    def manager_id(self) -> PackageManagerId:
        """Return the package manager this generator targets."""

    @property
    def manager(self) -> PackageManager:
        """Descriptor of the targeted package manager."""
        return get_package_manager(self.manager_id)

    @property
    def label(self) -> str:
        """Manager label shown in the script banner."""
        return self.manager.name

    def generate(self, packages: list[ResolvedPackage], generated: date | None = None) -> str:
        """Generate a complete install script.

        Args:
            packages: Resolved packages to install, in install order.
            generated: Date shown in the banner. Defaults to today.

        Returns:
            Script text. With no packages, a script that only prints a
            warning and exits successfully.
        """
        if not packages:
            return self.empty_script()
        return self.build_script(packages, generated or date.today())

    def generate_command(self, packages: list[ResolvedPackage]) -> str:
        """Generate a one-line install command.

        Args:
            packages: Resolved packages to install.

        Returns:
            Shell command text, or a comment line when nothing was selected.
        """
        if not packages:
            return NO_PACKAGES_COMMAND
        return self.build_command(packages)

    def build_command(self, packages: list[ResolvedPackage]) -> str:
        """Build the one-liner for a non-empty selection."""
        return f"{self.manager.install_prefix} {' '.join(p.package for p in packages)}"

    def split_flag(self, package: str) -> tuple[str, str]:
        """Split the flag marker off a package identifier.

        Args:
            package: Identifier as stored in the catalog.

        Returns:
            Tuple of (identifier without the marker, marker or '').
        """
        marker = self.quirks.flag_marker
        tokens = package.split()
        if marker is None or marker not in tokens:
            return package, ""
        return " ".join(t for t in tokens if t != marker), marker

    def targets(self, packages: list[ResolvedPackage]) -> list[InstallTarget]:
        """Split every selected package into an InstallTarget."""
        result: list[InstallTarget] = []
        for pkg in packages:
            package, flag = self.split_flag(pkg.package)
            result.append(InstallTarget(name=pkg.name, package=package, flag=flag))
        return result

    @abstractmethod
    def build_script(self, packages: list[ResolvedPackage], generated: date) -> str:
        """Build the script for a non-empty selection."""

    @abstractmethod
    def empty_script(self) -> str:
        """Return the no-op script for an empty selection."""


class PosixScriptGenerator(ScriptGenerator):
    """Driver assembling bash install scripts.

    Subclasses describe the manager through class attributes and snippet
    methods; the driver takes care of ordering: banner, kernel, installed
    check, install function, pre-flight, lock wait, bootstrap, install
    calls and summary.

    Attributes:
        executable: Command that must be on PATH for the script to run.
        missing_message: Error printed when the executable is missing.
        install_hint: Follow-up info line telling the user how to get it.
        failure_hints: (grep pattern, hint) pairs printed under a failure.
    """

    executable: ClassVar[str]
    missing_message: ClassVar[str]
    install_hint: ClassVar[str | None] = None
    failure_hints: ClassVar[tuple[tuple[str, str], ...]] = ()

    @abstractmethod
    def is_installed_body(self) -> str:
        """Bash body of is_installed(); $1 is the package, $2 the flag."""

    @abstractmethod
    def install_command(self) -> str:
        """Bash install command using "$pkg" and $flags."""

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        """Bash run once before installing; failures only warn."""
        return ""

    def pre_install(self) -> str:
        """Bash inserted at the top of install_pkg after the counter update."""
        return ""

    def footer(self) -> str:
        """Bash appended after the summary."""
        return ""

    def lock_condition(self) -> str:
        """Bash condition that holds while the package database is locked."""
        return f"[ -f {self.quirks.lock_path} ]"

    def empty_script(self) -> str:
        return kernel.posix_empty_script(self.label)

    def is_parallel(self, count: int) -> bool:
        """Check whether a selection of this size installs in parallel."""
        threshold = self.quirks.parallel_threshold
        return threshold is not None and count >= threshold

    def build_script(self, packages: list[ResolvedPackage], generated: date) -> str:
        targets = self.targets(packages)
        parallel = self.is_parallel(len(targets))
        parts = [
            kernel.posix_header(self.label, len(targets), generated),
            kernel.posix_utils(len(targets)),
            self._functions(),
        ]
        if parallel:
            parts.append(self._parallel_function())
        parts.append(self._preflight(targets))
        parts.append(kernel.section("Installation"))
        parts.append('echo\ninfo "Installing $TOTAL packages"\necho\n')
        parts.append(self._install_calls(targets, parallel))
        parts.append("print_summary\n")
        footer = self.footer()
        if footer:
            parts.append(footer)
        return "\n".join(parts)

    def _functions(self) -> str:
        hints = "".join(
            f'        {"if" if i == 0 else "elif"} echo "$output" | grep -q "{pattern}"; then\n'
            f'            echo -e "    ${{DIM}}{hint}${{NC}}"\n'
            for i, (pattern, hint) in enumerate(self.failure_hints)
        )
        if hints:
            hints += "        fi\n"
        pre_install = self.pre_install()
        pre = _indent(pre_install) + "\n" if pre_install else ""
        return (
            "is_installed() {\n"
            f"{_indent(self.is_installed_body())}"
            "}\n"
            "\n"
            "install_pkg() {\n"
            '    local name=$1 pkg=$2 flags=${3:-}\n'
            "    CURRENT=$((CURRENT + 1))\n"
            "\n"
            f"{pre}"
            '    if is_installed "$pkg" "$flags"; then\n'
            '        skip "$name"\n'
            '        SKIPPED+=("$name")\n'
            "        return 0\n"
            "    fi\n"
            "\n"
            '    show_progress "$CURRENT" "$TOTAL" "$name"\n'
            "    local start\n"
            "    start=$(date +%s)\n"
            "\n"
            "    local output\n"
            f"    if output=$(with_retry {self.install_command()} 2>&1); then\n"
            "        local elapsed=$(($(date +%s) - start))\n"
            '        update_avg_time "$elapsed"\n'
            '        printf "\\r\\033[K"\n'
            '        timing "$name" "$elapsed"\n'
            '        SUCCEEDED+=("$name")\n'
            "    else\n"
            '        printf "\\r\\033[K${RED}✗${NC} %s\\n" "$name"\n'
            f"{hints}"
            '        FAILED+=("$name")\n'
            "    fi\n"
            "}\n"
        )

    def _parallel_function(self) -> str:
        return (
            "install_parallel() {\n"
            "    local pids=()\n"
            "    local names=()\n"
            "    local start pair name pkg flags=''\n"
            "    start=$(date +%s)\n"
            "\n"
            '    for pair in "$@"; do\n'
            '        name="${pair%|*}"\n'
            '        pkg="${pair##*|}"\n'
            "        CURRENT=$((CURRENT + 1))\n"
            "\n"
            '        if is_installed "$pkg" "$flags"; then\n'
            '            skip "$name"\n'
            '            SKIPPED+=("$name")\n'
            "            continue\n"
            "        fi\n"
            "\n"
            f"        (with_retry {self.install_command()} >/dev/null 2>&1) &\n"
            "        pids+=($!)\n"
            '        names+=("$name")\n'
            "    done\n"
            "\n"
            "    if [ ${#pids[@]} -eq 0 ]; then\n"
            "        return 0\n"
            "    fi\n"
            "\n"
            '    info "Installing ${#pids[@]} apps in parallel..."\n'
            "\n"
            "    local i status\n"
            '    for i in "${!pids[@]}"; do\n'
            '        if wait "${pids[$i]}"; then\n'
            '            SUCCEEDED+=("${names[$i]}")\n'
            '            success "${names[$i]}"\n'
            "        else\n"
            '            FAILED+=("${names[$i]}")\n'
            '            error "${names[$i]} failed"\n'
            "        fi\n"
            "    done\n"
            "\n"
            "    local elapsed=$(($(date +%s) - start))\n"
            '    echo -e "${DIM}Parallel install took ${elapsed}s${NC}"\n'
            "}\n"
        )

    def _preflight(self, targets: list[InstallTarget]) -> str:
        lines = [kernel.section("Pre-flight")]
        if self.quirks.privilege == Privilege.REFUSE_ROOT:
            lines.append(
                '[ "$EUID" -eq 0 ] && { error "Run as regular user, not root."; exit 1; }\n'
            )
        elif self.quirks.privilege == Privilege.REQUIRE_ROOT:
            lines.append(
                '[ "$EUID" -ne 0 ] && { error "This script must be run as root (use sudo)."; exit 1; }\n'
            )
        hint = f'    info "{self.install_hint}"\n' if self.install_hint else ""
        lines.append(
            f"command -v {self.executable} &>/dev/null || {{\n"
            f'    error "{self.missing_message}"\n'
            f"{hint}"
            "    exit 1\n"
            "}\n"
        )
        if self.quirks.lock_path:
            lines.append(
                f"while {self.lock_condition()}; do\n"
                f'    warn "Waiting for {self.manager.name} lock..."\n'
                "    sleep 2\n"
                "done\n"
            )
        bootstrap = self.bootstrap(targets)
        if bootstrap:
            lines.append(bootstrap)
        return "\n".join(lines)

    def _install_calls(self, targets: list[InstallTarget], parallel: bool) -> str:
        if parallel:
            pairs = " ".join(
                f'"{escape_shell_string(t.name)}|{escape_shell_string(t.package)}"'
                for t in targets
            )
            return f"install_parallel {pairs}\n"
        return "".join(
            f'install_pkg "{escape_shell_string(t.name)}" '
            f'"{escape_shell_string(t.package)}" "{t.flag}"\n'
            for t in targets
        )


class PowerShellScriptGenerator(ScriptGenerator):
    """Driver assembling PowerShell install scripts.

    Attributes:
        executable: Command that must be resolvable via Get-Command.
        function_stem: Noun used in Test-<stem>Installed and
            Install-<stem>Package.
        install_url: Where to get the package manager.
    """

    executable: ClassVar[str]
    function_stem: ClassVar[str]
    install_url: ClassVar[str]

    @abstractmethod
    def is_installed_body(self) -> str:
        """PowerShell body of the installed check; $PackageId is the package."""

    @abstractmethod
    def install_command(self) -> str:
        """PowerShell install command using $PackageId."""

    def bootstrap(self, targets: list[InstallTarget]) -> str:
        """PowerShell run once before installing; failures only warn."""
        return ""

    def empty_script(self) -> str:
        return kernel.powershell_empty_script(self.label)

    def build_script(self, packages: list[ResolvedPackage], generated: date) -> str:
        targets = self.targets(packages)
        stem = self.function_stem
        parts = [
            kernel.powershell_header(
                self.label,
                len(targets),
                generated,
                require_admin=self.quirks.privilege == Privilege.REQUIRE_ROOT,
            ),
            kernel.powershell_utils(len(targets)),
            f"function Test-{stem}Installed {{\n"
            "    param([string]$PackageId)\n"
            "    try {\n"
            f"{_indent(self.is_installed_body(), 8)}"
            "    } catch { return $false }\n"
            "}\n",
            f"function Install-{stem}Package {{\n"
            "    param([string]$Name, [string]$PackageId)\n"
            "    $script:Current++\n"
            f"    if (Test-{stem}Installed -PackageId $PackageId) {{\n"
            "        Write-Skip $Name\n"
            "        $script:Skipped += $Name\n"
            "        return\n"
            "    }\n"
            "    Show-Progress -Current $script:Current -Total $script:Total -Name $Name\n"
            "    $startTime = Get-Date\n"
            f"    if (Invoke-WithRetry {{ {self.install_command()} }}) {{\n"
            "        $elapsed = [math]::Floor(((Get-Date) - $startTime).TotalSeconds)\n"
            "        Update-AvgTime -Seconds $elapsed\n"
            "        Write-Timing -Message $Name -Seconds $elapsed\n"
            "        $script:Succeeded += $Name\n"
            "    } else {\n"
            "        Write-Err $Name\n"
            "        $script:Failed += $Name\n"
            "    }\n"
            "}\n",
            kernel.section("Pre-flight"),
            f"if (-not (Get-Command {self.executable} -ErrorAction SilentlyContinue)) {{\n"
            f'    Write-Err "{self.manager.name} not found."\n'
            f'    Write-Info "Install from: {self.install_url}"\n'
            "    exit 1\n"
            "}\n"
            f'Write-Info "{self.manager.name} found"\n',
        ]
        bootstrap = self.bootstrap(targets)
        if bootstrap:
            parts.append(bootstrap)
        parts.append(kernel.section("Installation"))
        parts.append('Write-Host ""\nWrite-Info "Installing $script:Total packages"\nWrite-Host ""\n')
        parts.append(
            "".join(
                f"Install-{stem}Package -Name '{escape_powershell_string(t.name)}' "
                f"-PackageId '{escape_powershell_string(t.package)}'\n"
                for t in targets
            )
        )
        parts.append("Print-Summary\n")
        return "\n".join(parts)


def _indent(text: str, spaces: int = 4) -> str:
    """Indent every non-empty line of a snippet, keeping a trailing newline."""
    pad = " " * spaces
    lines = [pad + line if line else line for line in text.rstrip("\n").splitlines()]
    return "\n".join(lines) + "\n"
