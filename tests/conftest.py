"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from packmate.core.config import CRON_SECRET_ENV
from packmate.models.catalog import Catalog, CatalogApp
from packmate.models.verification import VerificationResult, VerificationStatus
from packmate.store.results import ResultStore


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at a temporary home and clear the cron secret."""
    home = tmp_path / "home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / ".local" / "state"))
    monkeypatch.delenv(CRON_SECRET_ENV, raising=False)
    return home


@pytest.fixture
def sample_catalog() -> Catalog:
    """Small catalog covering every manager and the flag conventions."""
    return Catalog(
        apps=[
            CatalogApp(
                id="firefox",
                name="Firefox",
                category="Browsers",
                targets={
                    "winget": "Mozilla.Firefox",
                    "chocolatey": "firefox",
                    "homebrew": "--cask firefox",
                    "apt": "firefox",
                    "flatpak": "org.mozilla.firefox",
                    "snap": "firefox",
                },
            ),
            CatalogApp(
                id="vscode",
                name="VS Code",
                category="Development",
                targets={
                    "winget": "Microsoft.VisualStudioCode",
                    "homebrew": "--cask visual-studio-code",
                    "snap": "code --classic",
                    "flatpak": "com.visualstudio.code",
                },
            ),
            CatalogApp(
                id="git",
                name="Git",
                category="Development",
                targets={
                    "winget": "Git.Git",
                    "chocolatey": "git",
                    "scoop": "git",
                    "homebrew": "git",
                    "macports": "git",
                    "apt": "git",
                    "dnf": "git",
                    "pacman": "git",
                    "zypper": "git",
                },
            ),
            CatalogApp(
                id="vlc",
                name="VLC",
                category="Media",
                targets={
                    "dnf": "vlc",
                    "flatpak": "org.videolan.VLC",
                    "snap": "",
                },
            ),
        ]
    )


@pytest.fixture
def results_path(tmp_path: Path) -> Path:
    """Location of a fresh results file."""
    return tmp_path / "state" / "results.jsonl"


@pytest.fixture
def store(results_path: Path) -> Iterator[ResultStore]:
    """Open result store backed by a temporary file."""
    with ResultStore(results_path) as result_store:
        yield result_store


@pytest.fixture
def make_result() -> Callable[..., VerificationResult]:
    """Factory for verification results with sensible defaults."""

    def _make(
        app_id: str = "firefox",
        package_manager_id: str = "flatpak",
        status: VerificationStatus = VerificationStatus.VERIFIED,
        timestamp: str = "2026-03-01T12:00:00.000Z",
        package_name: str = "org.mozilla.firefox",
        error_message: str | None = None,
        manual_review_flag: bool | None = None,
    ) -> VerificationResult:
        return VerificationResult(
            app_id=app_id,
            package_manager_id=package_manager_id,
            package_name=package_name,
            status=status,
            timestamp=timestamp,
            error_message=error_message,
            manual_review_flag=manual_review_flag,
        )

    return _make


CLI_CATALOG = """
[[apps]]
id = "firefox"
name = "Firefox"
category = "Browsers"

[apps.targets]
winget = "Mozilla.Firefox"
homebrew = "--cask firefox"
apt = "firefox"
flatpak = "org.mozilla.firefox"
snap = "firefox"

[[apps]]
id = "git"
name = "Git"
category = "Development"

[apps.targets]
winget = "Git.Git"
homebrew = "git"
apt = "git"
pacman = "git"

[[apps]]
id = "vlc"
name = "VLC"
category = "Media"

[apps.targets]
flatpak = "org.videolan.VLC"
snap = "vlc"
"""


@pytest.fixture
def cli_config(tmp_path: Path) -> Path:
    """Config file pointing the CLI at a small catalog and a temporary store."""
    catalog_path = tmp_path / "catalog.toml"
    catalog_path.write_text(CLI_CATALOG, encoding="utf-8")
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f'catalog_path = "{catalog_path}"\n'
        f'results_path = "{tmp_path / "state" / "results.jsonl"}"\n'
        "request_delay = 0.0\n",
        encoding="utf-8",
    )
    return config_path
