"""Unit tests for the status command."""

import json
from collections.abc import Callable
from pathlib import Path

from packmate.cli.main import app
from packmate.models.verification import VerificationResult, VerificationStatus
from packmate.store.results import ResultStore
from typer.testing import CliRunner

runner = CliRunner()

MakeResult = Callable[..., VerificationResult]


class TestStatusCommand:
    """Tests for packmate status."""

    def test_no_results(self, cli_config: Path) -> None:
        """An empty store prints a notice."""
        result = runner.invoke(app, ["--config", str(cli_config), "status"])

        assert result.exit_code == 0
        assert "No verification results found." in result.stdout

    def test_lists_current_results(
        self, cli_config: Path, store: ResultStore, make_result: MakeResult
    ) -> None:
        """The current result of each pair is shown."""
        store.append(make_result(timestamp="2026-03-01T09:00:00.000Z"))
        store.append(make_result(status=VerificationStatus.FAILED, error_message="gone"))
        store.append(make_result(app_id="git", package_manager_id="apt", package_name="git"))

        result = runner.invoke(app, ["--config", str(cli_config), "status", "--json"])

        assert result.exit_code == 0
        documents = json.loads(result.stdout)
        assert [(d["appId"], d["status"]) for d in documents] == [
            ("firefox", "failed"),
            ("git", "verified"),
        ]

    def test_filter_by_manager(
        self, cli_config: Path, store: ResultStore, make_result: MakeResult
    ) -> None:
        """--manager restricts the listing."""
        store.append(make_result())
        store.append(make_result(app_id="git", package_manager_id="apt", package_name="git"))

        result = runner.invoke(app, ["--config", str(cli_config), "status", "-m", "apt"])

        assert result.exit_code == 0
        assert "git" in result.stdout
        assert "firefox" not in result.stdout

    def test_single_pair_pending(self, cli_config: Path) -> None:
        """A never-verified pair is shown as pending."""
        result = runner.invoke(
            app, ["--config", str(cli_config), "status", "--app", "git", "--manager", "apt"]
        )

        assert result.exit_code == 0
        assert "git on apt: pending" in result.stdout

    def test_single_pair_json(
        self, cli_config: Path, store: ResultStore, make_result: MakeResult
    ) -> None:
        """A single pair is printed as one JSON document."""
        store.append(make_result())

        result = runner.invoke(
            app,
            ["--config", str(cli_config), "status", "-a", "firefox", "-m", "flatpak", "--json"],
        )

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document["status"] == "verified"
        assert document["packageName"] == "org.mozilla.firefox"
