"""Unit tests for the main CLI application."""

import logging
from pathlib import Path

from packmate import __version__
from packmate.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options and command registration."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"packmate version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        """--help lists every command group."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for name in ("managers", "apps", "script", "command", "verify", "status", "flagged"):
            assert name in result.stdout

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        """An invalid config file is reported instead of a traceback."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("request_timeout = -1\n", encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config_path), "apps"])

        assert result.exit_code == 1
        assert "Invalid config content" in result.output


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_default_level(self) -> None:
        """Without flags only warnings and above are logged."""
        configure_logging(verbose=False, quiet=False)
        assert logging.getLogger().level == logging.WARNING

    def test_verbose(self) -> None:
        """--verbose enables debug output."""
        configure_logging(verbose=True, quiet=False)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_quiet(self) -> None:
        """--quiet limits output to errors."""
        configure_logging(verbose=False, quiet=True)
        assert logging.getLogger().level == logging.ERROR
        assert logging.getLogger("httpx").level == logging.WARNING
