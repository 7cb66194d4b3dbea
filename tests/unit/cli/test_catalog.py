"""Unit tests for the catalog browsing commands."""

from pathlib import Path

from packmate.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestManagersCommand:
    """Tests for packmate managers."""

    def test_lists_all(self) -> None:
        """All eleven managers are listed."""
        result = runner.invoke(app, ["managers"])

        assert result.exit_code == 0
        for manager_id in ("winget", "scoop", "macports", "zypper", "snap"):
            assert manager_id in result.stdout

    def test_os_filter(self) -> None:
        """--os restricts the table to one operating system."""
        result = runner.invoke(app, ["managers", "--os", "windows"])

        assert result.exit_code == 0
        assert "chocolatey" in result.stdout
        assert "pacman" not in result.stdout


class TestAppsCommand:
    """Tests for packmate apps."""

    def test_lists_catalog(self, cli_config: Path) -> None:
        """Every catalog application is listed."""
        result = runner.invoke(app, ["--config", str(cli_config), "apps"])

        assert result.exit_code == 0
        assert "firefox" in result.stdout
        assert "vlc" in result.stdout
        assert "3 application(s)" in result.stdout

    def test_manager_filter(self, cli_config: Path) -> None:
        """--manager shows only apps offered on that manager."""
        result = runner.invoke(app, ["--config", str(cli_config), "apps", "-m", "pacman"])

        assert result.exit_code == 0
        assert "git" in result.stdout
        assert "firefox" not in result.stdout
        assert "1 application(s)" in result.stdout

    def test_nothing_offered(self, cli_config: Path) -> None:
        """A manager without apps prints a notice."""
        result = runner.invoke(app, ["--config", str(cli_config), "apps", "-m", "zypper"])

        assert result.exit_code == 0
        assert "No applications found." in result.stdout

    def test_bundled_catalog(self) -> None:
        """Without a config the bundled catalog is used."""
        result = runner.invoke(app, ["apps"])

        assert result.exit_code == 0
        assert "firefox" in result.stdout

    def test_missing_catalog(self, tmp_path: Path) -> None:
        """A configured catalog that does not exist is an error."""
        config_path = tmp_path / "config.toml"
        config_path.write_text(f'catalog_path = "{tmp_path / "nope.toml"}"\n', encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config_path), "apps"])

        assert result.exit_code == 1
        assert "Catalog not found" in result.output
