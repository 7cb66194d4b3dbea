"""Unit tests for config CLI commands."""

from pathlib import Path

from packmate.cli.main import app
from packmate.core.config import PackmateConfig, load_config
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigShow:
    """Tests for packmate config show."""

    def test_defaults(self) -> None:
        """Without a config file the defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "(bundled)" in result.stdout
        assert "(not set)" in result.stdout
        assert "max_retries" in result.stdout

    def test_secret_masked(self, cli_config: Path) -> None:
        """The cron secret is never printed."""
        result = runner.invoke(
            app,
            ["--config", str(cli_config), "config", "show"],
            env={"PACKMATE_CRON_SECRET": "s3cret"},
        )

        assert result.exit_code == 0
        assert "********" in result.stdout
        assert "s3cret" not in result.stdout
        assert "PACKMATE_CRON_SECRET" in result.stdout


class TestConfigInit:
    """Tests for packmate config init."""

    def test_writes_defaults(self, tmp_path: Path) -> None:
        """Init writes a loadable default config."""
        config_path = tmp_path / "new" / "config.toml"

        result = runner.invoke(app, ["--config", str(config_path), "config", "init"])

        assert result.exit_code == 0
        assert "Config written to" in result.stdout
        assert load_config(config_path) == PackmateConfig()

    def test_default_location(self, isolated_dirs: Path) -> None:
        """Without --config the XDG location is used."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert (isolated_dirs / ".config" / "packmate" / "config.toml").exists()

    def test_refuses_overwrite(self, cli_config: Path) -> None:
        """An existing config is kept unless --force is given."""
        before = cli_config.read_text(encoding="utf-8")

        result = runner.invoke(app, ["--config", str(cli_config), "config", "init"])

        assert result.exit_code == 1
        assert "Config already exists" in result.output
        assert cli_config.read_text(encoding="utf-8") == before

    def test_force_overwrites(self, cli_config: Path) -> None:
        """--force replaces an existing config."""
        result = runner.invoke(app, ["--config", str(cli_config), "config", "init", "--force"])

        assert result.exit_code == 0
        assert load_config(cli_config) == PackmateConfig()
