"""Unit tests for the config commands."""

from pathlib import Path
from unittest.mock import patch

from fatorder.cli.main import app
from fatorder.core.settings import ConfigParseError, load_settings
from fatorder.models.volume import SortScope
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigPath:
    """Tests for fatorder config path."""

    def test_prints_settings_path(self, xdg_dirs: Path) -> None:
        """The settings path is printed verbatim."""
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(xdg_dirs / "config" / "fatorder" / "config.toml")


class TestConfigInit:
    """Tests for fatorder config init."""

    def test_creates_defaults(self, xdg_dirs: Path) -> None:
        """init writes a loadable settings file."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0, result.output
        settings = load_settings(xdg_dirs / "config" / "fatorder" / "config.toml")
        assert settings.scope == SortScope.ALL

    def test_refuses_overwrite(self, xdg_dirs: Path) -> None:
        """A second init without --force fails."""
        runner.invoke(app, ["config", "init"])

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.stdout

    def test_force_overwrites(self, xdg_dirs: Path) -> None:
        """--force replaces an existing file."""
        path = xdg_dirs / "config" / "fatorder" / "config.toml"
        path.parent.mkdir(parents=True)
        path.write_text('scope = "top-level"\n')

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert load_settings(path).scope == SortScope.ALL


class TestConfigShow:
    """Tests for fatorder config show."""

    def test_shows_defaults(self, xdg_dirs: Path) -> None:
        """Without a file the defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert 'scope = "all"' in result.stdout
        assert "verify_before_wipe = true" in result.stdout

    def test_shows_file_values(self, xdg_dirs: Path) -> None:
        """Values from the file are shown."""
        path = xdg_dirs / "config" / "fatorder" / "config.toml"
        path.parent.mkdir(parents=True)
        path.write_text('scope = "top-level"\n')

        result = runner.invoke(app, ["config", "show"])

        assert 'scope = "top-level"' in result.stdout

    def test_parse_error(self, xdg_dirs: Path) -> None:
        """A broken file exits with code 1."""
        with patch(
            "fatorder.cli.commands.config.load_settings_or_default",
            side_effect=ConfigParseError("Invalid TOML syntax"),
        ):
            result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid TOML syntax" in result.output
