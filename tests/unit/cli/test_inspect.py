"""Unit tests for the inspect command."""

import json
from pathlib import Path
from unittest.mock import patch

from fatorder.cli.main import app
from fatorder.core.errors import PathNotFoundError
from fatorder.models.volume import DriveClass, Volume
from typer.testing import CliRunner

runner = CliRunner()


def _volume(tmp_path: Path, **kwargs: object) -> Volume:
    defaults: dict[str, object] = {
        "path": str(tmp_path),
        "filesystem_type": "FAT32",
        "drive_class": DriveClass.REMOVABLE,
        "mount_point": "/media/usb",
        "device": "/dev/sdb1",
    }
    defaults.update(kwargs)
    return Volume(**defaults)  # type: ignore[arg-type]


class TestInspectCommand:
    """Tests for fatorder inspect."""

    def test_table_output(self, tmp_path: Path) -> None:
        """The volume is shown with its risk tier."""
        with patch("fatorder.cli.commands.inspect.VolumeInspector") as mock_inspector:
            mock_inspector.return_value.is_available.return_value = True
            mock_inspector.return_value.inspect.return_value = _volume(tmp_path)

            result = runner.invoke(app, ["inspect", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "FAT32" in result.stdout
        assert "removable" in result.stdout
        assert "safe_removable" in result.stdout

    def test_json_output(self, tmp_path: Path) -> None:
        """--json emits parseable JSON."""
        volume = _volume(tmp_path, drive_class=DriveClass.FIXED, is_system_like=True)
        with patch("fatorder.cli.commands.inspect.VolumeInspector") as mock_inspector:
            mock_inspector.return_value.is_available.return_value = True
            mock_inspector.return_value.inspect.return_value = volume

            result = runner.invoke(app, ["inspect", str(tmp_path), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["drive_class"] == "fixed"
        assert data["is_system_like"] is True
        assert data["risk_tier"] == "system_like"

    def test_missing_path(self, tmp_path: Path) -> None:
        """A missing path exits with code 1."""
        with patch("fatorder.cli.commands.inspect.VolumeInspector") as mock_inspector:
            mock_inspector.return_value.is_available.return_value = True
            mock_inspector.return_value.inspect.side_effect = PathNotFoundError("not a directory")

            result = runner.invoke(app, ["inspect", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "not a directory" in result.output

    def test_tools_missing_warns(self, tmp_path: Path) -> None:
        """Missing findmnt/lsblk produces a warning."""
        with patch("fatorder.cli.commands.inspect.VolumeInspector") as mock_inspector:
            mock_inspector.return_value.is_available.return_value = False
            mock_inspector.return_value.inspect.return_value = _volume(
                tmp_path, drive_class=DriveClass.UNKNOWN
            )

            result = runner.invoke(app, ["inspect", str(tmp_path)])

        assert result.exit_code == 0
        assert "findmnt or lsblk not found" in result.output
