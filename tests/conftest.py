"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
import os
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

TreeSpec = dict[str, str | None]


def build_tree(root: Path, spec: TreeSpec) -> Path:
    """Create files and directories below root.

    Keys are ``/``-separated relative paths; a None value creates a
    directory, a string value creates a file with that content.
    """
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in spec.items():
        path = root / relative
        if content is None:
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
    return root


@pytest.fixture
def make_tree() -> Callable[[Path, TreeSpec], Path]:
    """Factory creating a directory tree from a {relative path: content} mapping."""
    return build_tree


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Target with folders Z/ and A/ (one x.txt each) and root files b.txt, a.txt."""
    return build_tree(
        tmp_path / "target",
        {
            "b.txt": "bee",
            "Z/x.txt": "zed",
            "a.txt": "ay",
            "A/x.txt": "big ay",
        },
    )


@pytest.fixture
def xdg_dirs(tmp_path: Path) -> Iterator[Path]:
    """Point all XDG base directories into tmp_path."""
    base = tmp_path / "xdg"
    env = {
        "XDG_CONFIG_HOME": str(base / "config"),
        "XDG_STATE_HOME": str(base / "state"),
        "XDG_CACHE_HOME": str(base / "cache"),
    }
    with patch.dict(os.environ, env):
        yield base


@pytest.fixture
def findmnt_usb_output() -> str:
    """findmnt -J output for a USB stick mounted under /media."""
    return json.dumps(
        {
            "filesystems": [
                {"source": "/dev/sdb1", "target": "/media/usb", "fstype": "vfat"},
            ]
        }
    )


@pytest.fixture
def lsblk_usb_output() -> str:
    """lsblk -J output for a removable FAT32 partition."""
    return json.dumps(
        {
            "blockdevices": [
                {
                    "name": "sdb1",
                    "type": "part",
                    "rm": True,
                    "hotplug": True,
                    "fstype": "vfat",
                    "fsver": "FAT32",
                },
            ]
        }
    )


@pytest.fixture
def findmnt_fixed_output() -> str:
    """findmnt -J output for an internal data partition."""
    return json.dumps(
        {
            "filesystems": [
                {"source": "/dev/nvme0n1p3", "target": "/data", "fstype": "ext4"},
            ]
        }
    )


@pytest.fixture
def lsblk_fixed_output() -> str:
    """lsblk -J output (old string flags) for an internal ext4 partition."""
    return json.dumps(
        {
            "blockdevices": [
                {
                    "name": "nvme0n1p3",
                    "type": "part",
                    "rm": "0",
                    "hotplug": "0",
                    "fstype": "ext4",
                    "fsver": "1.0",
                },
            ]
        }
    )
