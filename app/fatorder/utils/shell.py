"""Subprocess helpers for the system tools fatorder queries.

Only read-only tools (findmnt, lsblk) are run; nothing on a volume is
ever changed through a subprocess.
"""

import json
import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# findmnt/lsblk answer instantly; anything slower is a hung mount
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured output of a finished tool invocation.

    Attributes:
        stdout: Standard output.
        stderr: Standard error.
        returncode: Exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def json(self) -> dict[str, Any]:
        """Parse stdout as a JSON object (``findmnt -J`` / ``lsblk -J``).

        Raises:
            ValueError: If stdout is not a JSON object.
        """
        data = json.loads(self.stdout)
        if not isinstance(data, dict):
            msg = f"Expected a JSON object, got {type(data).__name__}"
            raise ValueError(msg)
        return data


def run_command(args: list[str], *, timeout: float | None = DEFAULT_TIMEOUT) -> CommandResult:
    """Run a tool without a shell and capture its output.

    A non-zero exit status is returned, not raised.

    Raises:
        FileNotFoundError: If the executable is not installed.
        subprocess.TimeoutExpired: If the tool does not finish in time.
    """
    logger.debug("Running %s", " ".join(args))
    completed = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
    )
    if completed.returncode != 0:
        logger.debug("%s exited with status %s", args[0], completed.returncode)
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH."""
    return shutil.which(name) is not None
