"""Cleanup: remove the staging directory after a successful restore."""

import logging
import shutil
from pathlib import Path

from fatorder.core.errors import CleanupWarning

logger = logging.getLogger(__name__)


class Cleanup:
    """Deletes the staging directory of a finished run."""

    def run(self, staging: Path) -> None:
        """Delete ``staging`` and everything below it.

        Args:
            staging: Staging directory to remove.

        Raises:
            CleanupWarning: If the directory cannot be removed. The data is
                already restored at this point, so callers treat this as
                non-fatal.
        """
        if not staging.exists():
            return
        try:
            shutil.rmtree(staging)
        except OSError as e:
            raise CleanupWarning(
                f"Could not remove staging directory {staging}: {e}. Remove it manually."
            ) from e
        logger.info("Removed staging directory %s", staging)
