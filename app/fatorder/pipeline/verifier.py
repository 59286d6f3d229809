"""Pre-wipe verification of the staged mirror.

Compares what the archiver captured from the target with what is
actually present in staging, by relative path, kind and size. A
mismatch stops the run while the target is still intact.
"""

import logging
from pathlib import Path

from fatorder.core.errors import ManifestMismatchError
from fatorder.models.tree import TreeManifest, scan_tree

logger = logging.getLogger(__name__)

# Number of differing paths quoted in the error message
_MAX_REPORTED = 5


class ManifestVerifier:
    """Checks a staging directory against a captured manifest."""

    def verify(self, expected: TreeManifest, staging: Path) -> TreeManifest:
        """Verify that ``staging`` mirrors ``expected`` exactly.

        Args:
            expected: Manifest captured from the target by the archiver.
            staging: Staging directory to check.

        Returns:
            Manifest of the staging directory.

        Raises:
            ManifestMismatchError: If entries are missing, extra or differ in size.
        """
        try:
            actual = scan_tree(staging)
        except OSError as e:
            raise ManifestMismatchError(f"Cannot enumerate staging {staging}: {e}") from e

        expected_sig = expected.signature()
        actual_sig = actual.signature()
        if expected_sig == actual_sig:
            logger.info(
                "Verified staging: %d files, %d directories, %d bytes",
                actual.file_count,
                actual.directory_count,
                actual.total_bytes,
            )
            return actual

        missing = sorted(path for path, _, _ in expected_sig - actual_sig)
        extra = sorted(path for path, _, _ in actual_sig - expected_sig)
        parts: list[str] = []
        if missing:
            parts.append(f"missing or different: {', '.join(missing[:_MAX_REPORTED])}")
        if extra:
            parts.append(f"unexpected: {', '.join(extra[:_MAX_REPORTED])}")
        raise ManifestMismatchError("Staging does not match the target (" + "; ".join(parts) + ")")
