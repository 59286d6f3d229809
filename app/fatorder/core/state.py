"""Run history persistence.

Every ``fatorder sort`` run, successful or not, appends one
:class:`RunRecord` line to ``~/.local/state/fatorder/history.jsonl``.
"""

import json
import logging
from pathlib import Path

from fatorder.core.paths import ensure_state_dir, get_history_path
from fatorder.models.history import RunRecord

logger = logging.getLogger(__name__)


class RunHistory:
    """Append-only JSONL log of pipeline runs.

    Args:
        state_dir: Directory holding the history file. Defaults to the
            XDG state directory.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        self._state_dir = state_dir

    @property
    def history_path(self) -> Path:
        if self._state_dir is None:
            return get_history_path()
        return self._state_dir / self.HISTORY_FILENAME

    def record(self, record: RunRecord) -> None:
        """Append a run record, creating the state directory if needed.

        Raises:
            RuntimeError: If the XDG state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir is None:
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(record.to_json_line() + "\n")
        logger.debug("Recorded run %s in %s", record.id, self.history_path)

    def get_history(self, limit: int | None = None) -> list[RunRecord]:
        """Read run records, newest first.

        Corrupt lines are skipped with a warning. A missing file means no
        runs have been recorded yet.

        Args:
            limit: Maximum number of records to return (all if None).
        """
        path = self.history_path
        if not path.exists():
            return []

        records: list[RunRecord] = []
        with path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    records.append(RunRecord.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, e)

        records.reverse()
        return records if limit is None else records[:limit]
