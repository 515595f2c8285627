from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.change_record import ChangeRecord

"""Change audit log writer.

Each run gets one ``logs/changes-YYYYMMDD-HHMMSS.log`` (UTC) holding one
ChangeRecord per line with the fixed key set of
``contracts/change_record_schema.json``. The file is only created when there
is something to write.
"""

__all__ = [
    "AuditLogBuffer",
    "LOGS_DIR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


def _audit_file_name(now: datetime | None = None) -> str:
    stamp = (now or datetime.now(UTC)).strftime(TIMESTAMP_FMT)
    return f"changes-{stamp}.log"


class AuditLogBuffer:
    """Collects change records and appends them as JSON Lines on flush().

    Not thread safe; the CLI writes from a single thread.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self.logs_dir = logs_dir or LOGS_DIR
        self.path: Path | None = None  # fixed by the first non-empty flush
        self._pending: list[ChangeRecord] = []

    @classmethod
    def from_changes(cls, changes: Iterable[ChangeRecord], logs_dir: Path | None = None) -> AuditLogBuffer:
        buf = cls(logs_dir)
        buf.extend(changes)
        return buf

    def append(self, record: ChangeRecord) -> None:
        self._pending.append(record)

    def extend(self, records: Iterable[ChangeRecord]) -> None:
        self._pending.extend(records)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Append pending records to this run's file.

        Returns the file path, or None when nothing was pending (no file is
        created then). Later flushes append to the same file.
        """
        if not self._pending:
            return None
        if self.path is None:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            self.path = self.logs_dir / _audit_file_name()
        lines = "".join(r.to_json_line() + "\n" for r in self._pending)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(lines)
        self._pending.clear()
        return self.path
