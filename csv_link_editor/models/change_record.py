from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from datetime import UTC, datetime

"""ChangeRecord model for the cell edit audit trail.

A ChangeRecord captures one edited (row, column) cell: the value it held
before its first edit since the last load, and the value it holds now.
The JSON form has a fixed key set so audit files can be validated against
``contracts/change_record_schema.json``.
"""

__all__ = [
    "ChangeRecord",
    "utc_timestamp",
]


def utc_timestamp() -> str:
    """Current time as ISO8601 UTC with a 'Z' suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ChangeRecord:
    """Audit entry for one edited cell.

    Attributes:
        row: Zero-based row position in the Document
        column: Column name
        original: Value before the first edit since load (never rewritten)
        current: Value after the latest edit
        timestamp: ISO8601 UTC time of the latest edit
    """
    row: int
    column: str
    original: str
    current: str
    timestamp: str

    @staticmethod
    def create(row: int, column: str, original: str, current: str) -> ChangeRecord:
        """Create a new ChangeRecord stamped with the current UTC time."""
        return ChangeRecord(
            row=row,
            column=column,
            original=original,
            current=current,
            timestamp=utc_timestamp(),
        )

    def with_current(self, current: str) -> ChangeRecord:
        """Return a copy with a new current value and timestamp; ``original`` is kept."""
        return replace(self, current=current, timestamp=utc_timestamp())

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    def to_json_line(self) -> str:
        """Serialize to a single JSON Lines entry (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
