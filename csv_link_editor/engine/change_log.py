from __future__ import annotations

from ..models.change_record import ChangeRecord

"""Change Log: one upserted audit record per edited (row, column) cell.

The log is append/update only. It is reset by a Document load and by nothing
else; pushing the changes to a remote sheet does not remove them.
"""

__all__ = [
    "ChangeLog",
]


class ChangeLog:
    """Ordered record of cell edits since the last load.

    Records keep insertion order (the time a cell was first edited). Editing
    a cell again overwrites ``current`` and the timestamp but never
    ``original``, and does not move the record.
    """

    def __init__(self) -> None:
        self._records: dict[tuple[int, str], ChangeRecord] = {}

    def record(self, position: int, column: str, previous: str, current: str) -> ChangeRecord:
        key = (position, column)
        existing = self._records.get(key)
        if existing is None:
            rec = ChangeRecord.create(position, column, original=previous, current=current)
        else:
            rec = existing.with_current(current)
        # re-assigning an existing key keeps its position in the dict
        self._records[key] = rec
        return rec

    def all(self) -> list[ChangeRecord]:
        """Snapshot of every record, oldest first."""
        return list(self._records.values())

    def for_row(self, position: int) -> list[ChangeRecord]:
        return [r for r in self._records.values() if r.row == position]

    def get(self, position: int, column: str) -> ChangeRecord | None:
        return self._records.get((position, column))

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
