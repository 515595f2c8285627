from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence

from ..csvio.codec import ParseError, check_unique_columns, parse_csv, serialize_csv
from ..models.change_record import ChangeRecord
from ..models.remote_source import RemoteSheetSource
from ..models.row_view import RowView
from .change_log import ChangeLog

"""Tabular Store: the in-memory Document.

A Document is an ordered list of rows (column name -> string value), the
ordered column names, a display name, the set of dirty row positions and the
Change Log. Row identity is the zero-based position, which never changes
while a Document is loaded: there is no row insertion or deletion, only cell
mutation.

Loading is all-or-nothing. The new table is fully built before any field of
the store is replaced, so a ParseError leaves the previous Document intact.
"""

__all__ = [
    "TabularStore",
]

logger = logging.getLogger(__name__)


class TabularStore:
    def __init__(self) -> None:
        self._rows: list[dict[str, str]] = []
        self._columns: list[str] = []
        self._source_name: str = ""
        self._dirty_rows: set[int] = set()
        self._change_log = ChangeLog()
        self._remote: RemoteSheetSource | None = None

    # --- loading -------------------------------------------------------

    def load(self, content: str, source_name: str, remote: RemoteSheetSource | None = None) -> None:
        """Parse CSV ``content`` and replace the whole Document with it.

        Raises:
            ParseError: If the text is malformed or has no header row.
        """
        table = parse_csv(content)
        self.load_table(table.columns, table.rows, source_name, remote=remote)

    def load_table(
        self,
        columns: Sequence[str],
        rows: Iterable[Mapping[str, object]],
        source_name: str,
        remote: RemoteSheetSource | None = None,
    ) -> None:
        """Adopt already-parsed columns and rows verbatim.

        Every row is normalised so that its keys equal ``columns``: missing
        cells become "" and values are stored as strings.

        Raises:
            ParseError: If ``columns`` is empty or repeats a name.
        """
        new_columns = [str(c) for c in columns]
        if not new_columns:
            raise ParseError("no columns found")
        check_unique_columns(new_columns)
        new_rows = [
            {col: "" if row.get(col) is None else str(row.get(col)) for col in new_columns}
            for row in rows
        ]

        self._rows = new_rows
        self._columns = new_columns
        self._source_name = source_name
        self._dirty_rows = set()
        self._change_log.clear()
        self._remote = remote
        logger.info(
            f"loaded document name={source_name!r} rows={len(new_rows)} columns={len(new_columns)}"
        )

    # --- reads ---------------------------------------------------------

    def _in_range(self, position: int) -> bool:
        return 0 <= position < len(self._rows)

    def get_row(self, position: int) -> dict[str, str] | None:
        """Return a copy of the row at ``position`` or None when out of range."""
        if not self._in_range(position):
            return None
        return dict(self._rows[position])

    def get_rows(self, start: int, count: int) -> list[RowView]:
        """Return up to ``count`` rows from ``start``, clamped to the Document."""
        if count <= 0:
            return []
        start = max(start, 0)
        return [
            RowView(index=start + i, data=dict(row))
            for i, row in enumerate(self._rows[start:start + count])
        ]

    def iter_rows(self) -> Iterator[tuple[int, Mapping[str, str]]]:
        """Yield ``(position, row)`` pairs. Rows must be treated as read-only."""
        return enumerate(self._rows)

    # --- writes --------------------------------------------------------

    def update_cell(self, position: int, column: str, value: str) -> bool:
        """Write one cell.

        Returns False (and changes nothing) when the row or column does not
        exist. Writing the value already stored is a successful no-op that
        neither dirties the row nor touches the Change Log.
        """
        if not self._in_range(position) or column not in self._columns:
            return False
        row = self._rows[position]
        previous = row.get(column, "")
        if previous == value:
            return True
        row[column] = value
        self._dirty_rows.add(position)
        self._change_log.record(position, column, previous, value)
        logger.debug(f"cell updated row={position} column={column!r}")
        return True

    def mark_clean(self) -> None:
        """Forget which rows are dirty. The Change Log is kept."""
        self._dirty_rows.clear()

    def export_document(self) -> str:
        return serialize_csv(self._columns, self._rows)

    # --- derived properties ---------------------------------------------

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def column_names(self) -> list[str]:
        return list(self._columns)

    @property
    def source_name(self) -> str:
        return self._source_name

    @property
    def dirty_count(self) -> int:
        return len(self._dirty_rows)

    @property
    def is_dirty(self) -> bool:
        return self.dirty_count > 0

    @property
    def remote_source(self) -> RemoteSheetSource | None:
        return self._remote

    @property
    def changes(self) -> list[ChangeRecord]:
        return self._change_log.all()

    def changes_for_row(self, position: int) -> list[ChangeRecord]:
        return self._change_log.for_row(position)
