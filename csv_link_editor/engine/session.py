from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..links.parser import extract_links, replace_link_at
from ..models.change_record import ChangeRecord
from ..models.link_match import LinkMatch
from ..models.remote_source import RemoteSheetSource
from ..models.row_view import RowView
from ..sync.addressing import build_cell_updates
from ..sync.sheets_client import SheetsClient
from .errors import NotFoundError, ValidationError
from .link_index import LinkIndex
from .store import TabularStore

"""Editor session: one owned Document plus its Link Index.

An EditorSession is the unit of ownership for a loaded Document. It replaces
process-wide document/index globals: each REST app (or CLI run) holds its own
session, and every operation runs under the session lock so an edit and the
index rebuild it triggers are applied as one step.

Operations map one-to-one onto the REST endpoints in ``csv_link_editor.api``.
Failures are raised as NotFoundError / ValidationError / ParseError /
SyncError and leave the Document unchanged.
"""

__all__ = [
    "DocumentMetadata",
    "EditorSession",
    "LoadSummary",
    "UpdateResult",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadSummary:
    columns: list[str]
    row_count: int
    source_name: str
    remote: RemoteSheetSource | None = None


@dataclass(frozen=True)
class UpdateResult:
    is_dirty: bool
    dirty_count: int
    index_rebuilt: bool = False


@dataclass(frozen=True)
class DocumentMetadata:
    row_count: int
    columns: list[str]
    link_row_count: int
    is_dirty: bool
    dirty_count: int
    source_name: str
    link_columns: list[str]
    remote: RemoteSheetSource | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "totalRows": self.row_count,
            "columns": list(self.columns),
            "totalLinksRows": self.link_row_count,
            "isDirty": self.is_dirty,
            "dirtyCount": self.dirty_count,
            "fileName": self.source_name,
            "linkColumns": list(self.link_columns),
            "googleSpreadsheetId": self.remote.spreadsheet_id if self.remote else None,
            "googleSheetGid": self.remote.gid if self.remote else None,
            "googleSheetName": self.remote.sheet_name if self.remote else None,
        }


class EditorSession:
    def __init__(self, store: TabularStore | None = None, *, header_rows: int = 1) -> None:
        self.store = store or TabularStore()
        self.header_rows = header_rows
        self._link_index = LinkIndex.empty()
        self._lock = threading.RLock()

    # --- load ----------------------------------------------------------

    def load_document(
        self, content: str, source_name: str, remote: RemoteSheetSource | None = None
    ) -> LoadSummary:
        """Load CSV text. Link columns are cleared until designated again."""
        with self._lock:
            self.store.load(content, source_name, remote=remote)
            self._link_index = LinkIndex.empty()
            return self._load_summary()

    def load_remote_sheet(
        self, client: SheetsClient, spreadsheet_id: str, gid: str | None = None
    ) -> LoadSummary:
        """Fetch a Google sheet tab and load it as the Document."""
        if not spreadsheet_id:
            raise ValidationError("spreadsheetId is required")
        # network calls happen outside the lock; only the swap is serialised
        sheet_name = client.get_sheet_name(spreadsheet_id, gid)
        values = client.get_values(spreadsheet_id, sheet_name)
        rows = [
            {h: (row[i] if i < len(row) else "") for i, h in enumerate(values.headers)}
            for row in values.rows
        ]
        remote = RemoteSheetSource(spreadsheet_id=spreadsheet_id, sheet_name=sheet_name, gid=gid)
        with self._lock:
            self.store.load_table(values.headers, rows, f"{sheet_name}.csv", remote=remote)
            self._link_index = LinkIndex.empty()
            return self._load_summary()

    def _load_summary(self) -> LoadSummary:
        return LoadSummary(
            columns=self.store.column_names,
            row_count=self.store.row_count,
            source_name=self.store.source_name,
            remote=self.store.remote_source,
        )

    # --- link columns / index -------------------------------------------

    def designate_link_columns(self, columns: Sequence[str]) -> LinkIndex:
        """Set the link columns and rebuild the index over them.

        Raises:
            ValidationError: If ``columns`` is empty, is not a list of
                strings, or names a column the Document does not have.
        """
        if isinstance(columns, str) or not columns:
            raise ValidationError("columns array is required")
        if not all(isinstance(c, str) for c in columns):
            raise ValidationError("columns must be strings")
        with self._lock:
            known = set(self.store.column_names)
            unknown = [c for c in columns if c not in known]
            if unknown:
                raise ValidationError(f"unknown columns: {unknown}")
            self._link_index = LinkIndex.build(self.store.iter_rows(), list(columns))
            logger.info(
                f"link index built columns={list(columns)} link_rows={len(self._link_index)}"
            )
            return self._link_index

    def rebuild_link_index(self) -> LinkIndex:
        with self._lock:
            self._link_index = LinkIndex.build(self.store.iter_rows(), self._link_index.columns)
            return self._link_index

    @property
    def link_index(self) -> LinkIndex:
        return self._link_index

    @property
    def link_columns(self) -> list[str]:
        return list(self._link_index.columns)

    def next_link_row(self, from_position: int = -1) -> int | None:
        return self._link_index.next_row(from_position)

    def prev_link_row(self, from_position: int | None = None) -> int | None:
        if from_position is None:
            from_position = self.store.row_count
        return self._link_index.prev_row(from_position)

    def all_link_rows(self) -> list[int]:
        return list(self._link_index.positions)

    # --- reads ---------------------------------------------------------

    def metadata(self) -> DocumentMetadata:
        with self._lock:
            return DocumentMetadata(
                row_count=self.store.row_count,
                columns=self.store.column_names,
                link_row_count=len(self._link_index),
                is_dirty=self.store.is_dirty,
                dirty_count=self.store.dirty_count,
                source_name=self.store.source_name,
                link_columns=self.link_columns,
                remote=self.store.remote_source,
            )

    def get_rows(self, start: int, count: int) -> list[RowView]:
        with self._lock:
            return self.store.get_rows(start, count)

    def get_row(self, position: int) -> dict[str, str]:
        with self._lock:
            row = self.store.get_row(position)
        if row is None:
            raise NotFoundError("Row not found")
        return row

    def links_in_cell(self, position: int, column: str) -> list[LinkMatch]:
        row = self.get_row(position)
        if column not in row:
            raise NotFoundError(f"Column not found: {column}")
        return list(extract_links(row[column]))

    def changes(self) -> list[ChangeRecord]:
        with self._lock:
            return self.store.changes

    def export_document(self) -> str:
        with self._lock:
            return self.store.export_document()

    # --- writes --------------------------------------------------------

    def update_cell(self, position: int, column: str, value: str) -> UpdateResult:
        """Write one cell; rebuild the index when ``column`` is a link column.

        Raises:
            NotFoundError: If the row or column does not exist.
        """
        with self._lock:
            if not self.store.update_cell(position, column, value):
                raise NotFoundError("Row or column not found")
            rebuilt = column in self._link_index.columns
            if rebuilt:
                self.rebuild_link_index()
            return UpdateResult(
                is_dirty=self.store.is_dirty,
                dirty_count=self.store.dirty_count,
                index_rebuilt=rebuilt,
            )

    def update_cells(self, updates: Iterable[tuple[int, str, str]]) -> UpdateResult:
        """Apply several cell writes and rebuild the index at most once.

        Every (position, column) is checked before anything is written, so a
        bad reference rejects the whole batch.

        Raises:
            NotFoundError: If any row or column does not exist.
        """
        batch = list(updates)
        with self._lock:
            known = set(self.store.column_names)
            for position, column, _ in batch:
                if self.store.get_row(position) is None or column not in known:
                    raise NotFoundError(f"Row or column not found: row={position} column={column!r}")
            for position, column, value in batch:
                self.store.update_cell(position, column, value)
            rebuilt = any(column in self._link_index.columns for _, column, _ in batch)
            if rebuilt:
                self.rebuild_link_index()
            return UpdateResult(
                is_dirty=self.store.is_dirty,
                dirty_count=self.store.dirty_count,
                index_rebuilt=rebuilt,
            )

    def replace_link(self, position: int, column: str, ordinal: int, new_href: str) -> UpdateResult:
        """Point the ``ordinal``-th link of a cell at ``new_href``.

        An ordinal past the last link leaves the cell as it is.
        """
        with self._lock:
            row = self.get_row(position)
            if column not in row:
                raise NotFoundError(f"Column not found: {column}")
            return self.update_cell(position, column, replace_link_at(row[column], ordinal, new_href))

    def mark_clean(self) -> None:
        with self._lock:
            self.store.mark_clean()

    # --- remote sync ---------------------------------------------------

    def push_changes(self, client: SheetsClient) -> int:
        """Write every recorded change to the sheet the Document came from.

        Returns the number of cells written; an empty Change Log writes
        nothing and returns 0. The Change Log is kept after a push.

        Raises:
            ValidationError: If the Document was not loaded from a sheet.
        """
        with self._lock:
            remote = self.store.remote_source
            if remote is None:
                raise ValidationError("No Google Sheet loaded. Please load a sheet first.")
            changes = self.store.changes
            columns = self.store.column_names
        if not changes:
            return 0
        updates = build_cell_updates(changes, columns, header_rows=self.header_rows)
        return client.batch_update(remote.spreadsheet_id, remote.sheet_name, updates)
