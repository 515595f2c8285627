from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..models.change_record import ChangeRecord
from .errors import SyncError

"""A1 addressing for pushing Change Log entries to a spreadsheet.

Column ordinals become base-26 letters (0 -> A, 25 -> Z, 26 -> AA) taken
from the Document's column order. Row positions are zero-based data rows, so
the sheet row is ``position + header_rows + 1``; with the usual single header
row, data row 0 lives in sheet row 2.
"""

__all__ = [
    "CellUpdate",
    "column_letter",
    "cell_address",
    "build_cell_updates",
]


@dataclass(frozen=True)
class CellUpdate:
    range: str  # A1 cell address without the sheet prefix
    value: str


def column_letter(index: int) -> str:
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")
    letters = ""
    col = index
    while col >= 0:
        letters = chr(ord("A") + col % 26) + letters
        col = col // 26 - 1
    return letters


def cell_address(position: int, column_index: int, header_rows: int = 1) -> str:
    if position < 0:
        raise ValueError(f"row position must be >= 0, got {position}")
    return f"{column_letter(column_index)}{position + header_rows + 1}"


def build_cell_updates(
    changes: Iterable[ChangeRecord],
    columns: Sequence[str],
    header_rows: int = 1,
) -> list[CellUpdate]:
    """Turn change records into one write per edited cell, carrying ``current``.

    Raises:
        SyncError: If a change names a column missing from ``columns``.
    """
    column_ordinals = {name: i for i, name in enumerate(columns)}
    updates: list[CellUpdate] = []
    for change in changes:
        ordinal = column_ordinals.get(change.column)
        if ordinal is None:
            raise SyncError(f'Column "{change.column}" not found')
        updates.append(
            CellUpdate(range=cell_address(change.row, ordinal, header_rows), value=change.current)
        )
    return updates
