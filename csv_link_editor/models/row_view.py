from __future__ import annotations

from dataclasses import dataclass

"""RowView model: a row tagged with its absolute position in the Document."""

__all__ = [
    "RowView",
]


@dataclass(frozen=True)
class RowView:
    """One row of a page returned by ``TabularStore.get_rows``.

    ``index`` is the zero-based position of the row in the Document, which is
    stable for the lifetime of a loaded Document. ``data`` is a copy of the
    row, so callers cannot bypass change tracking by mutating it.
    """
    index: int
    data: dict[str, str]

    def to_dict(self) -> dict[str, object]:
        return {"index": self.index, "data": dict(self.data)}
