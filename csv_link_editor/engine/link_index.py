from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from ..links.parser import matches_link_pattern

"""Link Index: ascending row positions whose link columns contain a link.

The index is a pure function of the rows and the designated link columns and
is always rebuilt with a full scan; callers rebuild it after designating link
columns and after editing a cell in a link column.

Navigation sentinels: ``from_position=-1`` means "no row selected", so
``find_next_link_row`` returns the first entry; ``from_position=row_count``
lets ``find_prev_link_row`` return the last entry.
"""

__all__ = [
    "LinkIndex",
    "build_link_index",
    "find_next_link_row",
    "find_prev_link_row",
]

RowSource = Iterable[Mapping[str, str]] | Iterable[tuple[int, Mapping[str, str]]]


def _positioned(rows: RowSource) -> Iterable[tuple[int, Mapping[str, str]]]:
    for i, item in enumerate(rows):
        if isinstance(item, tuple):
            yield item
        else:
            yield i, item


def build_link_index(rows: RowSource, link_columns: Sequence[str]) -> list[int]:
    """Scan rows in order and collect positions with a link in any link column.

    ``rows`` is either a sequence of row mappings (position = sequence index)
    or ``(position, row)`` pairs as produced by ``TabularStore.iter_rows``.
    Columns are checked in the order given and a row contributes once.
    """
    if not link_columns:
        return []
    positions: list[int] = []
    for position, row in _positioned(rows):
        for col in link_columns:
            if matches_link_pattern(row.get(col)):
                positions.append(position)
                break
    return positions


def find_next_link_row(index: Sequence[int], from_position: int) -> int | None:
    """Smallest entry strictly greater than ``from_position`` or None."""
    i = bisect_right(index, from_position)
    return index[i] if i < len(index) else None


def find_prev_link_row(index: Sequence[int], from_position: int) -> int | None:
    """Largest entry strictly less than ``from_position`` or None."""
    i = bisect_left(index, from_position)
    return index[i - 1] if i > 0 else None


@dataclass(frozen=True)
class LinkIndex:
    """Immutable snapshot of a built index and the columns it was built over."""
    columns: tuple[str, ...] = ()
    positions: tuple[int, ...] = ()

    @classmethod
    def empty(cls) -> LinkIndex:
        return cls()

    @classmethod
    def build(cls, rows: RowSource, link_columns: Sequence[str]) -> LinkIndex:
        return cls(columns=tuple(link_columns), positions=tuple(build_link_index(rows, link_columns)))

    def next_row(self, from_position: int) -> int | None:
        return find_next_link_row(self.positions, from_position)

    def prev_row(self, from_position: int) -> int | None:
        return find_prev_link_row(self.positions, from_position)

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, position: object) -> bool:
        return position in self.positions
