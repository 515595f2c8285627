from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator
from typing import Any

from tqdm import tqdm

"""Row progress for batch runs over a Document (tqdm, TTY only).

Piped output and CI logs get no bar at all; the labeled log lines and the
SUMMARY line are the only output there.
"""

__all__ = [
    "RowProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class RowProgress:
    """Iterate row positions while showing a bar with a running link count.

    Usage:
        with RowProgress(positions) as progress:
            for position in progress:
                ...
                progress.add_links(n)
    """

    def __init__(self, positions: Iterable[int], *, description: str = "Relinking rows") -> None:
        self.positions = list(positions)
        self.description = description
        self.rows_done = 0
        self.links = 0
        self._bar: Any = None
        if is_tty_enabled() and self.positions:
            self._bar = tqdm(
                total=len(self.positions),
                desc=description,
                unit="row",
                leave=True,
                ncols=80,
                ascii=True,
            )

    @property
    def enabled(self) -> bool:
        return self._bar is not None

    def __iter__(self) -> Iterator[int]:
        for position in self.positions:
            yield position
            self.rows_done += 1
            if self._bar is not None:
                self._bar.update(1)

    def add_links(self, count: int) -> None:
        if count <= 0:
            return
        self.links += count
        if self._bar is not None:
            self._bar.set_postfix(links=self.links)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def __enter__(self) -> RowProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
