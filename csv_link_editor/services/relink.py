from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ..engine.session import EditorSession
from ..links.parser import extract_links, replace_link_at
from .progress import RowProgress

"""Batch relink service.

Rewrites hrefs across the link columns of a loaded Document using an
``old href -> new href`` mapping. Only rows in the Link Index are visited,
each link is compared by its href exactly as written, and all cell writes go
through ``EditorSession.update_cells`` so they are recorded in the Change Log
like interactive edits.
"""

__all__ = [
    "RelinkError",
    "RelinkResult",
    "load_href_mapping",
    "relink_session",
]

logger = logging.getLogger(__name__)


class RelinkError(Exception):
    pass


@dataclass(frozen=True)
class RelinkResult:
    rows_scanned: int  # rows in the Link Index
    links_rewritten: int
    cells_updated: int
    elapsed_seconds: float
    unmatched: list[str] = field(default_factory=list)  # mapping keys never seen


def load_href_mapping(path: Path) -> dict[str, str]:
    """Read a YAML mapping of old href to new href.

    Raises:
        RelinkError: If the file is missing, not YAML, or not a str -> str mapping.
    """
    if not path.exists():
        raise RelinkError(f"mapping file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise RelinkError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise RelinkError("mapping file must contain a mapping of old href -> new href")
    mapping: dict[str, str] = {}
    for old, new in data.items():
        if not isinstance(old, str) or not isinstance(new, str):
            raise RelinkError(f"mapping entries must be strings: {old!r} -> {new!r}")
        mapping[old] = new
    return mapping


def _rewrite_value(value: str, mapping: Mapping[str, str], seen: set[str]) -> tuple[str, int]:
    rewritten = 0
    for ordinal, link in enumerate(list(extract_links(value))):
        new_href = mapping.get(link.href)
        if new_href is None:
            continue
        seen.add(link.href)
        if new_href == link.href:
            continue
        # one tag in, one tag out: later ordinals stay valid after the rewrite
        value = replace_link_at(value, ordinal, new_href)
        rewritten += 1
    return value, rewritten


def relink_session(
    session: EditorSession,
    mapping: Mapping[str, str],
    link_columns: Sequence[str] | None = None,
) -> RelinkResult:
    """Apply ``mapping`` to every link in the session's link columns.

    When ``link_columns`` is given the columns are (re)designated first;
    otherwise the columns already designated on the session are used.
    """
    start = time.perf_counter()
    if link_columns is not None:
        session.designate_link_columns(link_columns)
    columns = session.link_columns
    if not columns:
        raise RelinkError("no link columns designated")

    positions = session.all_link_rows()
    seen: set[str] = set()
    updates: list[tuple[int, str, str]] = []
    links_rewritten = 0
    with RowProgress(positions) as progress:
        for position in progress:
            row = session.get_row(position)
            for col in columns:
                new_value, n = _rewrite_value(row[col], mapping, seen)
                if n:
                    updates.append((position, col, new_value))
                    links_rewritten += n
                    progress.add_links(n)

    if updates:
        session.update_cells(updates)
    unmatched = sorted(set(mapping) - seen)
    if unmatched:
        logger.warning(f"{len(unmatched)} mapping entr{'y' if len(unmatched) == 1 else 'ies'} matched no link")
    return RelinkResult(
        rows_scanned=len(positions),
        links_rewritten=links_rewritten,
        cells_updated=len(updates),
        elapsed_seconds=time.perf_counter() - start,
        unmatched=unmatched,
    )
