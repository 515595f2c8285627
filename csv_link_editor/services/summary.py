from __future__ import annotations

from ..engine.session import DocumentMetadata
from .relink import RelinkResult

"""SUMMARY line rendering for CLI runs.

Format:
SUMMARY file={name} rows={rows} link_rows={link_rows} scanned={n}
links_rewritten={n} cells_updated={n} unmatched={n} elapsed_sec={sec}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(value: float) -> str:
    """Render a duration without trailing zeros or scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(meta: DocumentMetadata, result: RelinkResult | None = None) -> str:
    """Render the SUMMARY line for an inspect (``result=None``) or relink run.

    Examples:
        >>> from csv_link_editor.engine.session import DocumentMetadata
        >>> meta = DocumentMetadata(
        ...     row_count=3, columns=["Body"], link_row_count=2, is_dirty=False,
        ...     dirty_count=0, source_name="pages.csv", link_columns=["Body"],
        ... )
        >>> render_summary_line(meta)
        'SUMMARY file=pages.csv rows=3 link_rows=2'
    """
    line = f"SUMMARY file={meta.source_name} rows={meta.row_count} link_rows={meta.link_row_count}"
    if result is None:
        return line
    return (
        f"{line} "
        f"scanned={result.rows_scanned} "
        f"links_rewritten={result.links_rewritten} "
        f"cells_updated={result.cells_updated} "
        f"unmatched={len(result.unmatched)} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
