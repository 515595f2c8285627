from __future__ import annotations

import csv
import io
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import pandas as pd

"""CSV codec built on pandas.

Parsing contract consumed by the Tabular Store:
- First record is the header; every later non-blank record is a data row
- Every cell is kept as the literal string that was written (no NA
  conversion, no type inference); short rows are padded with ""
- Header cells are the column names exactly as written (an empty cell is
  the column ""); a repeated name raises ParseError
- A record wider than the header raises ParseError
- A parse that yields no header raises ParseError

``serialize_csv`` is the inverse restricted to data: it writes the header in
the stored column order followed by each row's values in that order.
"""

__all__ = [
    "ParseError",
    "ParsedTable",
    "check_unique_columns",
    "parse_csv",
    "serialize_csv",
]


class ParseError(Exception):
    """Raised when CSV text cannot be turned into a header and rows."""


def check_unique_columns(columns: Sequence[str]) -> None:
    """Rows are keyed by column name, so a repeated header cannot be kept.

    Raises:
        ParseError: If a column name appears more than once.
    """
    seen: set[str] = set()
    duplicates: list[str] = []
    for col in columns:
        if col in seen and col not in duplicates:
            duplicates.append(col)
        seen.add(col)
    if duplicates:
        raise ParseError(f"duplicate column names: {duplicates}")


@dataclass
class ParsedTable:
    columns: list[str]
    rows: list[dict[str, str]]


def parse_csv(content: str) -> ParsedTable:
    """Parse CSV text into ordered columns and string-valued rows.

    Parameters
    ----------
    content: raw CSV text (header row first)
    """
    if not content or not content.strip():
        raise ParseError("no columns found: content is empty")
    try:
        # header=None keeps the header cells as written (no "Unnamed: 1" or
        # "a.1" renaming) and makes an over-wide record a ParserError
        df = pd.read_csv(
            io.StringIO(content),
            header=None,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"no columns found: {e}") from e
    except (pd.errors.ParserError, csv.Error, ValueError) as e:
        raise ParseError(f"malformed csv: {e}") from e

    # Short records come back as NaN even with na_filter disabled
    records = df.fillna("").values.tolist()
    if not records:
        raise ParseError("no columns found in header")
    columns = [str(c) for c in records[0]]
    check_unique_columns(columns)
    rows = [dict(zip(columns, (str(v) for v in record))) for record in records[1:]]
    return ParsedTable(columns=columns, rows=rows)


def serialize_csv(columns: Sequence[str], rows: Sequence[Mapping[str, str]]) -> str:
    """Serialize rows to CSV text using ``columns`` as the field order."""
    df = pd.DataFrame(
        [[row.get(col, "") for col in columns] for row in rows],
        columns=list(columns),
        dtype=str,
    )
    return df.to_csv(index=False, lineterminator="\n")
