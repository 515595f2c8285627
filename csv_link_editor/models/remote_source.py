from __future__ import annotations

from dataclasses import dataclass

"""RemoteSheetSource: where a Document was loaded from when it came from Google Sheets."""

__all__ = [
    "RemoteSheetSource",
]


@dataclass(frozen=True)
class RemoteSheetSource:
    spreadsheet_id: str
    sheet_name: str
    gid: str | None = None  # tab id from the sheet URL, None means first tab
