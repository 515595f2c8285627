from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

from .addressing import CellUpdate
from .errors import SyncError

"""Google Sheets API v4 client (REST over ``requests``).

The client only reads values, resolves a tab name and batch-writes values.
It expects an OAuth access token obtained elsewhere; the token exchange and
refresh flow is not part of this package.
"""

__all__ = [
    "SheetValues",
    "SheetsClient",
    "DEFAULT_SHEET_NAME",
]

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Sheet1"


@dataclass(frozen=True)
class SheetValues:
    headers: list[str]
    rows: list[list[str]]


def _a1_sheet_prefix(sheet_name: str) -> str:
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'"


class SheetsClient:
    """Thin wrapper around the three Sheets endpoints the editor needs."""

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = "https://sheets.googleapis.com/v4",
        timeout: float = 30.0,
        value_input_option: str = "RAW",
        http: requests.Session | None = None,
    ) -> None:
        if not access_token:
            raise SyncError("access token is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.value_input_option = value_input_option
        self.http = http or requests.Session()
        self.http.headers.update({"Authorization": f"Bearer {access_token}"})

    def _request(self, method: str, path: str, action: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise SyncError(f"Failed to {action}: {e}") from e

        if response.status_code == 404:
            raise SyncError("Sheet not found or you do not have access")
        if response.status_code == 403:
            raise SyncError("Permission denied. Please ensure you have access to this sheet.")
        if not response.ok:
            raise SyncError(f"Failed to {action}: HTTP {response.status_code} {response.text[:200]}")
        try:
            return response.json()
        except ValueError as e:
            raise SyncError(f"Failed to {action}: invalid JSON response") from e

    def get_sheet_name(self, spreadsheet_id: str, gid: str | None = None) -> str:
        """Resolve a tab title from its gid, falling back to the first tab."""
        data = self._request(
            "GET",
            f"/spreadsheets/{quote(spreadsheet_id, safe='')}",
            "load spreadsheet",
            params={"fields": "sheets.properties"},
        )
        sheets = data.get("sheets") or []
        if gid:
            for sheet in sheets:
                props = sheet.get("properties") or {}
                if str(props.get("sheetId")) == str(gid) and props.get("title"):
                    return props["title"]
            logger.warning(f"gid={gid} not found in spreadsheet, using first sheet")
        if sheets and (sheets[0].get("properties") or {}).get("title"):
            return sheets[0]["properties"]["title"]
        return DEFAULT_SHEET_NAME

    def get_values(self, spreadsheet_id: str, range_: str) -> SheetValues:
        """Read a range; the first row becomes the headers.

        Raises:
            SyncError: If the range holds no values at all.
        """
        data = self._request(
            "GET",
            f"/spreadsheets/{quote(spreadsheet_id, safe='')}/values/{quote(range_, safe='')}",
            "load sheet",
        )
        values = data.get("values") or []
        if not values:
            raise SyncError("Sheet is empty")
        headers = ["" if h is None else str(h) for h in values[0]]
        rows = [["" if v is None else str(v) for v in row] for row in values[1:]]
        return SheetValues(headers=headers, rows=rows)

    def batch_update(self, spreadsheet_id: str, sheet_name: str, updates: Sequence[CellUpdate]) -> int:
        """Write every update in one request. Returns the number of cells written."""
        if not updates:
            return 0
        prefix = _a1_sheet_prefix(sheet_name)
        body = {
            "valueInputOption": self.value_input_option,
            "data": [{"range": f"{prefix}!{u.range}", "values": [[u.value]]} for u in updates],
        }
        self._request(
            "POST",
            f"/spreadsheets/{quote(spreadsheet_id, safe='')}/values:batchUpdate",
            "update sheet",
            json=body,
        )
        logger.info(f"pushed {len(updates)} cell(s) to spreadsheet={spreadsheet_id} sheet={sheet_name!r}")
        return len(updates)
