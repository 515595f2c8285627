from __future__ import annotations

"""Errors raised by the remote sync adapter."""

__all__ = [
    "SyncError",
]


class SyncError(Exception):
    """Raised when a remote spreadsheet read or write fails."""
