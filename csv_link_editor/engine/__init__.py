"""Tabular document engine: store, change log, link index and editor session."""

from .change_log import ChangeLog
from .errors import EditorError, NotFoundError, ParseError, ValidationError
from .link_index import LinkIndex, build_link_index, find_next_link_row, find_prev_link_row
from .session import DocumentMetadata, EditorSession, LoadSummary, UpdateResult
from .store import TabularStore

__all__ = [
    # Components
    "ChangeLog",
    "EditorSession",
    "LinkIndex",
    "TabularStore",
    # Link index functions
    "build_link_index",
    "find_next_link_row",
    "find_prev_link_row",
    # Results
    "DocumentMetadata",
    "LoadSummary",
    "UpdateResult",
    # Errors
    "EditorError",
    "NotFoundError",
    "ParseError",
    "ValidationError",
]
