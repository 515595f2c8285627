from __future__ import annotations

from ..csvio.codec import ParseError

"""Error taxonomy for the document engine.

- ParseError: malformed input at load time (defined by the CSV codec);
  the previously loaded Document is kept
- NotFoundError: a row position or column name outside the current Document
- ValidationError: missing or malformed caller input (e.g. an empty list of
  link columns)
"""

__all__ = [
    "EditorError",
    "NotFoundError",
    "ParseError",
    "ValidationError",
]


class EditorError(Exception):
    """Base class for errors raised by EditorSession operations."""


class NotFoundError(EditorError):
    pass


class ValidationError(EditorError):
    pass
