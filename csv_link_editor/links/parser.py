from __future__ import annotations

import re
from collections.abc import Iterator
from typing import overload

from ..models.link_match import LinkMatch

"""Link pattern matching over HTML-as-text.

Cells hold HTML fragments written by a rich-text editor, so anchors are
located with a syntactic scan of the open tag instead of a DOM parse. A DOM
parse would normalise attribute order, quoting and tag casing on write-back;
the scan lets ``replace_link_at`` touch only the characters of one href value.

- ``matches_link_pattern``: any ``<a ... href=`` open tag (the tag does not
  need to be closed); this is what Link Index membership is based on
- ``extract_links``: complete ``<a ... href=value ...>`` open tags, left to
  right, with double-quoted, single-quoted or unquoted values
- ``replace_link_at``: rewrite the href value of the n-th extracted tag
"""

__all__ = [
    "LinkMatches",
    "matches_link_pattern",
    "extract_links",
    "replace_link_at",
    "count_links",
]

# href preceded by '-' or a word char is a different attribute (data-href, xhref)
_HREF_NAME = r"(?<![\w-])href\s*="

LINK_PATTERN = re.compile(r"<a\s[^>]*?" + _HREF_NAME, re.IGNORECASE)

ANCHOR_PATTERN = re.compile(
    r"<a\s[^>]*?" + _HREF_NAME + r"\s*"
    r"(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<uq>[^\s\"'>]+))"
    r"[^>]*>",
    re.IGNORECASE,
)


def matches_link_pattern(value: str | None) -> bool:
    """True iff ``value`` contains an anchor open tag carrying an href attribute."""
    if not value:
        return False
    return LINK_PATTERN.search(value) is not None


def _href_group(match: re.Match[str]) -> str:
    """Name of the group holding the href value: dq, sq or uq."""
    for name in ("dq", "sq"):
        if match.group(name) is not None:
            return name
    return "uq"


class LinkMatches:
    """Lazy, restartable sequence of the links in one value.

    Every ``iter()`` starts a fresh scan of the value, so the sequence can be
    consumed any number of times. ``len()`` and indexing scan the whole value.
    """

    def __init__(self, value: str) -> None:
        self._value = value or ""

    def __iter__(self) -> Iterator[LinkMatch]:
        for m in ANCHOR_PATTERN.finditer(self._value):
            yield LinkMatch(
                full_match=m.group(0),
                href=m.group(_href_group(m)),
                start=m.start(),
                end=m.end(),
            )

    def __len__(self) -> int:
        return sum(1 for _ in ANCHOR_PATTERN.finditer(self._value))

    @overload
    def __getitem__(self, index: int) -> LinkMatch: ...

    @overload
    def __getitem__(self, index: slice) -> list[LinkMatch]: ...

    def __getitem__(self, index: int | slice) -> LinkMatch | list[LinkMatch]:
        return list(self)[index]

    def __bool__(self) -> bool:
        return ANCHOR_PATTERN.search(self._value) is not None

    def __repr__(self) -> str:
        return f"LinkMatches({list(self)!r})"


def extract_links(value: str | None) -> LinkMatches:
    """Return the links of ``value`` in document order (offsets ascending)."""
    return LinkMatches(value or "")


def _quote_href(href: str, preferred: str) -> str:
    if preferred not in href:
        return f"{preferred}{href}{preferred}"
    other = "'" if preferred == '"' else '"'
    if other not in href:
        return f"{other}{href}{other}"
    # Both quote characters present
    return '"' + href.replace('"', "&quot;") + '"'


def replace_link_at(value: str, ordinal: int, new_href: str) -> str:
    """Replace the href value of the ``ordinal``-th link (0-based).

    Only the attribute value and its quotes change; the tag name, other
    attributes, the ``href=`` spelling and surrounding text are kept. The
    original quote character is reused unless ``new_href`` contains it.
    An out-of-range ordinal returns ``value`` unchanged.
    """
    if ordinal < 0 or not value:
        return value
    for i, m in enumerate(ANCHOR_PATTERN.finditer(value)):
        if i != ordinal:
            continue
        group = _href_group(m)
        start, end = m.span(group)
        if group == "uq":
            preferred = '"'
        else:
            # widen the span to take the quote characters with it
            preferred = '"' if group == "dq" else "'"
            start, end = start - 1, end + 1
        return value[:start] + _quote_href(new_href, preferred) + value[end:]
    return value


def count_links(value: str | None) -> int:
    return len(extract_links(value))
