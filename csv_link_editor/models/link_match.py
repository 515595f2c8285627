from __future__ import annotations

from dataclasses import asdict, dataclass

"""LinkMatch model: one anchor occurrence found inside a cell value."""

__all__ = [
    "LinkMatch",
]


@dataclass(frozen=True)
class LinkMatch:
    """A single ``<a ... href=...>`` open tag located in a cell value.

    Attributes:
        full_match: The complete open tag text as written in the cell
        href: The href attribute value as written (entities are not unescaped)
        start: Offset of the first character of the tag
        end: Offset just past the closing ``>`` of the tag
    """
    full_match: str
    href: str
    start: int
    end: int

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
