from .parser import LinkMatches, count_links, extract_links, matches_link_pattern, replace_link_at

__all__ = [
    "LinkMatches",
    "count_links",
    "extract_links",
    "matches_link_pattern",
    "replace_link_at",
]
