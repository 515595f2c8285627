from .codec import ParseError, ParsedTable, check_unique_columns, parse_csv, serialize_csv

__all__ = ["ParseError", "ParsedTable", "check_unique_columns", "parse_csv", "serialize_csv"]
