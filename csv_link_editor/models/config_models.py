from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the CSV link editor.

These are the typed form of ``config/editor.yml`` after schema validation and
default filling in ``csv_link_editor.config.loader``.
"""

__all__ = [
    "ServerConfig",
    "EditorSettings",
    "SheetsConfig",
    "LoggingConfig",
    "EditorConfig",
]

DEFAULT_LINK_COLUMNS = ("Content", "Content 2")


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server settings for ``csv-link-editor serve``."""
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: tuple[str, ...] = ("*",)
    max_upload_mb: int = 50  # upper bound for JSON upload bodies

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@dataclass(frozen=True)
class EditorSettings:
    """Document editing defaults."""
    page_size: int = 50  # default count for GET /api/rows
    default_link_columns: tuple[str, ...] = DEFAULT_LINK_COLUMNS  # used by the CLI when none given


@dataclass(frozen=True)
class SheetsConfig:
    """Google Sheets v4 REST settings for the remote sync adapter."""
    api_base_url: str = "https://sheets.googleapis.com/v4"
    header_rows: int = 1  # sheet rows above the first data row
    value_input_option: str = "RAW"
    timeout_seconds: float = 30.0
    access_token: str | None = None  # normally taken from GOOGLE_ACCESS_TOKEN


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class EditorConfig:
    """Root configuration object."""
    server: ServerConfig = field(default_factory=ServerConfig)
    editor: EditorSettings = field(default_factory=EditorSettings)
    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
