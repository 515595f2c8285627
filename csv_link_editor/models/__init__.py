"""Domain models for the CSV link editor.

This package contains the frozen value objects passed between the engine,
the link parser, the remote sync adapter and the REST layer.
"""

from .change_record import ChangeRecord
from .config_models import EditorConfig, EditorSettings, LoggingConfig, ServerConfig, SheetsConfig
from .link_match import LinkMatch
from .remote_source import RemoteSheetSource
from .row_view import RowView

__all__ = [
    # Configuration models
    "EditorConfig",
    "EditorSettings",
    "LoggingConfig",
    "ServerConfig",
    "SheetsConfig",
    # Document models
    "ChangeRecord",
    "LinkMatch",
    "RemoteSheetSource",
    "RowView",
]
