from .audit_log import AuditLogBuffer
from .init import get_logger, log_summary, reset_logging, set_level, setup_logging

__all__ = [
    "AuditLogBuffer",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_level",
    "setup_logging",
]
