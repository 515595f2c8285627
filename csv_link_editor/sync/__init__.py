from .addressing import CellUpdate, build_cell_updates, cell_address, column_letter
from .errors import SyncError
from .sheets_client import SheetsClient, SheetValues

__all__ = [
    "CellUpdate",
    "SheetValues",
    "SheetsClient",
    "SyncError",
    "build_cell_updates",
    "cell_address",
    "column_letter",
]
