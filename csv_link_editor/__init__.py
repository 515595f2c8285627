"""csv-link-editor: tabular document engine for editing link-bearing HTML cells."""

__version__ = "0.1.0"
