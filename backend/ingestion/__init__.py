"""Ingestion: parse uploaded spreadsheets into plain row dicts."""

from .spreadsheet import SpreadsheetError, cell_text, read_rows, validate_upload

__all__ = [
    "SpreadsheetError",
    "cell_text",
    "read_rows",
    "validate_upload",
]
