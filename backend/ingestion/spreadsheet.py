"""
Spreadsheet ingestion: turn an uploaded workbook (or CSV) into row dicts.

The first sheet is read with pandas. Header names are stripped, blank cells
become ``None`` and fully blank rows are dropped, so callers see one plain
dict per data row.
"""

from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import Any, Dict, List

import pandas as pd

from services.errors import InvalidInputError

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = (".xlsx",)
CSV_SUFFIXES = (".csv",)
ALLOWED_SUFFIXES = EXCEL_SUFFIXES + CSV_SUFFIXES


class SpreadsheetError(InvalidInputError):
    """Upload is missing, too large, of the wrong type, or unreadable."""


def validate_upload(filename: str | None, content: bytes, max_bytes: int) -> str:
    """Check name, type and size of an upload; returns the lowercase suffix."""
    if not filename:
        raise SpreadsheetError("No file uploaded")
    suffix = PurePath(filename).suffix.lower()
    if suffix not in ALLOWED_SUFFIXES:
        raise SpreadsheetError(
            f"Unsupported file type {suffix or '(none)'}; expected one of {', '.join(ALLOWED_SUFFIXES)}"
        )
    if not content:
        raise SpreadsheetError("Uploaded file is empty")
    if len(content) > max_bytes:
        raise SpreadsheetError(f"File too large; maximum size is {max_bytes} bytes")
    return suffix


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def read_rows(content: bytes, filename: str, *, as_text: bool = False) -> List[Dict[str, Any]]:
    """Parse the first sheet of ``content`` into a list of row dicts.

    With ``as_text`` every cell is read as a string, so values such as
    jersey labels or numeric-looking names are not turned into numbers.
    """
    suffix = PurePath(filename).suffix.lower()
    dtype = str if as_text else None
    buffer = io.BytesIO(content)
    try:
        if suffix in CSV_SUFFIXES:
            df = pd.read_csv(buffer, dtype=dtype)
        elif suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(buffer, sheet_name=0, dtype=dtype, engine="openpyxl")
        else:
            raise SpreadsheetError(f"Unsupported file type {suffix}")
    except SpreadsheetError:
        raise
    except Exception as e:
        logger.warning("Could not parse spreadsheet %s: %s", filename, e)
        raise SpreadsheetError(f"Could not read spreadsheet: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    df = df.astype(object).where(pd.notna(df), None)

    rows: List[Dict[str, Any]] = []
    for record in df.to_dict(orient="records"):
        row = {key: _clean(value) for key, value in record.items()}
        if any(value is not None for value in row.values()):
            rows.append(row)
    logger.info("Parsed %d rows from %s", len(rows), filename)
    return rows


def cell_text(row: Dict[str, Any], key: str, default: str = "") -> str:
    """String value of a cell, with floats like ``12.0`` rendered as ``12``."""
    value = row.get(key)
    if value is None:
        return default
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
