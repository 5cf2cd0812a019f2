"""
Tests for spreadsheet ingestion: upload validation and row parsing.
"""

from __future__ import annotations

import io
import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pandas as pd
import pytest

from ingestion.spreadsheet import SpreadsheetError, cell_text, read_rows, validate_upload
from services.errors import InvalidInputError


def _xlsx(frame: pd.DataFrame) -> bytes:
    buffer = io.BytesIO()
    frame.to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()


def test_validate_upload_accepts_xlsx_and_csv() -> None:
    assert validate_upload("Game.XLSX", b"x", 10) == ".xlsx"
    assert validate_upload("game.csv", b"x", 10) == ".csv"


@pytest.mark.parametrize(
    "filename, content, max_bytes",
    [
        (None, b"x", 10),
        ("game.txt", b"x", 10),
        ("game", b"x", 10),
        ("game.csv", b"", 10),
        ("game.csv", b"x" * 11, 10),
    ],
)
def test_validate_upload_rejects(filename, content, max_bytes) -> None:
    with pytest.raises(SpreadsheetError):
        validate_upload(filename, content, max_bytes)


def test_spreadsheet_error_is_invalid_input() -> None:
    assert issubclass(SpreadsheetError, InvalidInputError)


def test_read_rows_xlsx_cleans_cells() -> None:
    frame = pd.DataFrame(
        [
            {" name ": "  Ana ", "number": 12, "note": None},
            {" name ": None, "number": None, "note": None},
            {" name ": "Bia", "number": None, "note": ""},
        ]
    )
    rows = read_rows(_xlsx(frame), "players.xlsx")
    assert len(rows) == 2
    assert rows[0]["name"] == "Ana"
    assert rows[0]["number"] == 12
    assert rows[0]["note"] is None
    assert rows[1]["number"] is None
    assert rows[1]["note"] is None


def test_read_rows_as_text_keeps_leading_zeros() -> None:
    content = b"name,number\n007,10\n"
    rows = read_rows(content, "players.csv", as_text=True)
    assert rows == [{"name": "007", "number": "10"}]

    numeric = read_rows(content, "players.csv")
    assert numeric[0]["name"] == 7


def test_read_rows_unreadable_workbook() -> None:
    with pytest.raises(SpreadsheetError):
        read_rows(b"definitely not a zip", "broken.xlsx")


@pytest.mark.parametrize(
    "row, expected",
    [
        ({"number": 12.0}, "12"),
        ({"number": 12.5}, "12.5"),
        ({"number": "7"}, "7"),
        ({"number": None}, ""),
        ({}, ""),
    ],
)
def test_cell_text(row, expected) -> None:
    assert cell_text(row, "number") == expected
