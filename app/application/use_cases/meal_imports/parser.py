"""Read an uploaded meal spreadsheet into untyped rows."""

from __future__ import annotations

import importlib
import logging
import math
import numbers
from datetime import date, datetime
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Any, Sequence

from app.domain.entities import HEADER_TO_FIELD, ImportField, RawImportRow

from .errors import SpreadsheetFormatError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")


@lru_cache(maxsize=1)
def _get_pandas_module() -> Any:
    """Load :mod:`pandas` lazily to keep application start-up light."""

    return importlib.import_module("pandas")


def _file_suffix(filename: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise SpreadsheetFormatError(
            "Unsupported file type. Upload one of: " + ", ".join(SUPPORTED_EXTENSIONS)
        )
    return suffix


def _read_csv(pd: Any, file_bytes: bytes) -> Any:
    """Read a CSV whose width is set by its header row.

    Cells beyond the last header column, such as a trailing comma on a data
    row, are dropped instead of failing the whole file.
    """

    options = {
        "header": None,
        "dtype": object,
        "keep_default_na": False,
        "skip_blank_lines": False,
        "engine": "python",
    }
    width = pd.read_csv(BytesIO(file_bytes), nrows=1, **options).shape[1]

    def _trim(cells: list[str]) -> list[str]:
        logger.info("Ignoring %s cells beyond the header columns", len(cells) - width)
        return cells[:width]

    return pd.read_csv(
        BytesIO(file_bytes),
        names=list(range(width)),
        index_col=False,
        on_bad_lines=_trim,
        **options,
    )


def _read_grid(file_bytes: bytes, suffix: str) -> list[list[Any]]:
    pd = _get_pandas_module()
    try:
        if suffix == ".csv":
            dataframe = _read_csv(pd, file_bytes)
        else:
            dataframe = pd.read_excel(
                BytesIO(file_bytes), sheet_name=0, header=None, dtype=object
            )
    except Exception as exc:  # pandas surfaces engine-specific error types
        logger.info("Could not read uploaded spreadsheet: %s", exc)
        raise SpreadsheetFormatError(
            "The file could not be read as a spreadsheet"
        ) from exc
    return dataframe.values.tolist()


def _cell_to_text(value: Any) -> str:
    """Render a cell the way spreadsheet software displays it."""

    if isinstance(value, str):
        return value
    if value is None or _get_pandas_module().isna(value):
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        value = float(value)
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        if value.hour == value.minute == value.second == 0:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _coerce_number(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return math.nan


def _map_headers(header_row: Sequence[str]) -> dict[int, ImportField]:
    columns: dict[int, ImportField] = {}
    seen: set[ImportField] = set()
    for index, header in enumerate(header_row):
        import_field = HEADER_TO_FIELD.get(header)
        if import_field is None:
            continue
        if import_field in seen:
            logger.warning("Duplicate header %r ignored at column %s", header, index + 1)
            continue
        seen.add(import_field)
        columns[index] = import_field

    missing = [
        import_field.header
        for import_field in ImportField
        if import_field.required and import_field not in seen
    ]
    if missing:
        raise SpreadsheetFormatError(
            "Missing required columns: " + ", ".join(missing)
        )
    return columns


def _is_blank(text: str) -> bool:
    return not text.strip()


def _build_row(
    cells: Sequence[str], columns: dict[int, ImportField], row_number: int
) -> RawImportRow:
    values: dict[ImportField, Any] = {}
    raw_cells: dict[ImportField, str] = {}
    for index, import_field in columns.items():
        text = cells[index] if index < len(cells) else ""
        if text == "":
            continue
        raw_cells[import_field] = text
        values[import_field] = _coerce_number(text) if import_field.numeric else text
    return RawImportRow(values=values, row_number=row_number, raw_cells=raw_cells)


def parse_meal_spreadsheet(file_bytes: bytes, filename: str) -> list[RawImportRow]:
    """Return the data rows of the first sheet keyed by canonical field.

    Raises :class:`SpreadsheetFormatError` when the file cannot be read, has
    no data rows or lacks a required column. Blank cells leave the field
    unset; numeric cells that do not parse become ``nan`` for the validator
    to report.
    """

    suffix = _file_suffix(filename)
    if not file_bytes:
        raise SpreadsheetFormatError("The uploaded file is empty")

    grid = [[_cell_to_text(value) for value in row] for row in _read_grid(file_bytes, suffix)]
    if len(grid) < 2:
        raise SpreadsheetFormatError(
            "The spreadsheet must contain a header row and at least one meal"
        )

    columns = _map_headers(grid[0])

    rows: list[RawImportRow] = []
    for offset, cells in enumerate(grid[1:], start=2):
        if not cells or all(_is_blank(cell) for cell in cells) or _is_blank(cells[0]):
            continue
        rows.append(_build_row(cells, columns, offset))

    if not rows:
        raise SpreadsheetFormatError("The spreadsheet does not contain any meals")

    logger.info(
        "Parsed %s meal rows from %s (%s recognised columns)",
        len(rows),
        filename,
        len(columns),
    )
    return rows


__all__ = ["SUPPORTED_EXTENSIONS", "parse_meal_spreadsheet"]
