"""Utility helpers for generating spreadsheet workbooks."""

from __future__ import annotations

from io import BytesIO
from typing import Any, Mapping, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.styles import Alignment, Font, PatternFill

EXCEL_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)
_DEFAULT_COLUMN_WIDTH = 12


def _style_header_row(worksheet) -> None:
    header_fill = PatternFill(fill_type="solid", fgColor="4F81BD")
    header_font = Font(color="FFFFFFFF", bold=True)
    header_alignment = Alignment(horizontal="center", vertical="center")
    for cell in worksheet[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment
    worksheet.freeze_panes = "A2"


def create_workbook_bytes(
    sheet_title: str,
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    number_formats: Mapping[str, str] | None = None,
    column_widths: Mapping[str, int] | None = None,
) -> bytes:
    """Return an ``.xlsx`` workbook with ``headers`` followed by ``rows``.

    Values are written with their Python type, so numbers land as numeric
    cells. ``number_formats`` maps a header to the Excel format applied to
    the numeric cells of that column.
    """

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_title

    worksheet.append(list(headers))
    for row in rows:
        worksheet.append(list(row))
    _style_header_row(worksheet)

    formats = number_formats or {}
    widths = column_widths or {}
    for index, header in enumerate(headers, start=1):
        letter = get_column_letter(index)
        worksheet.column_dimensions[letter].width = widths.get(
            header, _DEFAULT_COLUMN_WIDTH
        )
        number_format = formats.get(header)
        if number_format is None:
            continue
        for (cell,) in worksheet.iter_rows(
            min_row=2, max_row=worksheet.max_row, min_col=index, max_col=index
        ):
            if isinstance(cell.value, (int, float)):
                cell.number_format = number_format

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = ["EXCEL_CONTENT_TYPE", "create_workbook_bytes"]
