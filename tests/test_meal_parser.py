import math
import pathlib
import sys
from io import BytesIO

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from openpyxl import Workbook

from app.application.use_cases.meal_imports import (
    SpreadsheetFormatError,
    parse_meal_spreadsheet,
    validate_meal_rows,
)
from app.domain.entities import ImportField

REQUIRED_HEADERS = "Meal Name,Ingredients (₦),Packaging (₦),Delivery (₦),Platform Fee (₦)"


def _csv(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


def _xlsx(rows) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    for row in rows:
        worksheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_parses_rows_keyed_by_canonical_field() -> None:
    content = _csv(
        REQUIRED_HEADERS + ",Category,Tags",
        "Jollof Rice,2000,150,300,200,Lunch,\"Spicy, Popular\"",
    )

    rows = parse_meal_spreadsheet(content, "meals.csv")

    assert len(rows) == 1
    row = rows[0]
    assert row.row_number == 2
    assert row.get(ImportField.NAME) == "Jollof Rice"
    assert row.get(ImportField.INGREDIENTS_COST) == 2000.0
    assert row.get(ImportField.CATEGORY) == "Lunch"
    assert row.get(ImportField.TAGS) == "Spicy, Popular"


def test_blank_cells_and_missing_optional_headers_leave_fields_unset() -> None:
    content = _csv(REQUIRED_HEADERS + ",Calories", "Fruit Salad,1200,150,400,150,")

    row = parse_meal_spreadsheet(content, "meals.csv")[0]

    assert not row.has(ImportField.CALORIES)
    assert not row.has(ImportField.DESCRIPTION)
    assert not row.has(ImportField.IMAGE)


def test_unparsable_numbers_become_nan_and_keep_cell_text() -> None:
    content = _csv(REQUIRED_HEADERS, "Egusi Soup,abc,150,300,200")

    row = parse_meal_spreadsheet(content, "meals.csv")[0]

    assert math.isnan(row.get(ImportField.INGREDIENTS_COST))
    assert row.raw(ImportField.INGREDIENTS_COST) == "abc"


def test_unknown_headers_are_ignored() -> None:
    content = _csv(REQUIRED_HEADERS + ",Spice Level", "Suya,900,100,300,100,hot")

    row = parse_meal_spreadsheet(content, "meals.csv")[0]

    assert set(row.values) == {
        ImportField.NAME,
        ImportField.INGREDIENTS_COST,
        ImportField.PACKAGING,
        ImportField.DELIVERY,
        ImportField.PLATFORM_FEE,
    }


def test_blank_rows_are_dropped_without_shifting_row_numbers() -> None:
    content = _csv(
        REQUIRED_HEADERS,
        "Jollof Rice,2000,150,300,200",
        ",,,,",
        ",900,100,300,100",
        "Fruit Salad,1200,150,400,150",
    )

    rows = parse_meal_spreadsheet(content, "meals.csv")

    assert [row.get(ImportField.NAME) for row in rows] == ["Jollof Rice", "Fruit Salad"]
    assert [row.row_number for row in rows] == [2, 5]


def test_missing_required_headers_are_all_reported() -> None:
    content = _csv("Meal Name,Ingredients (₦),Category", "Jollof Rice,2000,Lunch")

    with pytest.raises(SpreadsheetFormatError) as excinfo:
        parse_meal_spreadsheet(content, "meals.csv")

    message = str(excinfo.value)
    assert "Packaging (₦)" in message
    assert "Delivery (₦)" in message
    assert "Platform Fee (₦)" in message


def test_header_matching_is_exact() -> None:
    content = _csv(
        "meal name,Ingredients (₦),Packaging (₦),Delivery (₦),Platform Fee (₦)",
        "Jollof Rice,2000,150,300,200",
    )

    with pytest.raises(SpreadsheetFormatError, match="Meal Name"):
        parse_meal_spreadsheet(content, "meals.csv")


@pytest.mark.parametrize(
    "content, filename",
    [
        (b"", "meals.csv"),
        (_csv(REQUIRED_HEADERS), "meals.csv"),
        (_csv(REQUIRED_HEADERS, ",,,,"), "meals.csv"),
        (b"Meal Name\nJollof", "meals.pdf"),
        (b"definitely not a workbook", "meals.xlsx"),
    ],
)
def test_structural_problems_raise(content: bytes, filename: str) -> None:
    with pytest.raises(SpreadsheetFormatError):
        parse_meal_spreadsheet(content, filename)


def test_reads_excel_cells_as_displayed_text() -> None:
    content = _xlsx(
        [
            REQUIRED_HEADERS.split(",") + ["Available", "Preparation Time (mins)"],
            ["Jollof Rice", 2000, 150.0, 300, 200, True, 45],
        ]
    )

    row = parse_meal_spreadsheet(content, "Meals.XLSX")[0]

    assert row.raw(ImportField.IS_AVAILABLE) == "TRUE"
    assert row.get(ImportField.IS_AVAILABLE) == "TRUE"
    assert row.raw(ImportField.PACKAGING) == "150"
    assert row.get(ImportField.PREPARATION_TIME) == 45.0


def test_parsing_is_deterministic() -> None:
    content = _csv(REQUIRED_HEADERS, "Jollof Rice,2000,150,300,200")

    assert parse_meal_spreadsheet(content, "a.csv") == parse_meal_spreadsheet(content, "a.csv")


def test_blank_meal_name_is_reported_on_its_sheet_row() -> None:
    content = _xlsx(
        [
            ["Description"] + REQUIRED_HEADERS.split(","),
            ["Tasty rice", None, 2000, 150, 300, 200],
        ]
    )

    rows = parse_meal_spreadsheet(content, "meals.xlsx")
    errors = validate_meal_rows(rows)

    assert len(errors) == 1
    assert errors[0].row == 2
    assert errors[0].field == "Meal Name"


def test_cells_beyond_the_header_are_ignored() -> None:
    content = _csv(
        REQUIRED_HEADERS,
        "Jollof Rice,2000,150,300,200,",
        "Fruit Salad,1200,150,400,150,extra,cells",
        "Egusi Soup,1800,150,300",
    )

    rows = parse_meal_spreadsheet(content, "meals.csv")

    assert [row.row_number for row in rows] == [2, 3, 4]
    assert [row.get(ImportField.NAME) for row in rows] == [
        "Jollof Rice",
        "Fruit Salad",
        "Egusi Soup",
    ]
    assert rows[1].get(ImportField.PLATFORM_FEE) == 150.0
    assert not rows[2].has(ImportField.PLATFORM_FEE)
