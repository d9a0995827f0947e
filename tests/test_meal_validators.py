import math
import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from app.application.use_cases.meal_imports import validate_meal_rows
from app.domain.entities import ImportField, RawImportRow


def test_valid_row_has_no_errors(row_factory) -> None:
    assert validate_meal_rows([row_factory()]) == []


def test_blank_meal_name_is_reported(row_factory) -> None:
    errors = validate_meal_rows([row_factory(name="   ", description="Rice")])

    assert len(errors) == 1
    assert errors[0].row == 2
    assert errors[0].field == "Meal Name"
    assert errors[0].message == "Meal name is required"


def test_every_problem_of_a_row_is_reported(row_factory) -> None:
    row = row_factory(
        name=None,
        ingredientsCost=0.0,
        packaging=-1.0,
        delivery=None,
        platformFee=math.nan,
        category="Brunch",
        calories=-5.0,
        preparationTime=0.0,
        complexityLevel="extreme",
        isAvailable="yes",
        image="not a url",
    )

    fields = [error.field for error in validate_meal_rows([row])]

    assert fields == [
        "Meal Name",
        "Ingredients (₦)",
        "Packaging (₦)",
        "Delivery (₦)",
        "Platform Fee (₦)",
        "Category",
        "Calories",
        "Preparation Time (mins)",
        "Complexity Level",
        "Available",
        "Image URL",
    ]


def test_errors_from_several_rows_are_all_returned(row_factory) -> None:
    rows = [
        row_factory(row_number=2),
        row_factory(row_number=3, category="Brunch"),
        row_factory(row_number=4),
        row_factory(row_number=5, ingredientsCost=None, platformFee=-20.0),
    ]

    errors = validate_meal_rows(rows)

    assert [(error.row, error.field) for error in errors] == [
        (3, "Category"),
        (5, "Ingredients (₦)"),
        (5, "Platform Fee (₦)"),
    ]
    assert errors[0].message == (
        "Category must be one of: Breakfast, Lunch, Dinner, Snack, Dessert, Beverage"
    )
    assert errors[0].value == "Brunch"


def test_rows_without_recorded_numbers_use_start_row(row_factory) -> None:
    rows = [row_factory(row_number=None), row_factory(row_number=None, name=None)]

    errors = validate_meal_rows(rows, start_row=10)

    assert [error.row for error in errors] == [11]


def test_zero_fees_are_accepted(row_factory) -> None:
    row = row_factory(packaging=0.0, delivery=0.0, platformFee=0.0)

    assert validate_meal_rows([row]) == []


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
def test_non_finite_numbers_are_rejected(row_factory, value: float) -> None:
    errors = validate_meal_rows([row_factory(ingredientsCost=value)])

    assert [error.field for error in errors] == ["Ingredients (₦)"]


def test_invalid_number_reports_the_cell_text() -> None:
    row = RawImportRow(
        values={
            ImportField.NAME: "Suya",
            ImportField.INGREDIENTS_COST: math.nan,
            ImportField.PACKAGING: 100.0,
            ImportField.DELIVERY: 300.0,
            ImportField.PLATFORM_FEE: 100.0,
        },
        row_number=7,
        raw_cells={ImportField.INGREDIENTS_COST: "two thousand"},
    )

    errors = validate_meal_rows([row])

    assert errors[0].row == 7
    assert errors[0].value == "two thousand"


@pytest.mark.parametrize("token", ["TRUE", "FALSE", "true", "false", "1", "0"])
def test_availability_tokens_are_accepted(row_factory, token: str) -> None:
    assert validate_meal_rows([row_factory(isAvailable=token)]) == []


@pytest.mark.parametrize("level", ["low", "Medium", " HIGH "])
def test_complexity_level_is_case_insensitive(row_factory, level: str) -> None:
    assert validate_meal_rows([row_factory(complexityLevel=level)]) == []


@pytest.mark.parametrize(
    "url, valid",
    [
        ("https://example.com/images/jollof.jpg", True),
        ("http://cdn.example.com/a.png", True),
        ("example.com/a.png", False),
        ("ftp://example.com/a.png", False),
        ("https://", False),
        ("https://exa mple.com/a b.jpg", False),
        ("https://example.com/a b.jpg", False),
        ("https://exa<mple.com/a.jpg", False),
        ("http://", False),
        ("  https://example.com/padded.jpg  ", True),
    ],
)
def test_image_url_must_be_absolute_http(row_factory, url: str, valid: bool) -> None:
    errors = validate_meal_rows([row_factory(image=url)])

    assert (errors == []) is valid


def test_yes_is_not_an_availability_token(row_factory) -> None:
    errors = validate_meal_rows([row_factory(isAvailable="yes")])

    assert len(errors) == 1
    assert errors[0].field == "Available"
    assert errors[0].value == "yes"
