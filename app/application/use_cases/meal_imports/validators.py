"""Row level validation of parsed meal spreadsheets."""

from __future__ import annotations

import math
from typing import Any, Callable, Sequence

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.domain.entities import (
    AVAILABILITY_TOKENS,
    MEAL_CATEGORIES,
    NUTRITION_FIELDS,
    ComplexityLevel,
    ImportField,
    RawImportRow,
    ValidationError,
)

_FEE_LABELS: dict[ImportField, str] = {
    ImportField.PACKAGING: "packaging cost",
    ImportField.DELIVERY: "delivery cost",
    ImportField.PLATFORM_FEE: "platform fee",
}

_NUTRITION_LABELS: dict[ImportField, str] = {
    ImportField.CALORIES: "Calories",
    ImportField.PROTEIN: "Protein",
    ImportField.CARBS: "Carbs",
    ImportField.FAT: "Fat",
    ImportField.FIBER: "Fiber",
    ImportField.SUGAR: "Sugar",
    ImportField.WEIGHT: "Weight",
}

_COMPLEXITY_VALUES = tuple(level.value for level in ComplexityLevel)


def _as_finite(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


_HTTP_URL = TypeAdapter(HttpUrl)


def _is_http_url(value: str) -> bool:
    candidate = value.strip()
    # HttpUrl percent-encodes spaces in the path instead of rejecting them.
    if any(char.isspace() for char in candidate):
        return False
    try:
        _HTTP_URL.validate_python(candidate)
    except PydanticValidationError:
        return False
    return True


class _RowChecker:
    """Collect every problem of one row without stopping at the first."""

    def __init__(self, row: RawImportRow, row_number: int) -> None:
        self.row = row
        self.row_number = row_number
        self.errors: list[ValidationError] = []

    def fail(self, import_field: ImportField, message: str) -> None:
        self.errors.append(
            ValidationError(
                row=self.row_number,
                field=import_field.header,
                message=message,
                value=self.row.raw(import_field),
            )
        )

    def require_number(
        self,
        import_field: ImportField,
        accept: Callable[[float], bool],
        message: str,
    ) -> None:
        number = _as_finite(self.row.get(import_field))
        if number is None or not accept(number):
            self.fail(import_field, message)

    def optional_number(
        self,
        import_field: ImportField,
        accept: Callable[[float], bool],
        message: str,
    ) -> None:
        if self.row.has(import_field):
            self.require_number(import_field, accept, message)


def _check_row(row: RawImportRow, row_number: int) -> list[ValidationError]:
    check = _RowChecker(row, row_number)

    name = row.get(ImportField.NAME)
    if not isinstance(name, str) or not name.strip():
        check.fail(ImportField.NAME, "Meal name is required")

    check.require_number(
        ImportField.INGREDIENTS_COST,
        lambda number: number > 0,
        "Valid ingredients cost is required (must be > 0)",
    )
    for import_field, label in _FEE_LABELS.items():
        check.require_number(
            import_field,
            lambda number: number >= 0,
            f"Valid {label} is required (must be >= 0)",
        )

    if row.has(ImportField.CATEGORY) and row.get(ImportField.CATEGORY) not in MEAL_CATEGORIES:
        check.fail(
            ImportField.CATEGORY,
            "Category must be one of: " + ", ".join(MEAL_CATEGORIES),
        )

    for import_field in NUTRITION_FIELDS:
        check.optional_number(
            import_field,
            lambda number: number >= 0,
            f"{_NUTRITION_LABELS[import_field]} must be a non-negative number",
        )

    check.optional_number(
        ImportField.PREPARATION_TIME,
        lambda number: number > 0,
        "Preparation time must be a positive number",
    )

    if row.has(ImportField.COMPLEXITY_LEVEL):
        level = str(row.get(ImportField.COMPLEXITY_LEVEL)).strip().lower()
        if level not in _COMPLEXITY_VALUES:
            check.fail(
                ImportField.COMPLEXITY_LEVEL,
                "Complexity level must be one of: " + ", ".join(_COMPLEXITY_VALUES),
            )

    if row.has(ImportField.IS_AVAILABLE):
        if str(row.get(ImportField.IS_AVAILABLE)) not in AVAILABILITY_TOKENS:
            check.fail(
                ImportField.IS_AVAILABLE,
                "Available must be one of: " + ", ".join(AVAILABILITY_TOKENS),
            )

    image = row.get(ImportField.IMAGE)
    if isinstance(image, str) and image.strip() and not _is_http_url(image):
        check.fail(ImportField.IMAGE, "Invalid URL format")

    return check.errors


def validate_meal_rows(
    rows: Sequence[RawImportRow], start_row: int = 2
) -> list[ValidationError]:
    """Return every problem found in ``rows``; an empty list means the batch is clean.

    Each error is attributed to the sheet row it came from. Rows without a
    recorded ``row_number`` are numbered from ``start_row`` by position.
    """

    errors: list[ValidationError] = []
    for index, row in enumerate(rows):
        row_number = row.row_number if row.row_number is not None else start_row + index
        errors.extend(_check_row(row, row_number))
    return errors


__all__ = ["validate_meal_rows"]
