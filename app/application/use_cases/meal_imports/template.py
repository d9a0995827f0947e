"""Downloadable spreadsheet template for the bulk meal import."""

from __future__ import annotations

from typing import Any

from app.domain.entities import ImportField
from app.infrastructure.template_files import create_workbook_bytes

TEMPLATE_SHEET_TITLE = "Meals Template"
TEMPLATE_FILENAME = "meals_upload_template.xlsx"

_MONEY_FORMAT = "#,##0"
_QUANTITY_FORMAT = "0"

_COLUMN_WIDTHS: dict[ImportField, int] = {
    ImportField.NAME: 28,
    ImportField.DESCRIPTION: 40,
    ImportField.INGREDIENTS_COST: 15,
    ImportField.PACKAGING: 14,
    ImportField.DELIVERY: 13,
    ImportField.PLATFORM_FEE: 16,
    ImportField.CATEGORY: 12,
    ImportField.INGREDIENTS: 30,
    ImportField.PREPARATION_TIME: 22,
    ImportField.COMPLEXITY_LEVEL: 16,
    ImportField.ALLERGENS: 15,
    ImportField.TAGS: 20,
    ImportField.ADMIN_NOTES: 20,
    ImportField.CHEF_NOTES: 20,
    ImportField.IMAGE: 25,
}

_EXAMPLE_MEALS: tuple[dict[ImportField, Any], ...] = (
    {
        ImportField.NAME: "Jollof Rice with Chicken",
        ImportField.DESCRIPTION: "Smoky party jollof rice served with grilled chicken",
        ImportField.INGREDIENTS_COST: 2500,
        ImportField.PACKAGING: 200,
        ImportField.DELIVERY: 500,
        ImportField.PLATFORM_FEE: 300,
        ImportField.CATEGORY: "Lunch",
        ImportField.CALORIES: 650,
        ImportField.PROTEIN: 35,
        ImportField.CARBS: 80,
        ImportField.FAT: 18,
        ImportField.FIBER: 4,
        ImportField.SUGAR: 6,
        ImportField.WEIGHT: 450,
        ImportField.INGREDIENTS: "Rice, chicken, tomatoes, peppers, onions, spices",
        ImportField.PREPARATION_TIME: 45,
        ImportField.COMPLEXITY_LEVEL: "medium",
        ImportField.ALLERGENS: "",
        ImportField.TAGS: "Nigerian, Spicy, Popular",
        ImportField.IS_AVAILABLE: "TRUE",
        ImportField.ADMIN_NOTES: "Best seller",
        ImportField.CHEF_NOTES: "Use parboiled rice",
        ImportField.IMAGE: "https://example.com/images/jollof-rice.jpg",
    },
    {
        ImportField.NAME: "Egusi Soup with Pounded Yam",
        ImportField.DESCRIPTION: "Melon seed soup with assorted meat and pounded yam",
        ImportField.INGREDIENTS_COST: 3200,
        ImportField.PACKAGING: 250,
        ImportField.DELIVERY: 500,
        ImportField.PLATFORM_FEE: 350,
        ImportField.CATEGORY: "Dinner",
        ImportField.CALORIES: 780,
        ImportField.PROTEIN: 40,
        ImportField.CARBS: 95,
        ImportField.FAT: 28,
        ImportField.FIBER: 7,
        ImportField.SUGAR: 3,
        ImportField.WEIGHT: 600,
        ImportField.INGREDIENTS: "Egusi, yam, beef, stockfish, palm oil, spinach",
        ImportField.PREPARATION_TIME: 90,
        ImportField.COMPLEXITY_LEVEL: "high",
        ImportField.ALLERGENS: "Fish",
        ImportField.TAGS: "Nigerian, Traditional",
        ImportField.IS_AVAILABLE: "TRUE",
        ImportField.ADMIN_NOTES: "",
        ImportField.CHEF_NOTES: "Pound yam to order",
        ImportField.IMAGE: "https://example.com/images/egusi-soup.jpg",
    },
    {
        ImportField.NAME: "Fruit Salad",
        ImportField.DESCRIPTION: "Fresh seasonal fruit with a honey lime dressing",
        ImportField.INGREDIENTS_COST: 1200,
        ImportField.PACKAGING: 150,
        ImportField.DELIVERY: 400,
        ImportField.PLATFORM_FEE: 150,
        ImportField.CATEGORY: "Dessert",
        ImportField.CALORIES: 180,
        ImportField.PROTEIN: 2,
        ImportField.CARBS: 42,
        ImportField.FAT: 1,
        ImportField.FIBER: 5,
        ImportField.SUGAR: 30,
        ImportField.WEIGHT: 300,
        ImportField.INGREDIENTS: "Pineapple, watermelon, pawpaw, banana, honey, lime",
        ImportField.PREPARATION_TIME: 15,
        ImportField.COMPLEXITY_LEVEL: "low",
        ImportField.ALLERGENS: "",
        ImportField.TAGS: "Healthy, Vegan",
        ImportField.IS_AVAILABLE: "FALSE",
        ImportField.ADMIN_NOTES: "Seasonal",
        ImportField.CHEF_NOTES: "",
        ImportField.IMAGE: "",
    },
)


def _number_format(import_field: ImportField) -> str:
    if import_field.header.endswith("(₦)"):
        return _MONEY_FORMAT
    return _QUANTITY_FORMAT


def build_meal_template(example_count: int = 3) -> bytes:
    """Return an ``.xlsx`` template with the canonical headers and sample rows.

    Numeric columns are written as numeric cells so the workbook reads back
    through :func:`parse_meal_spreadsheet` without coercion issues.
    """

    fields = list(ImportField)
    headers = [import_field.header for import_field in fields]
    examples = _EXAMPLE_MEALS[: max(0, example_count)]
    rows = [
        [example.get(import_field) or None for import_field in fields]
        for example in examples
    ]
    number_formats = {
        import_field.header: _number_format(import_field)
        for import_field in fields
        if import_field.numeric
    }
    column_widths = {
        import_field.header: width for import_field, width in _COLUMN_WIDTHS.items()
    }
    return create_workbook_bytes(
        TEMPLATE_SHEET_TITLE,
        headers,
        rows,
        number_formats=number_formats,
        column_widths=column_widths,
    )


__all__ = ["TEMPLATE_FILENAME", "TEMPLATE_SHEET_TITLE", "build_meal_template"]
