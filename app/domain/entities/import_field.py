"""Canonical fields accepted by the bulk meal import spreadsheet."""

from __future__ import annotations

from enum import Enum

MEAL_CATEGORIES: tuple[str, ...] = (
    "Breakfast",
    "Lunch",
    "Dinner",
    "Snack",
    "Dessert",
    "Beverage",
)
DEFAULT_MEAL_CATEGORY = "Lunch"

AVAILABILITY_TOKENS: tuple[str, ...] = ("TRUE", "FALSE", "true", "false", "1", "0")
TRUTHY_AVAILABILITY_TOKENS = frozenset({"TRUE", "true", "1"})


class ImportField(str, Enum):
    """Canonical field key with the exact spreadsheet header it maps from."""

    header: str
    numeric: bool
    required: bool

    def __new__(
        cls, key: str, header: str, numeric: bool = False, required: bool = False
    ) -> "ImportField":
        member = str.__new__(cls, key)
        member._value_ = key
        member.header = header
        member.numeric = numeric
        member.required = required
        return member

    NAME = ("name", "Meal Name", False, True)
    DESCRIPTION = ("description", "Description")
    INGREDIENTS_COST = ("ingredientsCost", "Ingredients (₦)", True, True)
    PACKAGING = ("packaging", "Packaging (₦)", True, True)
    DELIVERY = ("delivery", "Delivery (₦)", True, True)
    PLATFORM_FEE = ("platformFee", "Platform Fee (₦)", True, True)
    CATEGORY = ("category", "Category")
    CALORIES = ("calories", "Calories", True)
    PROTEIN = ("protein", "Protein (g)", True)
    CARBS = ("carbs", "Carbs (g)", True)
    FAT = ("fat", "Fat (g)", True)
    FIBER = ("fiber", "Fiber (g)", True)
    SUGAR = ("sugar", "Sugar (g)", True)
    WEIGHT = ("weight", "Weight (g)", True)
    INGREDIENTS = ("ingredients", "Ingredients")
    PREPARATION_TIME = ("preparationTime", "Preparation Time (mins)", True)
    COMPLEXITY_LEVEL = ("complexityLevel", "Complexity Level")
    ALLERGENS = ("allergens", "Allergens")
    TAGS = ("tags", "Tags")
    IS_AVAILABLE = ("isAvailable", "Available")
    ADMIN_NOTES = ("adminNotes", "Admin Notes")
    CHEF_NOTES = ("chefNotes", "Chef Notes")
    IMAGE = ("image", "Image URL")


HEADER_TO_FIELD: dict[str, ImportField] = {field.header: field for field in ImportField}

NUTRITION_FIELDS: tuple[ImportField, ...] = (
    ImportField.CALORIES,
    ImportField.PROTEIN,
    ImportField.CARBS,
    ImportField.FAT,
    ImportField.FIBER,
    ImportField.SUGAR,
    ImportField.WEIGHT,
)


__all__ = [
    "AVAILABILITY_TOKENS",
    "DEFAULT_MEAL_CATEGORY",
    "HEADER_TO_FIELD",
    "ImportField",
    "MEAL_CATEGORIES",
    "NUTRITION_FIELDS",
    "TRUTHY_AVAILABILITY_TOKENS",
]
