"""Aggregate application use cases."""

from .meal_imports import (
    build_meal_template,
    cancel_meal_batch,
    confirm_meal_batch,
    upload_meal_spreadsheet,
)

__all__ = [
    "build_meal_template",
    "cancel_meal_batch",
    "confirm_meal_batch",
    "upload_meal_spreadsheet",
]
