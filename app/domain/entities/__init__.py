"""Domain entities exposed by the application."""

from .canonical_meal import (
    COST_MODEL_VERSION,
    CanonicalMealRecord,
    ComplexityLevel,
    MealNutrition,
    MealPricing,
)
from .import_field import (
    AVAILABILITY_TOKENS,
    DEFAULT_MEAL_CATEGORY,
    HEADER_TO_FIELD,
    MEAL_CATEGORIES,
    NUTRITION_FIELDS,
    TRUTHY_AVAILABILITY_TOKENS,
    ImportField,
)
from .import_run import (
    IMPORT_STATUS_CANCELLED,
    IMPORT_STATUS_COMPLETED,
    IMPORT_STATUS_COMPLETED_WITH_ERRORS,
    IMPORT_STATUS_FAILED,
    IMPORT_STATUS_PENDING_REVIEW,
    IMPORT_STATUS_REJECTED,
    ImportRun,
)
from .meal_import import (
    GENERAL_ERROR_FIELD,
    RawImportRow,
    UploadResult,
    ValidationError,
)
from .pipeline_state import PipelineState

__all__ = [
    "AVAILABILITY_TOKENS",
    "COST_MODEL_VERSION",
    "CanonicalMealRecord",
    "ComplexityLevel",
    "DEFAULT_MEAL_CATEGORY",
    "GENERAL_ERROR_FIELD",
    "HEADER_TO_FIELD",
    "IMPORT_STATUS_CANCELLED",
    "IMPORT_STATUS_COMPLETED",
    "IMPORT_STATUS_COMPLETED_WITH_ERRORS",
    "IMPORT_STATUS_FAILED",
    "IMPORT_STATUS_PENDING_REVIEW",
    "IMPORT_STATUS_REJECTED",
    "ImportField",
    "ImportRun",
    "MEAL_CATEGORIES",
    "MealNutrition",
    "MealPricing",
    "NUTRITION_FIELDS",
    "PipelineState",
    "RawImportRow",
    "TRUTHY_AVAILABILITY_TOKENS",
    "UploadResult",
    "ValidationError",
]
