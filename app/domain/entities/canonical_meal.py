"""Domain entities describing a meal ready to be submitted to the catalogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

COST_MODEL_VERSION = "ingredients-v2"


class ComplexityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class MealPricing:
    """Raw cost inputs of a meal together with every derived figure."""

    ingredients: Decimal
    cooking_costs: Decimal
    packaging: Decimal
    delivery: Decimal
    platform_fee: Decimal
    total_costs: Decimal
    profit: Decimal
    total_price: Decimal
    chef_earnings: Decimal
    platform_earnings: Decimal

    def to_payload(self) -> dict[str, float]:
        return {
            "ingredients": float(self.ingredients),
            "cookingCosts": float(self.cooking_costs),
            "packaging": float(self.packaging),
            "delivery": float(self.delivery),
            "platformFee": float(self.platform_fee),
            "totalCosts": float(self.total_costs),
            "profit": float(self.profit),
            "totalPrice": float(self.total_price),
            "chefEarnings": float(self.chef_earnings),
            "platformEarnings": float(self.platform_earnings),
        }


@dataclass(frozen=True)
class MealNutrition:
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0
    weight: float = 0

    def to_payload(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "fiber": self.fiber,
            "sugar": self.sugar,
            "weight": self.weight,
        }


@dataclass(frozen=True)
class CanonicalMealRecord:
    """Submission-ready meal produced from one validated spreadsheet row.

    ``client_ref`` is a correlation identifier sent along with the record so
    the catalogue can echo it back for every created or rejected item.
    """

    client_ref: str
    row_number: int
    name: str
    description: str
    pricing: MealPricing
    nutrition: MealNutrition
    category: str
    ingredients: str
    preparation_time: float
    complexity_level: ComplexityLevel
    allergens: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    is_available: bool = True
    admin_notes: str = ""
    chef_notes: str = ""
    image: str = ""
    cost_model_version: str = field(default=COST_MODEL_VERSION)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent to the bulk-create endpoint.

        ``basePrice``, ``chefFee`` and ``platformFee`` mirror the pricing
        sub-record for catalogue versions that still read the flat fields.
        """

        return {
            "clientRef": self.client_ref,
            "name": self.name,
            "description": self.description,
            "pricing": self.pricing.to_payload(),
            "nutrition": self.nutrition.to_payload(),
            "category": self.category,
            "ingredients": self.ingredients,
            "preparationTime": self.preparation_time,
            "complexityLevel": self.complexity_level.value,
            "allergens": list(self.allergens),
            "tags": list(self.tags),
            "isAvailable": self.is_available,
            "adminNotes": self.admin_notes,
            "chefNotes": self.chef_notes,
            "image": self.image,
            "costModelVersion": self.cost_model_version,
            "basePrice": float(self.pricing.total_costs),
            "chefFee": float(self.pricing.chef_earnings),
            "platformFee": float(self.pricing.platform_fee),
        }


__all__ = [
    "COST_MODEL_VERSION",
    "CanonicalMealRecord",
    "ComplexityLevel",
    "MealNutrition",
    "MealPricing",
]
