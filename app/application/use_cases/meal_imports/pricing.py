"""Turn validated rows into submission-ready meals with computed pricing."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Sequence

from app.config import Settings, get_settings
from app.domain.entities import (
    DEFAULT_MEAL_CATEGORY,
    TRUTHY_AVAILABILITY_TOKENS,
    CanonicalMealRecord,
    ComplexityLevel,
    ImportField,
    MealNutrition,
    MealPricing,
    RawImportRow,
)

_KOBO = Decimal("0.01")
_NAIRA = Decimal("1")
_MINUTES_PER_HOUR = Decimal(60)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _money(value: Decimal) -> Decimal:
    return value.quantize(_KOBO, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CostModel:
    """Constants of the ingredients based cost model."""

    gas_cost_per_hour: Decimal = Decimal("500")
    labour_cost_per_hour: Decimal = Decimal("1000")
    utensil_costs: Mapping[ComplexityLevel, Decimal] | None = None
    complexity_multipliers: Mapping[ComplexityLevel, Decimal] | None = None
    profit_rate: Decimal = Decimal("0.40")
    chef_profit_share: Decimal = Decimal("0.50")

    def __post_init__(self) -> None:
        if self.utensil_costs is None:
            object.__setattr__(
                self,
                "utensil_costs",
                {
                    ComplexityLevel.LOW: Decimal("100"),
                    ComplexityLevel.MEDIUM: Decimal("200"),
                    ComplexityLevel.HIGH: Decimal("300"),
                },
            )
        if self.complexity_multipliers is None:
            object.__setattr__(
                self,
                "complexity_multipliers",
                {
                    ComplexityLevel.LOW: Decimal("0.8"),
                    ComplexityLevel.MEDIUM: Decimal("1.0"),
                    ComplexityLevel.HIGH: Decimal("1.2"),
                },
            )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CostModel":
        settings = settings or get_settings()
        return cls(
            gas_cost_per_hour=_to_decimal(settings.gas_cost_per_hour),
            labour_cost_per_hour=_to_decimal(settings.labour_cost_per_hour),
            utensil_costs={
                level: _to_decimal(settings.utensil_costs[level.value])
                for level in ComplexityLevel
            },
            complexity_multipliers={
                level: _to_decimal(settings.complexity_multipliers[level.value])
                for level in ComplexityLevel
            },
            profit_rate=_to_decimal(settings.profit_rate),
            chef_profit_share=_to_decimal(settings.chef_profit_share),
        )


DEFAULT_COST_MODEL = CostModel()


def derive_complexity(prep_minutes: float | None) -> ComplexityLevel:
    """Classify a meal by preparation time: up to 30 low, up to 60 medium."""

    minutes = prep_minutes or 0
    if minutes <= 30:
        return ComplexityLevel.LOW
    if minutes <= 60:
        return ComplexityLevel.MEDIUM
    return ComplexityLevel.HIGH


def compute_cooking_cost(
    prep_minutes: float | None,
    level: ComplexityLevel,
    model: CostModel = DEFAULT_COST_MODEL,
) -> Decimal:
    """Return the whole-naira cost of gas, labour and utensils for one meal."""

    if prep_minutes is None or prep_minutes <= 0:
        return Decimal("0")
    hours = _to_decimal(prep_minutes) / _MINUTES_PER_HOUR
    hourly = model.gas_cost_per_hour + model.labour_cost_per_hour
    raw = (hourly * hours + model.utensil_costs[level]) * model.complexity_multipliers[level]
    return raw.quantize(_NAIRA, rounding=ROUND_HALF_UP)


def compute_pricing(
    *,
    ingredients: Any,
    packaging: Any,
    delivery: Any,
    platform_fee: Any,
    cooking_costs: Decimal,
    model: CostModel = DEFAULT_COST_MODEL,
) -> MealPricing:
    """Derive totals and the chef/platform split from the raw cost inputs.

    ``chef_earnings + platform_earnings`` always equals ``total_price``: the
    platform share of the profit is whatever the chef share leaves over.
    """

    ingredients = _money(_to_decimal(ingredients))
    packaging = _money(_to_decimal(packaging))
    delivery = _money(_to_decimal(delivery))
    platform_fee = _money(_to_decimal(platform_fee))
    cooking_costs = _money(cooking_costs)

    total_costs = ingredients + cooking_costs + packaging + delivery
    profit = _money(total_costs * model.profit_rate)
    total_price = total_costs + profit + platform_fee
    chef_profit = _money(profit * model.chef_profit_share)
    platform_profit = profit - chef_profit

    return MealPricing(
        ingredients=ingredients,
        cooking_costs=cooking_costs,
        packaging=packaging,
        delivery=delivery,
        platform_fee=platform_fee,
        total_costs=total_costs,
        profit=profit,
        total_price=total_price,
        chef_earnings=ingredients + cooking_costs + chef_profit,
        platform_earnings=packaging + delivery + platform_fee + platform_profit,
    )


def split_list(value: Any) -> list[str]:
    """Split a comma separated cell, trimming items and dropping empty ones."""

    if value is None:
        return []
    return [item.strip() for item in str(value).split(",") if item.strip()]


def _number(row: RawImportRow, import_field: ImportField) -> int | float:
    value = row.get(import_field)
    if value is None:
        return 0
    number = float(value)
    return int(number) if number.is_integer() else number


def _text(row: RawImportRow, import_field: ImportField) -> str:
    value = row.get(import_field)
    return str(value).strip() if value is not None else ""


def _complexity(row: RawImportRow, prep_minutes: float) -> ComplexityLevel:
    explicit = _text(row, ImportField.COMPLEXITY_LEVEL).lower()
    if explicit:
        return ComplexityLevel(explicit)
    return derive_complexity(prep_minutes)


def _is_available(row: RawImportRow) -> bool:
    if not row.has(ImportField.IS_AVAILABLE):
        return True
    return str(row.get(ImportField.IS_AVAILABLE)) in TRUTHY_AVAILABILITY_TOKENS


def transform_meal_row(
    row: RawImportRow, row_number: int, cost_model: CostModel = DEFAULT_COST_MODEL
) -> CanonicalMealRecord:
    prep_minutes = _number(row, ImportField.PREPARATION_TIME)
    level = _complexity(row, prep_minutes)
    pricing = compute_pricing(
        ingredients=_number(row, ImportField.INGREDIENTS_COST),
        packaging=_number(row, ImportField.PACKAGING),
        delivery=_number(row, ImportField.DELIVERY),
        platform_fee=_number(row, ImportField.PLATFORM_FEE),
        cooking_costs=compute_cooking_cost(prep_minutes, level, cost_model),
        model=cost_model,
    )
    nutrition = MealNutrition(
        calories=_number(row, ImportField.CALORIES),
        protein=_number(row, ImportField.PROTEIN),
        carbs=_number(row, ImportField.CARBS),
        fat=_number(row, ImportField.FAT),
        fiber=_number(row, ImportField.FIBER),
        sugar=_number(row, ImportField.SUGAR),
        weight=_number(row, ImportField.WEIGHT),
    )
    return CanonicalMealRecord(
        client_ref=f"row-{row_number}",
        row_number=row_number,
        name=_text(row, ImportField.NAME),
        description=_text(row, ImportField.DESCRIPTION),
        pricing=pricing,
        nutrition=nutrition,
        category=_text(row, ImportField.CATEGORY) or DEFAULT_MEAL_CATEGORY,
        ingredients=_text(row, ImportField.INGREDIENTS),
        preparation_time=prep_minutes,
        complexity_level=level,
        allergens=tuple(split_list(row.get(ImportField.ALLERGENS))),
        tags=tuple(split_list(row.get(ImportField.TAGS))),
        is_available=_is_available(row),
        admin_notes=_text(row, ImportField.ADMIN_NOTES),
        chef_notes=_text(row, ImportField.CHEF_NOTES),
        image=_text(row, ImportField.IMAGE),
    )


def transform_meal_rows(
    rows: Sequence[RawImportRow],
    cost_model: CostModel = DEFAULT_COST_MODEL,
    *,
    start_row: int = 2,
) -> list[CanonicalMealRecord]:
    """Map validated rows to canonical records, one per row and in order."""

    return [
        transform_meal_row(
            row,
            row.row_number if row.row_number is not None else start_row + index,
            cost_model,
        )
        for index, row in enumerate(rows)
    ]


__all__ = [
    "CostModel",
    "DEFAULT_COST_MODEL",
    "compute_cooking_cost",
    "compute_pricing",
    "derive_complexity",
    "split_list",
    "transform_meal_row",
    "transform_meal_rows",
]
