import pathlib
import sys
from decimal import Decimal

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from app.application.use_cases.meal_imports import (
    CostModel,
    compute_cooking_cost,
    compute_pricing,
    derive_complexity,
    split_list,
    transform_meal_rows,
)
from app.config import Settings
from app.domain.entities import COST_MODEL_VERSION, ComplexityLevel


@pytest.mark.parametrize(
    "minutes, level",
    [
        (0, ComplexityLevel.LOW),
        (30, ComplexityLevel.LOW),
        (31, ComplexityLevel.MEDIUM),
        (60, ComplexityLevel.MEDIUM),
        (61, ComplexityLevel.HIGH),
        (240, ComplexityLevel.HIGH),
    ],
)
def test_complexity_thresholds(minutes: int, level: ComplexityLevel) -> None:
    assert derive_complexity(minutes) is level


@pytest.mark.parametrize(
    "minutes, level, expected",
    [
        (60, ComplexityLevel.MEDIUM, Decimal("1700")),
        (45, ComplexityLevel.MEDIUM, Decimal("1325")),
        (15, ComplexityLevel.LOW, Decimal("380")),
        (90, ComplexityLevel.HIGH, Decimal("3060")),
        (50, ComplexityLevel.MEDIUM, Decimal("1450")),
    ],
)
def test_cooking_cost(minutes: int, level: ComplexityLevel, expected: Decimal) -> None:
    assert compute_cooking_cost(minutes, level) == expected


@pytest.mark.parametrize("minutes", [0, -10, None])
def test_cooking_cost_is_zero_without_preparation_time(minutes) -> None:
    assert compute_cooking_cost(minutes, ComplexityLevel.HIGH) == Decimal("0")


def test_scenario_prep_sixty_minutes(row_factory) -> None:
    record = transform_meal_rows([row_factory()])[0]

    pricing = record.pricing
    assert record.complexity_level is ComplexityLevel.MEDIUM
    assert pricing.cooking_costs == Decimal("1700.00")
    assert pricing.total_costs == Decimal("4150.00")
    assert pricing.profit == Decimal("1660.00")
    assert pricing.total_price == Decimal("6010.00")
    assert pricing.chef_earnings == Decimal("4530.00")
    assert pricing.platform_earnings == Decimal("1480.00")
    assert record.cost_model_version == COST_MODEL_VERSION


def test_earnings_always_add_up_to_total_price() -> None:
    pricing = compute_pricing(
        ingredients=1234.57,
        packaging=99.99,
        delivery=333.33,
        platform_fee=12.34,
        cooking_costs=Decimal("457"),
    )

    assert pricing.profit == Decimal("849.96")
    assert pricing.chef_earnings + pricing.platform_earnings == pricing.total_price
    assert pricing.total_price == pricing.total_costs + pricing.profit + pricing.platform_fee


def test_split_list() -> None:
    assert split_list("a, b ,,c") == ["a", "b", "c"]
    assert split_list("") == []
    assert split_list(None) == []


def test_defaults_for_missing_optional_fields(row_factory) -> None:
    record = transform_meal_rows([row_factory(preparationTime=None)])[0]

    assert record.category == "Lunch"
    assert record.is_available is True
    assert record.allergens == ()
    assert record.tags == ()
    assert record.description == ""
    assert record.nutrition.calories == 0
    assert record.preparation_time == 0
    assert record.pricing.cooking_costs == Decimal("0.00")


def test_optional_fields_are_mapped(row_factory) -> None:
    record = transform_meal_rows(
        [
            row_factory(
                row_number=9,
                name="  Egusi Soup ",
                category="Dinner",
                allergens="Fish, ,Nuts",
                tags="Nigerian,Traditional",
                isAvailable="0",
                calories=780.0,
                complexityLevel="HIGH",
                image=" https://example.com/egusi.jpg ",
            )
        ]
    )[0]

    assert record.client_ref == "row-9"
    assert record.row_number == 9
    assert record.name == "Egusi Soup"
    assert record.category == "Dinner"
    assert record.allergens == ("Fish", "Nuts")
    assert record.tags == ("Nigerian", "Traditional")
    assert record.is_available is False
    assert record.nutrition.calories == 780
    assert record.complexity_level is ComplexityLevel.HIGH
    assert record.pricing.cooking_costs == Decimal("2160.00")
    assert record.image == "https://example.com/egusi.jpg"


def test_transform_is_index_aligned(row_factory) -> None:
    rows = [row_factory(row_number=n, name=f"Meal {n}") for n in (2, 3, 7)]

    records = transform_meal_rows(rows)

    assert [record.name for record in records] == ["Meal 2", "Meal 3", "Meal 7"]
    assert [record.client_ref for record in records] == ["row-2", "row-3", "row-7"]


def test_payload_mirrors_pricing(row_factory) -> None:
    payload = transform_meal_rows([row_factory()])[0].to_payload()

    assert payload["basePrice"] == payload["pricing"]["totalCosts"] == 4150.0
    assert payload["chefFee"] == payload["pricing"]["chefEarnings"] == 4530.0
    assert payload["platformFee"] == payload["pricing"]["platformFee"] == 200.0
    assert payload["clientRef"] == "row-2"
    assert payload["costModelVersion"] == "ingredients-v2"


def test_cost_model_from_settings() -> None:
    settings = Settings(
        gas_cost_per_hour=600,
        labour_cost_per_hour=1400,
        profit_rate=0.5,
    )

    model = CostModel.from_settings(settings)

    assert compute_cooking_cost(60, ComplexityLevel.MEDIUM, model) == Decimal("2200")
    assert model.profit_rate == Decimal("0.5")


def test_settings_require_every_complexity_level() -> None:
    with pytest.raises(ValueError):
        Settings(utensil_costs={"low": 100, "medium": 200})


def test_transform_is_deterministic(row_factory) -> None:
    rows = [row_factory(tags="a, b ,,c", calories=512.5)]

    first = transform_meal_rows(rows)
    second = transform_meal_rows(rows)

    assert first == second
    assert list(first[0].tags) == ["a", "b", "c"]
