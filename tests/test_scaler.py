"""Tests for unit normalization and nutrient scaling."""

import pytest

from nutrition_goals.domain.errors import InvalidRecordError, UnsupportedUnitError
from nutrition_goals.domain.nutrition import FoodItem, Nutrients, Recipe
from nutrition_goals.services.scaler import (
    Unit,
    parse_unit,
    resolve_amount,
    scale_nutrients,
    unit_label,
)

OATS = FoodItem(
    name="Rolled oats",
    nutrients=Nutrients(calories=3.8, protein_g=0.13, fiber_g=0.1),
    serving_size_g=40,
    serving_text="1/2 cup",
)
CHILI = Recipe(
    name="Chili",
    nutrients=Nutrients(calories=2400, protein_g=160, sodium_mg=3200),
    servings_per_batch=8,
)


def test_food_scaled_by_grams() -> None:
    portion = scale_nutrients(OATS, 50, "g")

    assert portion.amount == 50
    assert portion.amount_unit == "g"
    assert portion.nutrients.calories == pytest.approx(190)
    assert portion.nutrients.fiber_g == pytest.approx(5)


def test_food_scaled_by_ounces() -> None:
    portion = scale_nutrients(OATS, 2, "oz")

    assert portion.amount == pytest.approx(56.699)
    assert portion.nutrients.calories == pytest.approx(56.699 * 3.8)


def test_food_scaled_by_servings() -> None:
    portion = scale_nutrients(OATS, 1.5, "servings")

    assert portion.amount == pytest.approx(60)
    assert portion.nutrients.protein_g == pytest.approx(7.8)
    assert portion.unit_label == "servings"


def test_food_serving_without_size_resolves_to_zero() -> None:
    food = FoodItem(name="Mystery", nutrients=Nutrients(calories=5))

    portion = scale_nutrients(food, 2, "serving")

    assert portion.amount == 0
    assert portion.nutrients == Nutrients()


def test_recipe_scaled_by_servings() -> None:
    portion = scale_nutrients(CHILI, 2, "serving")

    assert portion.amount == 2
    assert portion.amount_unit == "serving"
    assert portion.nutrients.calories == pytest.approx(600)
    assert portion.nutrients.sodium_mg == pytest.approx(800)


def test_recipe_scaled_by_batches() -> None:
    portion = scale_nutrients(CHILI, 1, "batch")

    assert portion.amount == 8
    assert portion.nutrients.calories == pytest.approx(2400)
    assert portion.unit_label == "batch"


def test_half_batch_matches_equivalent_servings() -> None:
    by_batch = scale_nutrients(CHILI, 0.5, "batches")
    by_serving = scale_nutrients(CHILI, 4, "servings")

    assert by_batch.nutrients.calories == pytest.approx(by_serving.nutrients.calories)


def test_scaling_is_linear_in_quantity() -> None:
    single = scale_nutrients(OATS, 30, Unit.GRAM)
    double = scale_nutrients(OATS, 60, Unit.GRAM)

    assert double.nutrients.calories == pytest.approx(single.nutrients.calories * 2)


def test_zero_quantity_gives_zero_nutrients() -> None:
    portion = scale_nutrients(CHILI, 0, "servings")

    assert portion.nutrients.calories == 0


@pytest.mark.parametrize(
    ("record", "unit"),
    [(CHILI, "g"), (CHILI, "oz"), (OATS, "batch")],
)
def test_unit_not_valid_for_record(record: object, unit: str) -> None:
    with pytest.raises(UnsupportedUnitError):
        scale_nutrients(record, 1, unit)


def test_unknown_unit_is_rejected() -> None:
    with pytest.raises(UnsupportedUnitError):
        parse_unit("cup")


def test_parse_unit_accepts_aliases() -> None:
    assert parse_unit("Servings") is Unit.SERVING
    assert parse_unit(" oz. ") is Unit.OUNCE
    assert parse_unit("grams") is Unit.GRAM


def test_unit_label_pluralizes() -> None:
    assert unit_label(Unit.SERVING, 1) == "serving"
    assert unit_label(Unit.SERVING, 0) == "servings"
    assert unit_label(Unit.BATCH, 2) == "batches"
    assert unit_label(Unit.GRAM, 100) == "g"


def test_resolve_amount_for_recipe_batches() -> None:
    assert resolve_amount(CHILI, 2, Unit.BATCH) == 16


def test_recipe_requires_positive_servings() -> None:
    with pytest.raises(InvalidRecordError):
        Recipe(name="Empty", nutrients=Nutrients(), servings_per_batch=0)


def test_reference_food_and_recipe_scaling() -> None:
    food = FoodItem(name="Sample", nutrients=Nutrients(calories=2))
    recipe = Recipe(
        name="Stew", nutrients=Nutrients(calories=800), servings_per_batch=4
    )

    assert scale_nutrients(food, 100, "g").nutrients.calories == pytest.approx(200)
    assert scale_nutrients(food, 1, "oz").nutrients.calories == pytest.approx(56.699)
    assert scale_nutrients(recipe, 1, "serving").nutrients.calories == pytest.approx(200)
    assert scale_nutrients(recipe, 1, "batch").nutrients.calories == pytest.approx(800)
