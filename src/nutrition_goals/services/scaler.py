"""Unit normalization and nutrient scaling for logged portions."""

import logging
from enum import Enum

from nutrition_goals.domain.errors import UnsupportedUnitError
from nutrition_goals.domain.nutrition import (
    FoodItem,
    NutrientRecord,
    Recipe,
    ScaledPortion,
)

GRAMS_PER_OUNCE = 28.3495

_logger = logging.getLogger(__name__)


class Unit(str, Enum):
    GRAM = "g"
    OUNCE = "oz"
    SERVING = "serving"
    BATCH = "batch"


_UNIT_ALIASES = {
    "g": Unit.GRAM,
    "gram": Unit.GRAM,
    "grams": Unit.GRAM,
    "oz": Unit.OUNCE,
    "oz.": Unit.OUNCE,
    "serving": Unit.SERVING,
    "servings": Unit.SERVING,
    "batch": Unit.BATCH,
    "batches": Unit.BATCH,
}

_PLURALS = {Unit.SERVING: "servings", Unit.BATCH: "batches"}


def parse_unit(raw: str | Unit) -> Unit:
    """Parse a unit label, accepting singular and plural forms."""
    if isinstance(raw, Unit):
        return raw
    unit = _UNIT_ALIASES.get(raw.strip().lower())
    if unit is None:
        raise UnsupportedUnitError(f"Unknown unit: {raw!r}")
    return unit


def unit_label(unit: Unit, quantity: float) -> str:
    """Return the display label for a unit, pluralized by quantity."""
    if quantity != 1 and unit in _PLURALS:
        return _PLURALS[unit]
    return unit.value


def resolve_amount(record: NutrientRecord, quantity: float, unit: Unit) -> float:
    """Return grams for a food or servings for a recipe."""
    if isinstance(record, FoodItem):
        return _food_grams(record, quantity, unit)
    if isinstance(record, Recipe):
        return _recipe_servings(record, quantity, unit)
    raise TypeError(f"Unsupported nutrient record: {type(record).__name__}")


def scale_nutrients(
    record: NutrientRecord, quantity: float, unit: str | Unit
) -> ScaledPortion:
    """Scale a record's nutrients to the logged quantity."""
    resolved_unit = parse_unit(unit)
    amount = resolve_amount(record, quantity, resolved_unit)
    if isinstance(record, FoodItem):
        nutrients = record.nutrients.scaled(amount)
        amount_unit = "g"
    else:
        nutrients = record.nutrients.scaled(amount / record.servings_per_batch)
        amount_unit = "serving"
    return ScaledPortion(
        nutrients=nutrients,
        amount=amount,
        amount_unit=amount_unit,
        unit_label=unit_label(resolved_unit, quantity),
    )


def _food_grams(record: FoodItem, quantity: float, unit: Unit) -> float:
    if unit is Unit.GRAM:
        return quantity
    if unit is Unit.OUNCE:
        return quantity * GRAMS_PER_OUNCE
    if unit is Unit.SERVING:
        if not record.serving_size_g:
            # TODO: confirm with product whether this should reject the entry
            # instead of logging an empty portion.
            _logger.warning(
                "Serving size missing for %s; portion resolves to 0 g", record.name
            )
            return 0.0
        return quantity * record.serving_size_g
    raise UnsupportedUnitError(f"Unit {unit.value!r} is only valid for recipes")


def _recipe_servings(record: Recipe, quantity: float, unit: Unit) -> float:
    if unit is Unit.SERVING:
        return quantity
    if unit is Unit.BATCH:
        return quantity * record.servings_per_batch
    raise UnsupportedUnitError(f"Unit {unit.value!r} is not valid for recipes")
