"""Nutrition domain models."""

from dataclasses import asdict, dataclass, fields
from typing import Literal

from nutrition_goals.domain.errors import InvalidRecordError

NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",
    "protein_g",
    "carbs_g",
    "fat_g",
    "fiber_g",
    "total_sugars_g",
    "added_sugars_g",
    "trans_fat_g",
    "saturated_fat_g",
    "polyunsaturated_fat_g",
    "monounsaturated_fat_g",
    "cholesterol_mg",
    "sodium_mg",
    "potassium_mg",
    "calcium_mg",
    "iron_mg",
    "vitamin_a_mcg",
    "vitamin_c_mg",
    "vitamin_d_mcg",
)


@dataclass(frozen=True)
class Nutrients:
    """Nutrient amounts for a food, a portion, or a day."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    total_sugars_g: float = 0.0
    added_sugars_g: float = 0.0
    trans_fat_g: float = 0.0
    saturated_fat_g: float = 0.0
    polyunsaturated_fat_g: float = 0.0
    monounsaturated_fat_g: float = 0.0
    cholesterol_mg: float = 0.0
    sodium_mg: float = 0.0
    potassium_mg: float = 0.0
    calcium_mg: float = 0.0
    iron_mg: float = 0.0
    vitamin_a_mcg: float = 0.0
    vitamin_c_mg: float = 0.0
    vitamin_d_mcg: float = 0.0

    def scaled(self, factor: float) -> "Nutrients":
        """Return every nutrient multiplied by a factor."""
        return Nutrients(
            **{field.name: getattr(self, field.name) * factor for field in fields(self)}
        )

    def as_dict(self) -> dict[str, float]:
        """Return nutrients keyed by field name."""
        return asdict(self)

    @classmethod
    def from_mapping(cls, row: dict[str, object]) -> "Nutrients":
        """Build nutrients from a row, treating missing values as zero."""
        return cls(**{name: float(row.get(name) or 0.0) for name in NUTRIENT_FIELDS})


@dataclass(frozen=True)
class FoodItem:
    """Food with nutrients normalized to one gram."""

    name: str
    nutrients: Nutrients
    serving_size_g: float | None = None
    serving_text: str | None = None
    kind: Literal["food"] = "food"


@dataclass(frozen=True)
class Recipe:
    """Recipe with nutrients totalled for one full batch."""

    name: str
    nutrients: Nutrients
    servings_per_batch: float
    kind: Literal["recipe"] = "recipe"

    def __post_init__(self) -> None:
        if self.servings_per_batch <= 0:
            raise InvalidRecordError(
                f"Recipe {self.name!r} must have a positive servings per batch"
            )


NutrientRecord = FoodItem | Recipe


@dataclass(frozen=True)
class ScaledPortion:
    """Nutrient contribution of a logged quantity."""

    nutrients: Nutrients
    amount: float
    amount_unit: Literal["g", "serving"]
    unit_label: str
