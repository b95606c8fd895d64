"""Pydantic models for API payloads."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from nutrition_goals.domain.biometrics import (
    ActivityLevel,
    BiometricInput,
    PregnancyStatus,
    Sex,
    Trimester,
    WeightGoal,
)
from nutrition_goals.domain.nutrition import FoodItem, Nutrients, Recipe


class BiometricRequest(BaseModel):
    """Biometric form payload."""

    weight_lb: float | None = None
    height_ft: float | None = None
    height_in: float | None = None
    age: int | None = None
    sex: Sex = Sex.MALE
    activity_level: ActivityLevel = ActivityLevel.SEDENTARY
    goal: WeightGoal = WeightGoal.LOSE
    pregnancy_status: PregnancyStatus = PregnancyStatus.NONE
    trimester: Trimester = Trimester.FIRST

    def to_domain(self) -> BiometricInput:
        return BiometricInput(
            weight_lb=self.weight_lb,
            height_ft=self.height_ft,
            height_in=self.height_in,
            age=self.age,
            sex=self.sex,
            activity_level=self.activity_level,
            goal=self.goal,
            pregnancy_status=self.pregnancy_status,
            trimester=self.trimester,
        )


class NutrientsPayload(BaseModel):
    """Nutrient amounts; omitted values count as zero."""

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

    def to_domain(self) -> Nutrients:
        return Nutrients(**self.model_dump())


class FoodPayload(BaseModel):
    """Food record with per-gram nutrients."""

    kind: Literal["food"] = "food"
    name: str
    nutrients: NutrientsPayload
    serving_size_g: float | None = None
    serving_text: str | None = None

    def to_domain(self) -> FoodItem:
        return FoodItem(
            name=self.name,
            nutrients=self.nutrients.to_domain(),
            serving_size_g=self.serving_size_g,
            serving_text=self.serving_text,
        )


class RecipePayload(BaseModel):
    """Recipe record with whole-batch nutrients."""

    kind: Literal["recipe"] = "recipe"
    name: str
    nutrients: NutrientsPayload
    servings_per_batch: float

    def to_domain(self) -> Recipe:
        return Recipe(
            name=self.name,
            nutrients=self.nutrients.to_domain(),
            servings_per_batch=self.servings_per_batch,
        )


class ScaleRequest(BaseModel):
    """A logged quantity of a food or recipe."""

    record: Annotated[FoodPayload | RecipePayload, Field(discriminator="kind")]
    quantity: float = Field(ge=0)
    unit: str
