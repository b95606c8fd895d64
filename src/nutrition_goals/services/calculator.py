"""Daily goal calculation from biometric inputs."""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from nutrition_goals.domain.biometrics import (
    ActivityLevel,
    BiometricInput,
    PregnancyStatus,
    Sex,
    Trimester,
    WeightGoal,
)
from nutrition_goals.domain.errors import BelowMinimumAgeError, InvalidBiometricInputError
from nutrition_goals.domain.goals import GoalProfile

MINIMUM_AGE = 13
KG_PER_LB = 0.453592
CM_PER_INCH = 2.54

_ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}

_GOAL_MULTIPLIERS = {
    WeightGoal.LOSE: 0.85,
    WeightGoal.MAINTAIN: 1.0,
    WeightGoal.GAIN: 1.1,
}

_TRIMESTER_CALORIES = {
    Trimester.FIRST: 0,
    Trimester.SECOND: 340,
    Trimester.THIRD: 450,
}

BREASTFEEDING_CALORIES = 500

_WATER_MULTIPLIERS = {
    PregnancyStatus.NONE: 0.8,
    PregnancyStatus.PREGNANT: 1.0,
    PregnancyStatus.BREASTFEEDING: 1.1039,
}

# (share of calories, kcal per gram)
_MACRO_SHARES = {
    "protein_g": (0.25, 4),
    "carbs_g": (0.45, 4),
    "fat_g": (0.30, 9),
}

_SUB_MACRO_SHARES = {
    "total_sugars_g": (0.10, 4),
    "added_sugars_g": (0.05, 4),
    "trans_fat_g": (0.01, 9),
    "saturated_fat_g": (0.09, 9),
    "polyunsaturated_fat_g": (0.10, 9),
    "monounsaturated_fat_g": (0.15, 9),
}


@dataclass(frozen=True)
class _Subject:
    sex: Sex
    age: int
    pregnancy_status: PregnancyStatus


@dataclass(frozen=True)
class _TargetRule:
    applies: Callable[[_Subject], bool]
    values: Mapping[str, int]


def _male(subject: _Subject) -> bool:
    return subject.sex is Sex.MALE


def _female(subject: _Subject) -> bool:
    return subject.sex is Sex.FEMALE


def _female_not_expecting(subject: _Subject) -> bool:
    return _female(subject) and subject.pregnancy_status is PregnancyStatus.NONE


def _aged(low: int, high: int | None = None) -> Callable[[_Subject], bool]:
    def check(subject: _Subject) -> bool:
        return subject.age >= low and (high is None or subject.age <= high)

    return check


def _both(*checks: Callable[[_Subject], bool]) -> Callable[[_Subject], bool]:
    def check(subject: _Subject) -> bool:
        return all(item(subject) for item in checks)

    return check


# Rules are applied in order and later matches overwrite earlier ones, so the
# adolescent rows at the end always win over the adult brackets above them.
_MICRONUTRIENT_RULES: tuple[_TargetRule, ...] = (
    _TargetRule(_male, {"fiber_g": 38}),
    _TargetRule(
        _both(_male, _aged(19, 50)),
        {
            "calcium_mg": 1000,
            "iron_mg": 8,
            "sodium_mg": 2300,
            "vitamin_a_mcg": 900,
            "vitamin_c_mg": 90,
            "vitamin_d_mcg": 15,
            "potassium_mg": 3400,
            "cholesterol_mg": 200,
        },
    ),
    _TargetRule(
        _both(_male, _aged(51, 70)),
        {
            "calcium_mg": 1000,
            "iron_mg": 8,
            "sodium_mg": 1500,
            "vitamin_a_mcg": 900,
            "vitamin_c_mg": 90,
            "vitamin_d_mcg": 15,
            "potassium_mg": 3400,
            "cholesterol_mg": 200,
        },
    ),
    _TargetRule(
        _both(_male, _aged(71)),
        {
            "calcium_mg": 1300,
            "iron_mg": 8,
            "sodium_mg": 1500,
            "vitamin_a_mcg": 900,
            "vitamin_c_mg": 90,
            "vitamin_d_mcg": 20,
            "potassium_mg": 3400,
            "cholesterol_mg": 200,
        },
    ),
    _TargetRule(_female, {"fiber_g": 25}),
    _TargetRule(
        lambda subject: _female(subject)
        and subject.pregnancy_status is PregnancyStatus.PREGNANT,
        {
            "calcium_mg": 1000,
            "iron_mg": 27,
            "sodium_mg": 2300,
            "vitamin_a_mcg": 770,
            "vitamin_c_mg": 85,
            "vitamin_d_mcg": 15,
            "potassium_mg": 2900,
            "cholesterol_mg": 200,
        },
    ),
    _TargetRule(
        lambda subject: _female(subject)
        and subject.pregnancy_status is PregnancyStatus.BREASTFEEDING,
        {
            "calcium_mg": 1000,
            "iron_mg": 9,
            "sodium_mg": 2300,
            "vitamin_a_mcg": 1300,
            "vitamin_c_mg": 120,
            "vitamin_d_mcg": 15,
            "potassium_mg": 2800,
            "cholesterol_mg": 200,
        },
    ),
    _TargetRule(
        _both(_female_not_expecting, _aged(19, 50)),
        {
            "calcium_mg": 1000,
            "iron_mg": 18,
            "sodium_mg": 2300,
            "vitamin_a_mcg": 700,
            "vitamin_c_mg": 75,
            "vitamin_d_mcg": 15,
            "potassium_mg": 2600,
            "cholesterol_mg": 200,
        },
    ),
    _TargetRule(
        _both(_female_not_expecting, _aged(51)),
        {
            "calcium_mg": 1300,
            "iron_mg": 8,
            "sodium_mg": 1500,
            "vitamin_a_mcg": 700,
            "vitamin_c_mg": 75,
            "vitamin_d_mcg": 15,
            "potassium_mg": 2600,
            "cholesterol_mg": 200,
        },
    ),
    _TargetRule(
        _both(_female_not_expecting, _aged(14, 18)),
        {
            "calcium_mg": 1000,
            "iron_mg": 15,
            "sodium_mg": 2300,
            "vitamin_a_mcg": 700,
            "vitamin_c_mg": 65,
            "vitamin_d_mcg": 15,
            "cholesterol_mg": 170,
        },
    ),
    _TargetRule(
        _aged(4, 8),
        {
            "calcium_mg": 1000,
            "iron_mg": 10,
            "sodium_mg": 2200,
            "vitamin_a_mcg": 400,
            "vitamin_c_mg": 25,
            "vitamin_d_mcg": 15,
            "potassium_mg": 2300,
            "cholesterol_mg": 170,
        },
    ),
    _TargetRule(
        _aged(9, 13),
        {
            "calcium_mg": 1300,
            "iron_mg": 8,
            "sodium_mg": 2500,
            "vitamin_a_mcg": 600,
            "vitamin_c_mg": 45,
            "vitamin_d_mcg": 15,
            "potassium_mg": 2300,
            "cholesterol_mg": 170,
        },
    ),
    _TargetRule(_both(_male, _aged(9, 13)), {"potassium_mg": 2500}),
    _TargetRule(
        _aged(14, 18),
        {
            "calcium_mg": 1300,
            "iron_mg": 15,
            "sodium_mg": 2500,
            "vitamin_a_mcg": 700,
            "vitamin_c_mg": 65,
            "vitamin_d_mcg": 15,
            "potassium_mg": 2300,
            "cholesterol_mg": 170,
        },
    ),
    _TargetRule(
        _both(_male, _aged(14, 18)),
        {
            "iron_mg": 11,
            "vitamin_a_mcg": 900,
            "vitamin_c_mg": 75,
            "potassium_mg": 3000,
        },
    ),
)

_MICRONUTRIENT_FIELDS = (
    "fiber_g",
    "cholesterol_mg",
    "sodium_mg",
    "potassium_mg",
    "calcium_mg",
    "iron_mg",
    "vitamin_a_mcg",
    "vitamin_c_mg",
    "vitamin_d_mcg",
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def validate_biometrics(biometrics: BiometricInput) -> None:
    """Reject incomplete or out-of-range input before any computation."""
    for name in ("weight_lb", "height_ft", "height_in", "age"):
        value = getattr(biometrics, name)
        if not _is_number(value):
            raise InvalidBiometricInputError(f"{name} must be a number")
    if not biometrics.height_ft:
        raise InvalidBiometricInputError("height_ft must be provided")
    if biometrics.weight_lb <= 0 or biometrics.height_ft < 0 or biometrics.height_in < 0:
        raise InvalidBiometricInputError("weight and height must be positive")
    if biometrics.age < MINIMUM_AGE:
        raise BelowMinimumAgeError(f"Users must be aged {MINIMUM_AGE} or older")


def to_kilograms(weight_lb: float) -> float:
    """Convert pounds to kilograms."""
    return weight_lb * KG_PER_LB


def to_centimeters(height_ft: float, height_in: float) -> float:
    """Convert feet and inches to centimeters."""
    return (height_ft * 12 + height_in) * CM_PER_INCH


def calculate_bmr(weight_kg: float, height_cm: float, age: int, sex: Sex) -> float:
    """Return the Mifflin-St Jeor basal metabolic rate."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex is Sex.MALE:
        return base + 5
    return base - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Scale the basal rate by activity level."""
    return bmr * _ACTIVITY_MULTIPLIERS[activity_level]


def calculate_caloric_goal(tdee: float, goal: WeightGoal) -> float:
    """Scale expenditure by the weight goal."""
    return tdee * _GOAL_MULTIPLIERS[goal]


def pregnancy_calorie_adjustment(
    pregnancy_status: PregnancyStatus, trimester: Trimester
) -> int:
    """Return extra calories for pregnancy or breastfeeding."""
    if pregnancy_status is PregnancyStatus.PREGNANT:
        return _TRIMESTER_CALORIES[trimester]
    if pregnancy_status is PregnancyStatus.BREASTFEEDING:
        return BREASTFEEDING_CALORIES
    return 0


def calculate_water_goal(tdee: float, pregnancy_status: PregnancyStatus) -> float:
    """Return the water goal in millilitres from expenditure."""
    return tdee * _WATER_MULTIPLIERS[pregnancy_status]


def macro_split(calories: float) -> dict[str, int]:
    """Split calories into protein, carbs and fat grams."""
    return _calorie_shares(calories, _MACRO_SHARES)


def sub_macro_targets(calories: float) -> dict[str, int]:
    """Return calorie-proportional sugar and fat limits in grams."""
    return _calorie_shares(calories, _SUB_MACRO_SHARES)


def micronutrient_targets(
    sex: Sex, age: int, pregnancy_status: PregnancyStatus
) -> dict[str, int]:
    """Resolve fiber, mineral and vitamin targets from the bracket rules."""
    subject = _Subject(sex=sex, age=age, pregnancy_status=pregnancy_status)
    targets = dict.fromkeys(_MICRONUTRIENT_FIELDS, 0)
    for rule in _MICRONUTRIENT_RULES:
        if rule.applies(subject):
            targets.update(rule.values)
    return targets


def calculate_goal_profile(biometrics: BiometricInput) -> GoalProfile:
    """Validate biometric input and compute the full goal profile."""
    validate_biometrics(biometrics)
    pregnancy_status = (
        biometrics.pregnancy_status
        if biometrics.sex is Sex.FEMALE
        else PregnancyStatus.NONE
    )
    weight_kg = to_kilograms(biometrics.weight_lb)
    height_cm = to_centimeters(biometrics.height_ft, biometrics.height_in)
    bmr = calculate_bmr(weight_kg, height_cm, biometrics.age, biometrics.sex)
    tdee = calculate_tdee(bmr, biometrics.activity_level)
    calories = calculate_caloric_goal(tdee, biometrics.goal)
    calories += pregnancy_calorie_adjustment(pregnancy_status, biometrics.trimester)
    water_ml = calculate_water_goal(tdee, pregnancy_status)

    return GoalProfile(
        calories=round_half_up(calories),
        water_ml=water_ml,
        **macro_split(calories),
        **sub_macro_targets(calories),
        **micronutrient_targets(biometrics.sex, biometrics.age, pregnancy_status),
    )


def _calorie_shares(
    calories: float, shares: Mapping[str, tuple[float, int]]
) -> dict[str, int]:
    return {
        name: round_half_up(share * calories / kcal_per_gram)
        for name, (share, kcal_per_gram) in shares.items()
    }


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)
