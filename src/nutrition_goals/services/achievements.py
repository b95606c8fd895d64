"""Goal-met predicates for a finished day."""

from dataclasses import dataclass, field
from datetime import date

from nutrition_goals.domain.goals import GoalProfile
from nutrition_goals.domain.ledger import (
    AchievementCategory,
    DailyTotals,
    GoalNotification,
)

ML_PER_FL_OZ = 29.5735
WATER_MIN_SHARE = 0.95


@dataclass(frozen=True)
class Band:
    """Accepted intake range as fractions of the goal."""

    low: float | None
    high: float | None

    def contains(self, consumed: float, goal: float) -> bool:
        """Return True when consumed falls inside the band around goal."""
        if self.low is not None and consumed < goal * self.low:
            return False
        return not (self.high is not None and consumed > goal * self.high)


_TARGET = Band(0.95, 1.05)
_LIMIT = Band(None, 1.0)
_MODERATE = Band(0.85, 1.2)

NUTRIENT_BANDS: dict[str, Band] = {
    "calories": _TARGET,
    "protein_g": _TARGET,
    "carbs_g": _TARGET,
    "fat_g": _TARGET,
    "fiber_g": Band(0.95, 2.0),
    "total_sugars_g": Band(0.5, 1.5),
    "added_sugars_g": _LIMIT,
    "trans_fat_g": _LIMIT,
    "saturated_fat_g": _LIMIT,
    "cholesterol_mg": _LIMIT,
    "sodium_mg": _LIMIT,
    "polyunsaturated_fat_g": _MODERATE,
    "monounsaturated_fat_g": _MODERATE,
    "potassium_mg": _MODERATE,
    "vitamin_a_mcg": _MODERATE,
    "vitamin_d_mcg": _MODERATE,
    "calcium_mg": Band(0.8, 1.2),
    "iron_mg": Band(0.9, 1.25),
    "vitamin_c_mg": Band(0.8, 2.0),
}

_CALORIE_MACROS = ("calories", "protein_g", "carbs_g", "fat_g")

_NARROW_CATEGORIES = (
    AchievementCategory.CALORIE_MACROS,
    AchievementCategory.CALORIE,
    AchievementCategory.FIBER,
    AchievementCategory.WATER,
)

_MESSAGES = {
    AchievementCategory.ALL: (
        "You're unbelievable!",
        "You met ALL of your nutrition goals on your most recent logged day.",
    ),
    AchievementCategory.CALORIE_MACROS: (
        "You're killing it!",
        "You met your calorie and macro goals on your most recent logged day.",
    ),
    AchievementCategory.CALORIE: (
        "Goal achieved!",
        "You met your calorie goal on your most recent logged day.",
    ),
    AchievementCategory.FIBER: (
        "Goal achieved!",
        "You met your fiber goal on your most recent logged day.",
    ),
    AchievementCategory.WATER: (
        "Goal achieved!",
        "You met your water goal on your most recent logged day.",
    ),
}


@dataclass(frozen=True)
class AchievementResult:
    """Per-nutrient predicates and the derived category flags for a day."""

    day: date
    nutrients: dict[str, bool]
    categories: dict[AchievementCategory, bool] = field(default_factory=dict)

    @property
    def met(self) -> list[AchievementCategory]:
        """Categories whose goal was met, in declaration order."""
        return [category for category in AchievementCategory if self.categories[category]]


def water_goal_met(water_oz: float, water_goal_ml: float) -> bool:
    """Return True when at least 95% of the water goal was consumed."""
    return water_oz * ML_PER_FL_OZ >= water_goal_ml * WATER_MIN_SHARE


def evaluate_achievements(totals: DailyTotals, goals: GoalProfile) -> AchievementResult:
    """Check each nutrient band and derive the category flags."""
    predicates = {
        name: band.contains(getattr(totals.nutrients, name), getattr(goals, name))
        for name, band in NUTRIENT_BANDS.items()
    }
    predicates["water"] = water_goal_met(totals.water_oz, goals.water_ml)
    categories = {
        AchievementCategory.ALL: all(predicates.values()),
        AchievementCategory.CALORIE: predicates["calories"],
        AchievementCategory.CALORIE_MACROS: all(
            predicates[name] for name in _CALORIE_MACROS
        ),
        AchievementCategory.FIBER: predicates["fiber_g"],
        AchievementCategory.WATER: predicates["water"],
    }
    return AchievementResult(day=totals.day, nutrients=predicates, categories=categories)


def notification_candidates(result: AchievementResult) -> list[AchievementCategory]:
    """Return categories to notify, in priority order.

    Meeting every goal is announced on its own; otherwise each narrower
    category is announced independently.
    """
    # Unlike a per-flag fallthrough, the narrower categories stay silent even
    # when ALL was already alerted for the date.
    if result.categories[AchievementCategory.ALL]:
        return [AchievementCategory.ALL]
    return [category for category in _NARROW_CATEGORIES if result.categories[category]]


def build_notification(category: AchievementCategory, day: date) -> GoalNotification:
    """Return the user-facing message for a met category."""
    title, message = _MESSAGES[category]
    return GoalNotification(category=category, day=day, title=title, message=message)
