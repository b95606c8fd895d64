"""Domain models for the daily ledger and achievements."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from nutrition_goals.domain.nutrition import Nutrients


class AchievementCategory(str, Enum):
    """Goal groups tracked with a counter and a once-per-day notification."""

    ALL = "all"
    CALORIE = "calorie"
    CALORIE_MACROS = "calorie_macros"
    FIBER = "fiber"
    WATER = "water"


class LedgerTransition(str, Enum):
    """How the last checked date relates to today."""

    UNINITIALIZED = "uninitialized"
    SAME_DAY = "same_day"
    NEXT_DAY = "next_day"
    GAP = "gap"


@dataclass(frozen=True)
class DailyTotals:
    """Aggregated intake for one calendar day; water in US fluid ounces."""

    day: date
    nutrients: Nutrients = field(default_factory=Nutrients)
    water_oz: float = 0.0


@dataclass(frozen=True)
class CategoryProgress:
    """Achievement history for one category."""

    last_met_date: date | None = None
    met_count: int = 0


def _empty_categories() -> dict[AchievementCategory, CategoryProgress]:
    return {category: CategoryProgress() for category in AchievementCategory}


@dataclass(frozen=True)
class Ledger:
    """Persisted streak and achievement state for an account."""

    last_checked_date: date | None = None
    login_streak: int = 0
    categories: dict[AchievementCategory, CategoryProgress] = field(
        default_factory=_empty_categories
    )
    last_totals: DailyTotals | None = None


@dataclass(frozen=True)
class GoalNotification:
    """A goal-met message raised for one category on one date."""

    category: AchievementCategory
    day: date
    title: str
    message: str


@dataclass(frozen=True)
class LedgerOutcome:
    """Result of one ledger evaluation."""

    transition: LedgerTransition
    today: date
    login_streak: int
    evaluated_day: date | None = None
    met_categories: list[AchievementCategory] = field(default_factory=list)
    notifications: list[GoalNotification] = field(default_factory=list)
    stale: bool = False
    superseded: bool = False
