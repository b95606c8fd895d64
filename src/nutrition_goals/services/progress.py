"""Percent-of-goal progress for a day's totals."""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from nutrition_goals.config import parse_timezone
from nutrition_goals.domain.errors import AccountNotFoundError
from nutrition_goals.domain.ledger import DailyTotals
from nutrition_goals.domain.nutrition import NUTRIENT_FIELDS
from nutrition_goals.services.accounts import AccountRepository
from nutrition_goals.services.achievements import ML_PER_FL_OZ


class DailyTotalsRepository(Protocol):
    """Read interface for aggregated daily totals."""

    def get_daily_totals(self, account_id: UUID, day: date) -> DailyTotals:
        """Return the summed intake for an account on a date."""


@dataclass(frozen=True)
class DayProgress:
    """Totals for a day alongside percent-of-goal values."""

    day: date
    totals: DailyTotals
    percentages: dict[str, float]


def calculate_percentage(current: float | None, goal: float | None) -> float:
    """Return current as a percentage of goal, or 0 when there is no goal."""
    if not _finite(goal) or goal == 0:
        return 0.0
    if not _finite(current):
        return 0.0
    return current / goal * 100


def account_today(timezone_name: str | None, default_timezone: str) -> date:
    """Return today's date in the account's timezone."""
    tz = ZoneInfo(parse_timezone(timezone_name, default_timezone))
    return datetime.now(tz=tz).date()


@dataclass
class ProgressService:
    """Service for percent-of-goal display values."""

    account_repository: AccountRepository
    totals_repository: DailyTotalsRepository
    default_timezone: str = "UTC"

    def get_progress(self, account_id: UUID, day: date | None = None) -> DayProgress:
        """Return totals and percentages for a day, defaulting to today."""
        account = self.account_repository.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        resolved_day = day or account_today(account.timezone, self.default_timezone)
        totals = self.totals_repository.get_daily_totals(account_id, resolved_day)
        goals = account.goals
        percentages: dict[str, float] = {}
        for name in NUTRIENT_FIELDS:
            goal = getattr(goals, name) if goals else None
            percentages[name] = calculate_percentage(
                getattr(totals.nutrients, name), goal
            )
        water_goal_oz = goals.water_ml / ML_PER_FL_OZ if goals else None
        percentages["water"] = calculate_percentage(totals.water_oz, water_goal_oz)
        return DayProgress(day=resolved_day, totals=totals, percentages=percentages)


def _finite(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )
