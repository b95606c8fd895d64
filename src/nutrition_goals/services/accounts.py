"""Account-related business logic."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from nutrition_goals.domain.biometrics import BiometricInput
from nutrition_goals.domain.errors import AccountNotFoundError, GoalPersistenceError
from nutrition_goals.domain.goals import GoalProfile
from nutrition_goals.domain.ledger import (
    AchievementCategory,
    CategoryProgress,
    DailyTotals,
)
from nutrition_goals.domain.models import AccountRecord
from nutrition_goals.services.calculator import calculate_goal_profile

_logger = logging.getLogger(__name__)


class AccountRepository(Protocol):
    """Persistence interface for account records.

    Each update touches a disjoint group of fields so callers can persist
    goals, streak, totals and counters independently.
    """

    def get_account(self, account_id: UUID) -> AccountRecord | None:
        """Return the account record, if present."""

    def update_goal_profile(self, account_id: UUID, goals: GoalProfile) -> None:
        """Replace the stored goal profile."""

    def update_login_streak(self, account_id: UUID, login_streak: int) -> None:
        """Store the login streak."""

    def update_last_totals(self, account_id: UUID, totals: DailyTotals) -> None:
        """Store the most recently seen totals."""

    def advance_last_checked_date(
        self, account_id: UUID, expected: date | None, new: date
    ) -> bool:
        """Set the last checked date only if it still equals expected."""

    def record_goal_met(
        self, account_id: UUID, category: AchievementCategory, met_date: date
    ) -> None:
        """Atomically increment a category counter and set its last met date."""


@dataclass(frozen=True)
class AchievementSummary:
    """Streak and per-category achievement history for an account."""

    login_streak: int
    last_checked_date: date | None
    categories: dict[AchievementCategory, CategoryProgress]


@dataclass
class GoalService:
    """Application service for computing and storing goal profiles."""

    repository: AccountRepository

    def calculate_and_store(
        self, account_id: UUID, biometrics: BiometricInput
    ) -> GoalProfile:
        """Compute a goal profile and persist it on the account."""
        goals = calculate_goal_profile(biometrics)
        self._require_account(account_id)
        try:
            self.repository.update_goal_profile(account_id, goals)
        except Exception as exc:
            _logger.exception("Failed to store goal profile for %s", account_id)
            raise GoalPersistenceError("Goal profile could not be saved") from exc
        _logger.info("Stored goal profile for %s: %s kcal", account_id, goals.calories)
        return goals

    def get_achievements(self, account_id: UUID) -> AchievementSummary:
        """Return the account's streak and achievement counters."""
        ledger = self._require_account(account_id).ledger
        return AchievementSummary(
            login_streak=ledger.login_streak,
            last_checked_date=ledger.last_checked_date,
            categories=dict(ledger.categories),
        )

    def _require_account(self, account_id: UUID) -> AccountRecord:
        account = self.repository.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account
