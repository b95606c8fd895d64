"""Daily ledger: login streaks and once-per-day goal notifications."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from nutrition_goals.config import parse_timezone
from nutrition_goals.domain.errors import AccountNotFoundError
from nutrition_goals.domain.ledger import (
    AchievementCategory,
    DailyTotals,
    GoalNotification,
    Ledger,
    LedgerOutcome,
    LedgerTransition,
)
from nutrition_goals.domain.models import AccountRecord
from nutrition_goals.services.accounts import AccountRepository
from nutrition_goals.services.achievements import (
    AchievementResult,
    build_notification,
    evaluate_achievements,
    notification_candidates,
)
from nutrition_goals.services.cache import AlertFlags
from nutrition_goals.services.notifications import GoalNotifier
from nutrition_goals.services.progress import DailyTotalsRepository

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def classify_transition(last_checked: date | None, today: date) -> LedgerTransition:
    """Return how the last checked date relates to today."""
    if last_checked is None:
        return LedgerTransition.UNINITIALIZED
    if last_checked >= today:
        return LedgerTransition.SAME_DAY
    if last_checked == today - timedelta(days=1):
        return LedgerTransition.NEXT_DAY
    return LedgerTransition.GAP


def next_streak(current: int, transition: LedgerTransition) -> int:
    """Return the login streak after a transition."""
    if transition is LedgerTransition.NEXT_DAY:
        return current + 1
    if transition in (LedgerTransition.GAP, LedgerTransition.UNINITIALIZED):
        return 1
    return current


@dataclass
class EvaluationToken:
    """Marks one in-flight evaluation; set superseded to abandon it."""

    account_id: UUID
    superseded: bool = False


@dataclass
class LedgerTracker:
    """Runs the day-boundary state machine for an account.

    Concurrent triggers for the same account share one in-flight evaluation.
    Across processes, the day boundary is claimed with a compare-and-swap on
    the last checked date; an evaluation that loses the claim applies nothing.
    """

    account_repository: AccountRepository
    totals_repository: DailyTotalsRepository
    alert_flags: AlertFlags
    notifier: GoalNotifier
    default_timezone: str = "UTC"
    clock: Callable[[], datetime] = _utc_now
    _in_flight: dict[UUID, "asyncio.Task[LedgerOutcome]"] = field(
        default_factory=dict, init=False, repr=False
    )
    _tokens: dict[UUID, EvaluationToken] = field(
        default_factory=dict, init=False, repr=False
    )

    async def evaluate(self, account_id: UUID) -> LedgerOutcome:
        """Evaluate the ledger, joining an evaluation already in flight."""
        task = self._in_flight.get(account_id)
        if task is None or task.done():
            token = EvaluationToken(account_id=account_id)
            task = asyncio.create_task(self._evaluate(account_id, token))
            self._in_flight[account_id] = task
            self._tokens[account_id] = token
            task.add_done_callback(
                lambda finished: self._forget(account_id, finished)
            )
        return await asyncio.shield(task)

    def invalidate(self, account_id: UUID) -> bool:
        """Mark the in-flight evaluation for an account as superseded.

        The superseded task is released so the next trigger starts afresh
        instead of joining it.
        """
        token = self._tokens.pop(account_id, None)
        if token is None:
            return False
        token.superseded = True
        self._in_flight.pop(account_id, None)
        return True

    def today_for(self, account: AccountRecord) -> date:
        """Return the current date in the account's timezone."""
        tz = ZoneInfo(parse_timezone(account.timezone, self.default_timezone))
        return self.clock().astimezone(tz).date()

    def _forget(self, account_id: UUID, task: "asyncio.Task[LedgerOutcome]") -> None:
        if self._in_flight.get(account_id) is task:
            self._in_flight.pop(account_id, None)
            self._tokens.pop(account_id, None)

    async def _evaluate(self, account_id: UUID, token: EvaluationToken) -> LedgerOutcome:
        account = self.account_repository.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        ledger = account.ledger
        today = self.today_for(account)
        totals = self.totals_repository.get_daily_totals(account_id, today)
        transition = classify_transition(ledger.last_checked_date, today)
        outcome = LedgerOutcome(
            transition=transition, today=today, login_streak=ledger.login_streak
        )

        # Nothing has been written yet, so a superseded evaluation can stop here.
        if token.superseded:
            _logger.info("Ledger evaluation for %s superseded", account_id)
            return replace(outcome, superseded=True)

        if transition is LedgerTransition.SAME_DAY:
            if ledger.last_checked_date == today:
                self._persist(
                    account_id,
                    "last totals",
                    lambda: self.account_repository.update_last_totals(
                        account_id, totals
                    ),
                )
            return outcome

        if not self.account_repository.advance_last_checked_date(
            account_id, ledger.last_checked_date, today
        ):
            _logger.info(
                "Ledger for %s already advanced past %s; skipping",
                account_id,
                ledger.last_checked_date,
            )
            return replace(outcome, stale=True)

        if transition is LedgerTransition.UNINITIALIZED:
            streak = next_streak(ledger.login_streak, transition)
            self._persist(
                account_id,
                "login streak",
                lambda: self.account_repository.update_login_streak(account_id, streak),
            )
            self._persist(
                account_id,
                "last totals",
                lambda: self.account_repository.update_last_totals(account_id, totals),
            )
            return replace(outcome, login_streak=streak)

        return await self._close_day(account, ledger, transition, today, totals)

    async def _close_day(
        self,
        account: AccountRecord,
        ledger: Ledger,
        transition: LedgerTransition,
        today: date,
        totals: DailyTotals,
    ) -> LedgerOutcome:
        account_id = account.id
        streak = next_streak(ledger.login_streak, transition)
        if streak != ledger.login_streak:
            self._persist(
                account_id,
                "login streak",
                lambda: self.account_repository.update_login_streak(account_id, streak),
            )
        self._persist(
            account_id,
            "alert flags",
            lambda: self.alert_flags.clear_stale(account_id, today),
        )

        met: list[AchievementCategory] = []
        notifications: list[GoalNotification] = []
        result = self._achievements_for(account, ledger)
        if result is not None:
            for category in result.met:
                self._persist(
                    account_id,
                    f"{category.value} achievement",
                    lambda category=category: self.account_repository.record_goal_met(
                        account_id, category, ledger.last_checked_date
                    ),
                )
            met = result.met
            notifications = await self._notify(account, result, today)

        self._persist(
            account_id,
            "last totals",
            lambda: self.account_repository.update_last_totals(account_id, totals),
        )
        _logger.info(
            "Closed %s for %s: streak=%s met=%s",
            ledger.last_checked_date,
            account_id,
            streak,
            [category.value for category in met],
        )
        return LedgerOutcome(
            transition=transition,
            today=today,
            login_streak=streak,
            evaluated_day=ledger.last_checked_date,
            met_categories=met,
            notifications=notifications,
        )

    def _achievements_for(
        self, account: AccountRecord, ledger: Ledger
    ) -> AchievementResult | None:
        if account.goals is None:
            _logger.warning("Account %s has no goal profile", account.id)
            return None
        if ledger.last_totals is None:
            _logger.warning("No totals stored for %s", ledger.last_checked_date)
            return None
        return evaluate_achievements(ledger.last_totals, account.goals)

    async def _notify(
        self, account: AccountRecord, result: AchievementResult, today: date
    ) -> list[GoalNotification]:
        sent: list[GoalNotification] = []
        for category in notification_candidates(result):
            if self.alert_flags.was_raised(account.id, category, today):
                continue
            notification = build_notification(category, result.day)
            try:
                await self.notifier.notify(account, notification)
            except Exception:
                _logger.exception(
                    "Failed to deliver %s notification to %s",
                    category.value,
                    account.id,
                )
                continue
            self._persist(
                account.id,
                f"{category.value} alert flag",
                lambda category=category: self.alert_flags.mark_raised(
                    account.id, category, today
                ),
            )
            sent.append(notification)
        return sent

    def _persist(self, account_id: UUID, what: str, action: Callable[[], None]) -> bool:
        try:
            action()
        except Exception:
            _logger.exception("Failed to persist %s for %s", what, account_id)
            return False
        return True
