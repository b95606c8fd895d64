"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from nutrition_goals.adapters.telegram_client import TelegramClient
from nutrition_goals.config import Settings
from nutrition_goals.containers import AppContainer
from nutrition_goals.domain.goals import GoalProfile
from nutrition_goals.domain.ledger import (
    AchievementCategory,
    CategoryProgress,
    DailyTotals,
    GoalNotification,
)
from nutrition_goals.domain.models import AccountRecord
from nutrition_goals.domain.nutrition import NUTRIENT_FIELDS, Nutrients
from nutrition_goals.services.accounts import AccountRepository, GoalService
from nutrition_goals.services.cache import AlertFlags, InMemoryKeyValueStore
from nutrition_goals.services.ledger import LedgerTracker
from nutrition_goals.services.notifications import GoalNotifier
from nutrition_goals.services.progress import DailyTotalsRepository, ProgressService


@dataclass
class InMemoryAccountRepository(AccountRepository):
    """In-memory account repository for tests."""

    accounts: dict[UUID, AccountRecord] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    def add(self, account: AccountRecord) -> AccountRecord:
        self.accounts[account.id] = account
        return account

    def get_account(self, account_id: UUID) -> AccountRecord | None:
        return self.accounts.get(account_id)

    def update_goal_profile(self, account_id: UUID, goals: GoalProfile) -> None:
        self._record("update_goal_profile")
        account = self.accounts[account_id]
        self.accounts[account_id] = replace(account, goals=goals)

    def update_login_streak(self, account_id: UUID, login_streak: int) -> None:
        self._record("update_login_streak")
        self._update_ledger(account_id, login_streak=login_streak)

    def update_last_totals(self, account_id: UUID, totals: DailyTotals) -> None:
        self._record("update_last_totals")
        self._update_ledger(account_id, last_totals=totals)

    def advance_last_checked_date(
        self, account_id: UUID, expected: date | None, new: date
    ) -> bool:
        self._record("advance_last_checked_date")
        if self.accounts[account_id].ledger.last_checked_date != expected:
            return False
        self._update_ledger(account_id, last_checked_date=new)
        return True

    def record_goal_met(
        self, account_id: UUID, category: AchievementCategory, met_date: date
    ) -> None:
        self._record("record_goal_met")
        ledger = self.accounts[account_id].ledger
        categories = dict(ledger.categories)
        current = categories[category]
        categories[category] = CategoryProgress(
            last_met_date=met_date, met_count=current.met_count + 1
        )
        self._update_ledger(account_id, categories=categories)

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failing:
            raise RuntimeError(f"{name} failed")

    def _update_ledger(self, account_id: UUID, **changes: object) -> None:
        account = self.accounts[account_id]
        self.accounts[account_id] = replace(
            account, ledger=replace(account.ledger, **changes)
        )


@dataclass
class InMemoryDailyTotalsRepository(DailyTotalsRepository):
    """In-memory daily totals keyed by account and day."""

    totals: dict[tuple[UUID, date], DailyTotals] = field(default_factory=dict)

    def set(self, account_id: UUID, totals: DailyTotals) -> None:
        self.totals[(account_id, totals.day)] = totals

    def get_daily_totals(self, account_id: UUID, day: date) -> DailyTotals:
        return self.totals.get((account_id, day), DailyTotals(day=day))


@dataclass
class FakeNotifier(GoalNotifier):
    """Notifier that records deliveries and can fail for chosen categories."""

    sent: list[tuple[UUID, GoalNotification]] = field(default_factory=list)
    failing: set[AchievementCategory] = field(default_factory=set)

    async def notify(
        self, account: AccountRecord, notification: GoalNotification
    ) -> None:
        if notification.category in self.failing:
            raise RuntimeError("delivery failed")
        self.sent.append((account.id, notification))


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)

    async def send_message(self, chat_id: int, text: str) -> None:
        self.messages.append((chat_id, text))


@dataclass
class FixedClock:
    """Clock returning a settable instant."""

    now: datetime

    def __call__(self) -> datetime:
        return self.now

    def set_day(self, day: date, hour: int = 12) -> None:
        self.now = datetime(day.year, day.month, day.day, hour, tzinfo=UTC)


def make_goals(**overrides: object) -> GoalProfile:
    values: dict[str, object] = {
        "calories": 2000,
        "protein_g": 125,
        "carbs_g": 225,
        "fat_g": 67,
        "water_ml": 2000.0,
        "fiber_g": 38,
        "total_sugars_g": 50,
        "added_sugars_g": 25,
        "trans_fat_g": 2,
        "saturated_fat_g": 20,
        "polyunsaturated_fat_g": 22,
        "monounsaturated_fat_g": 33,
        "cholesterol_mg": 300,
        "sodium_mg": 2300,
        "potassium_mg": 3400,
        "calcium_mg": 1000,
        "iron_mg": 8,
        "vitamin_a_mcg": 900,
        "vitamin_c_mg": 90,
        "vitamin_d_mcg": 15,
    }
    values.update(overrides)
    return GoalProfile(**values)


def totals_meeting(goals: GoalProfile, day: date, **overrides: float) -> DailyTotals:
    """Return totals that satisfy every band for the given goals."""
    values = {
        name: float(getattr(goals, name)) for name in NUTRIENT_FIELDS
    }
    # Upper-bound-only limits are met at or below the goal.
    for name in (
        "added_sugars_g",
        "trans_fat_g",
        "saturated_fat_g",
        "cholesterol_mg",
        "sodium_mg",
    ):
        values[name] = getattr(goals, name) * 0.5
    water_oz = overrides.pop("water_oz", goals.water_ml / 29.5735)
    values.update(overrides)
    return DailyTotals(day=day, nutrients=Nutrients(**values), water_oz=water_oz)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
    )


@pytest.fixture
def account_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def totals_repository() -> InMemoryDailyTotalsRepository:
    return InMemoryDailyTotalsRepository()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(now=datetime(2024, 3, 10, 12, tzinfo=UTC))


@pytest.fixture
def alert_flags() -> AlertFlags:
    return AlertFlags(store=InMemoryKeyValueStore())


@pytest.fixture
def tracker(
    account_repository: InMemoryAccountRepository,
    totals_repository: InMemoryDailyTotalsRepository,
    alert_flags: AlertFlags,
    notifier: FakeNotifier,
    clock: FixedClock,
) -> LedgerTracker:
    return LedgerTracker(
        account_repository=account_repository,
        totals_repository=totals_repository,
        alert_flags=alert_flags,
        notifier=notifier,
        clock=clock,
    )


@pytest.fixture
def account(account_repository: InMemoryAccountRepository) -> AccountRecord:
    return account_repository.add(
        AccountRecord(id=uuid4(), timezone="UTC", goals=make_goals())
    )


@pytest.fixture
def container(
    settings: Settings,
    account_repository: InMemoryAccountRepository,
    totals_repository: InMemoryDailyTotalsRepository,
    telegram_client: FakeTelegramClient,
    tracker: LedgerTracker,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        account_repository=account_repository,
        totals_repository=totals_repository,
        goal_service=GoalService(account_repository),
        progress_service=ProgressService(
            account_repository=account_repository,
            totals_repository=totals_repository,
        ),
        ledger_tracker=tracker,
        close_resources=close_resources,
    )
