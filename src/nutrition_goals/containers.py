"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_goals.adapters.supabase_account_repository import (
    SupabaseAccountRepository,
)
from nutrition_goals.adapters.supabase_daily_totals_repository import (
    SupabaseDailyTotalsRepository,
)
from nutrition_goals.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from nutrition_goals.config import Settings
from nutrition_goals.services.accounts import AccountRepository, GoalService
from nutrition_goals.services.cache import AlertFlags, InMemoryKeyValueStore
from nutrition_goals.services.ledger import LedgerTracker
from nutrition_goals.services.notifications import TelegramGoalNotifier
from nutrition_goals.services.progress import DailyTotalsRepository, ProgressService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    account_repository: AccountRepository
    totals_repository: DailyTotalsRepository
    goal_service: GoalService
    progress_service: ProgressService
    ledger_tracker: LedgerTracker
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    account_repository = SupabaseAccountRepository(supabase_client)
    totals_repository = SupabaseDailyTotalsRepository(supabase_client)
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    alert_flags = AlertFlags(
        store=InMemoryKeyValueStore(),
        ttl_seconds=resolved_settings.alert_flag_ttl_seconds,
    )
    ledger_tracker = LedgerTracker(
        account_repository=account_repository,
        totals_repository=totals_repository,
        alert_flags=alert_flags,
        notifier=TelegramGoalNotifier(telegram_client),
        default_timezone=resolved_settings.default_timezone,
    )

    async def close_resources() -> None:
        await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        account_repository=account_repository,
        totals_repository=totals_repository,
        goal_service=GoalService(account_repository),
        progress_service=ProgressService(
            account_repository=account_repository,
            totals_repository=totals_repository,
            default_timezone=resolved_settings.default_timezone,
        ),
        ledger_tracker=ledger_tracker,
        close_resources=close_resources,
    )
