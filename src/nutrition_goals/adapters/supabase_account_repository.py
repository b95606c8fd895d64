"""Supabase-backed account repository."""

from dataclasses import dataclass, fields
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from nutrition_goals.domain.goals import GoalProfile
from nutrition_goals.domain.ledger import (
    AchievementCategory,
    CategoryProgress,
    DailyTotals,
    Ledger,
)
from nutrition_goals.domain.models import AccountRecord
from nutrition_goals.domain.nutrition import Nutrients
from nutrition_goals.services.accounts import AccountRepository

_GOAL_FIELDS = tuple(field.name for field in fields(GoalProfile))


@dataclass
class SupabaseAccountRepository(AccountRepository):
    """Supabase implementation for account persistence."""

    client: Client

    def get_account(self, account_id: UUID) -> AccountRecord | None:
        """Return the account row with goals and ledger, if present."""
        response = (
            self.client.table("accounts")
            .select("*")
            .eq("id", str(account_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_account(response.data[0])

    def update_goal_profile(self, account_id: UUID, goals: GoalProfile) -> None:
        """Replace the goal columns for an account."""
        payload: dict[str, object] = {
            f"goal_{name}": value for name, value in goals.as_dict().items()
        }
        payload["updated_at"] = _now_iso()
        self.client.table("accounts").update(payload).eq(
            "id", str(account_id)
        ).execute()

    def update_login_streak(self, account_id: UUID, login_streak: int) -> None:
        """Store the login streak."""
        self.client.table("accounts").update(
            {"login_streak": login_streak, "updated_at": _now_iso()}
        ).eq("id", str(account_id)).execute()

    def update_last_totals(self, account_id: UUID, totals: DailyTotals) -> None:
        """Store the last seen totals as JSON."""
        self.client.table("accounts").update(
            {"last_totals": serialize_totals(totals), "updated_at": _now_iso()}
        ).eq("id", str(account_id)).execute()

    def advance_last_checked_date(
        self, account_id: UUID, expected: date | None, new: date
    ) -> bool:
        """Conditionally move the last checked date; False if it changed underneath."""
        query = (
            self.client.table("accounts")
            .update({"last_checked_date": new.isoformat(), "updated_at": _now_iso()})
            .eq("id", str(account_id))
        )
        if expected is None:
            query = query.is_("last_checked_date", "null")
        else:
            query = query.eq("last_checked_date", expected.isoformat())
        response = query.execute()
        return bool(response.data)

    def record_goal_met(
        self, account_id: UUID, category: AchievementCategory, met_date: date
    ) -> None:
        """Increment a category counter server-side."""
        self.client.rpc(
            "increment_goal_met",
            {
                "p_account_id": str(account_id),
                "p_category": category.value,
                "p_met_date": met_date.isoformat(),
            },
        ).execute()


def serialize_totals(totals: DailyTotals) -> dict[str, object]:
    """Return totals as a JSON-compatible dict."""
    return {
        "day": totals.day.isoformat(),
        "water_oz": totals.water_oz,
        **totals.nutrients.as_dict(),
    }


def parse_totals(raw: object) -> DailyTotals | None:
    """Parse stored totals JSON, returning None when absent or malformed."""
    if not isinstance(raw, dict) or not raw.get("day"):
        return None
    return DailyTotals(
        day=date.fromisoformat(str(raw["day"])),
        nutrients=Nutrients.from_mapping(raw),
        water_oz=float(raw.get("water_oz") or 0.0),
    )


def _parse_account(row: dict[str, object]) -> AccountRecord:
    chat_id = row.get("telegram_chat_id")
    return AccountRecord(
        id=UUID(str(row["id"])),
        timezone=row.get("timezone"),
        telegram_chat_id=int(chat_id) if chat_id is not None else None,
        goals=_parse_goals(row),
        ledger=Ledger(
            last_checked_date=_parse_date(row.get("last_checked_date")),
            login_streak=int(row.get("login_streak") or 0),
            categories={
                category: CategoryProgress(
                    last_met_date=_parse_date(row.get(f"met_{category.value}_date")),
                    met_count=int(row.get(f"met_{category.value}_count") or 0),
                )
                for category in AchievementCategory
            },
            last_totals=parse_totals(row.get("last_totals")),
        ),
    )


def _parse_goals(row: dict[str, object]) -> GoalProfile | None:
    if row.get("goal_calories") is None:
        return None
    values: dict[str, object] = {}
    for name in _GOAL_FIELDS:
        raw = row.get(f"goal_{name}") or 0
        values[name] = float(raw) if name == "water_ml" else int(raw)
    return GoalProfile(**values)


def _parse_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()
