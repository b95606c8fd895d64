"""Supabase repository for aggregated daily totals."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from nutrition_goals.domain.ledger import DailyTotals
from nutrition_goals.domain.nutrition import Nutrients
from nutrition_goals.services.progress import DailyTotalsRepository


@dataclass
class SupabaseDailyTotalsRepository(DailyTotalsRepository):
    """Reads the per-day sums maintained by the food log."""

    client: Client

    def get_daily_totals(self, account_id: UUID, day: date) -> DailyTotals:
        """Return totals for the day, or zeros when nothing was logged."""
        response = (
            self.client.table("daily_totals")
            .select("*")
            .eq("account_id", str(account_id))
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return DailyTotals(day=day)
        row = response.data[0]
        return DailyTotals(
            day=day,
            nutrients=Nutrients.from_mapping(row),
            water_oz=float(row.get("water_oz") or 0.0),
        )
