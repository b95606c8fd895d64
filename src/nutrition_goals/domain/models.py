"""Domain models for accounts."""

from dataclasses import dataclass, field
from uuid import UUID

from nutrition_goals.domain.goals import GoalProfile
from nutrition_goals.domain.ledger import Ledger


@dataclass(frozen=True)
class AccountRecord:
    """Represents an account stored in the database."""

    id: UUID
    timezone: str | None = None
    telegram_chat_id: int | None = None
    goals: GoalProfile | None = None
    ledger: Ledger = field(default_factory=Ledger)
