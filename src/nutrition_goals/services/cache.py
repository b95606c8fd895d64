"""Key-value store abstractions and per-day alert flags."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from nutrition_goals.domain.ledger import AchievementCategory


class KeyValueStore(Protocol):
    """Device-local key-value store."""

    def get(self, key: str) -> str | None:
        """Return a stored value if present and not expired."""

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store a value, optionally expiring after ttl_seconds."""

    def delete(self, key: str) -> None:
        """Remove a stored value."""


@dataclass
class _Entry:
    value: str
    expires_at: datetime | None


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store."""

    _entries: dict[str, _Entry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> str | None:
        """Return a stored value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store a value with an optional TTL."""
        expires_at = (
            datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
            if ttl_seconds is not None
            else None
        )
        self._entries[key] = _Entry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        """Remove a stored value if present."""
        self._entries.pop(key, None)


@dataclass
class AlertFlags:
    """Once-per-date markers for goal notifications.

    Each category is its own key holding the ISO date it was raised for, so
    flags are read and written one round trip at a time, never as a group.
    """

    store: KeyValueStore
    ttl_seconds: int = 3 * 86400

    def was_raised(
        self, account_id: UUID, category: AchievementCategory, day: date
    ) -> bool:
        """Return True when the category was already raised on day."""
        return self.store.get(_flag_key(account_id, category)) == day.isoformat()

    def mark_raised(
        self, account_id: UUID, category: AchievementCategory, day: date
    ) -> None:
        """Record that the category was raised on day."""
        self.store.set(
            _flag_key(account_id, category), day.isoformat(), self.ttl_seconds
        )

    def clear_stale(self, account_id: UUID, today: date) -> None:
        """Remove flags raised on any date other than today."""
        for category in AchievementCategory:
            key = _flag_key(account_id, category)
            value = self.store.get(key)
            if value is not None and value != today.isoformat():
                self.store.delete(key)


def _flag_key(account_id: UUID, category: AchievementCategory) -> str:
    return f"alerts:{account_id}:{category.value}"
