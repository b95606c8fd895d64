"""Delivery of goal-met notifications."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_goals.adapters.telegram_client import TelegramClient
from nutrition_goals.domain.ledger import GoalNotification
from nutrition_goals.domain.models import AccountRecord

_logger = logging.getLogger(__name__)


class GoalNotifier(Protocol):
    """Interface for showing a goal-met notification to an account."""

    async def notify(
        self, account: AccountRecord, notification: GoalNotification
    ) -> None:
        """Deliver a notification."""


@dataclass
class TelegramGoalNotifier(GoalNotifier):
    """Sends goal-met notifications to the account's Telegram chat."""

    telegram_client: TelegramClient

    async def notify(
        self, account: AccountRecord, notification: GoalNotification
    ) -> None:
        """Send the notification, skipping accounts without a chat."""
        if account.telegram_chat_id is None:
            _logger.info(
                "No chat for account %s; skipping %s notification",
                account.id,
                notification.category.value,
            )
            return
        await self.telegram_client.send_message(
            chat_id=account.telegram_chat_id,
            text=format_notification(notification),
        )


def format_notification(notification: GoalNotification) -> str:
    """Render a notification as message text."""
    return (
        f"{notification.title}\n{notification.message}\n"
        f"(logged day: {notification.day.isoformat()})"
    )
