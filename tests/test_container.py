"""Tests for container wiring."""

import asyncio

from nutrition_goals.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.goal_service is not None
    assert container.ledger_tracker.default_timezone == "UTC"
    asyncio.run(container.close_resources())
