"""Tests for admin endpoints."""

from datetime import date
from uuid import uuid4

from fastapi.testclient import TestClient

from nutrition_goals.api.app import create_app
from nutrition_goals.domain.ledger import AchievementCategory, DailyTotals
from nutrition_goals.domain.models import AccountRecord
from tests.conftest import InMemoryAccountRepository


def test_admin_requires_token(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/admin/health").status_code == 401
    assert (
        client.get("/admin/health", headers={"X-Admin-Token": "wrong"}).status_code
        == 401
    )


def test_admin_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/admin/health", headers={"X-Admin-Token": "admin-token"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_admin_ledger_endpoint(
    container, account_repository: InMemoryAccountRepository
) -> None:
    account = account_repository.add(AccountRecord(id=uuid4(), timezone="UTC"))
    account_repository.advance_last_checked_date(account.id, None, date(2024, 3, 10))
    account_repository.update_last_totals(account.id, DailyTotals(day=date(2024, 3, 10)))
    account_repository.record_goal_met(
        account.id, AchievementCategory.WATER, date(2024, 3, 9)
    )
    client = TestClient(create_app(container))

    response = client.get(
        f"/admin/accounts/{account.id}/ledger",
        headers={"X-Admin-Token": "admin-token"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["last_checked_date"] == "2024-03-10"
    assert data["has_goals"] is False
    assert data["last_totals"]["day"] == "2024-03-10"
    assert data["categories"]["water"] == {
        "met_count": 1,
        "last_met_date": "2024-03-09",
    }


def test_admin_ledger_unknown_account(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        f"/admin/accounts/{uuid4()}/ledger",
        headers={"X-Admin-Token": "admin-token"},
    )

    assert response.status_code == 404
