"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from nutrition_goals.adapters.supabase_account_repository import serialize_totals
from nutrition_goals.domain.errors import AccountNotFoundError

if TYPE_CHECKING:
    from nutrition_goals.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/accounts/{account_id}/ledger", dependencies=[Depends(require_admin)])
async def account_ledger(account_id: UUID, request: Request) -> dict[str, object]:
    """Return the raw stored ledger for an account."""
    container: AppContainer = request.app.state.container
    account = container.account_repository.get_account(account_id)
    if account is None:
        raise AccountNotFoundError(f"Account {account_id} not found")
    ledger = account.ledger
    return {
        "account_id": str(account.id),
        "timezone": account.timezone,
        "has_goals": account.goals is not None,
        "last_checked_date": (
            ledger.last_checked_date.isoformat() if ledger.last_checked_date else None
        ),
        "login_streak": ledger.login_streak,
        "last_totals": (
            serialize_totals(ledger.last_totals) if ledger.last_totals else None
        ),
        "categories": {
            category.value: {
                "met_count": progress.met_count,
                "last_met_date": (
                    progress.last_met_date.isoformat()
                    if progress.last_met_date
                    else None
                ),
            }
            for category, progress in ledger.categories.items()
        },
    }
