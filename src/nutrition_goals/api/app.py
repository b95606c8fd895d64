"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nutrition_goals.api.admin import router as admin_router
from nutrition_goals.api.models import BiometricRequest, ScaleRequest
from nutrition_goals.app_logging import configure_logging
from nutrition_goals.containers import AppContainer
from nutrition_goals.domain.errors import (
    AccountNotFoundError,
    GoalPersistenceError,
    InvalidBiometricInputError,
    NutritionGoalsError,
)
from nutrition_goals.domain.goals import GoalProfile
from nutrition_goals.domain.ledger import LedgerOutcome
from nutrition_goals.domain.nutrition import ScaledPortion
from nutrition_goals.services.accounts import AchievementSummary
from nutrition_goals.services.progress import DayProgress
from nutrition_goals.services.scaler import scale_nutrients


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(NutritionGoalsError)
    async def domain_error_handler(
        request: Request, exc: NutritionGoalsError
    ) -> JSONResponse:
        body: dict[str, object] = {"code": exc.code, "detail": str(exc)}
        if isinstance(exc, AccountNotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        elif isinstance(exc, GoalPersistenceError):
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            body["retryable"] = True
        else:
            status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        logger.info("%s %s failed: %s", request.method, request.url.path, exc.code)
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        if request.method == "POST" and request.url.path.endswith("/goals"):
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    "code": InvalidBiometricInputError.code,
                    "detail": jsonable_encoder(exc.errors()),
                },
            )
        return await request_validation_exception_handler(request, exc)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/accounts/{account_id}/goals")
    async def calculate_goals(
        account_id: UUID, payload: BiometricRequest, request: Request
    ) -> dict[str, object]:
        """Compute a goal profile from biometrics and store it."""
        state_container: AppContainer = request.app.state.container
        goals = state_container.goal_service.calculate_and_store(
            account_id, payload.to_domain()
        )
        return {"goals": _goals_payload(goals)}

    @app.post("/nutrients/scale")
    async def scale(payload: ScaleRequest) -> dict[str, object]:
        """Scale a food or recipe to a logged quantity."""
        portion = scale_nutrients(
            payload.record.to_domain(), payload.quantity, payload.unit
        )
        return _portion_payload(portion)

    @app.post("/accounts/{account_id}/ledger/evaluate")
    async def evaluate_ledger(account_id: UUID, request: Request) -> dict[str, object]:
        """Run the day-boundary check for an account."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.ledger_tracker.evaluate(account_id)
        return _outcome_payload(outcome)

    @app.delete("/accounts/{account_id}/ledger/evaluate")
    async def cancel_ledger_evaluation(
        account_id: UUID, request: Request
    ) -> dict[str, bool]:
        """Supersede an in-flight evaluation, e.g. after the client navigated away."""
        state_container: AppContainer = request.app.state.container
        return {"invalidated": state_container.ledger_tracker.invalidate(account_id)}

    @app.get("/accounts/{account_id}/progress")
    async def progress(
        account_id: UUID, request: Request, day: date | None = None
    ) -> dict[str, object]:
        """Return percent-of-goal values for a day."""
        state_container: AppContainer = request.app.state.container
        result = state_container.progress_service.get_progress(account_id, day)
        return _progress_payload(result)

    @app.get("/accounts/{account_id}/achievements")
    async def achievements(account_id: UUID, request: Request) -> dict[str, object]:
        """Return the login streak and achievement counters."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.goal_service.get_achievements(account_id)
        return _achievements_payload(summary)

    return app


def _goals_payload(goals: GoalProfile) -> dict[str, object]:
    payload: dict[str, object] = dict(goals.as_dict())
    payload["water_ml"] = round(goals.water_ml, 1)
    return payload


def _portion_payload(portion: ScaledPortion) -> dict[str, object]:
    return {
        "nutrients": portion.nutrients.as_dict(),
        "amount": portion.amount,
        "amount_unit": portion.amount_unit,
        "unit_label": portion.unit_label,
    }


def _outcome_payload(outcome: LedgerOutcome) -> dict[str, object]:
    return {
        "transition": outcome.transition.value,
        "today": outcome.today.isoformat(),
        "login_streak": outcome.login_streak,
        "evaluated_day": (
            outcome.evaluated_day.isoformat() if outcome.evaluated_day else None
        ),
        "met_categories": [category.value for category in outcome.met_categories],
        "notifications": [
            {
                "category": notification.category.value,
                "day": notification.day.isoformat(),
                "title": notification.title,
                "message": notification.message,
            }
            for notification in outcome.notifications
        ],
        "stale": outcome.stale,
        "superseded": outcome.superseded,
    }


def _progress_payload(progress: DayProgress) -> dict[str, object]:
    return {
        "day": progress.day.isoformat(),
        "totals": {
            **progress.totals.nutrients.as_dict(),
            "water_oz": progress.totals.water_oz,
        },
        "percentages": {
            name: round(value, 1) for name, value in progress.percentages.items()
        },
    }


def _achievements_payload(summary: AchievementSummary) -> dict[str, object]:
    return {
        "login_streak": summary.login_streak,
        "last_checked_date": (
            summary.last_checked_date.isoformat()
            if summary.last_checked_date
            else None
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
            for category, progress in summary.categories.items()
        },
    }
