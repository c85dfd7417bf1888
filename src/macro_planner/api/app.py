"""FastAPI application factory."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import FastAPI, HTTPException, Path, Request, status
from fastapi.responses import JSONResponse

from macro_planner.api.models import (
    FoodItemCreate,
    FoodItemUpdate,
    MacroConfigUpdate,
    MealCopyRequest,
    MealTimeUpdate,
    SettingsUpdate,
)
from macro_planner.api.serializers import (
    serialize_day_report,
    serialize_item,
    serialize_plan,
    serialize_settings,
    serialize_week_report,
)
from macro_planner.app_logging import configure_logging
from macro_planner.containers import AppContainer
from macro_planner.domain.errors import (
    InvalidAmountError,
    InvalidNameError,
    InvalidTimeError,
    MalformedDayError,
    MealTimeCascadeError,
    PersistenceError,
)
from macro_planner.domain.meals import DayKey, NutrientValues
from macro_planner.services.meals import parse_day

MealId = Annotated[int, Path(ge=1, le=6)]


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(InvalidAmountError)
    @app.exception_handler(InvalidNameError)
    @app.exception_handler(InvalidTimeError)
    @app.exception_handler(MalformedDayError)
    async def invalid_input(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(MealTimeCascadeError)
    async def cascade_failed(_: Request, exc: MealTimeCascadeError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": str(exc),
                "applied": {str(key): value for key, value in exc.applied.items()},
                "failed_meal_id": exc.failed_meal_id,
                "reload": True,
            },
        )

    @app.exception_handler(PersistenceError)
    async def persistence_failed(_: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Persistence failure: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc), "reload": True},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/settings")
    async def get_settings(request: Request) -> dict[str, object]:
        """Return the caller's settings, or defaults for a new user."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        settings = state_container.user_settings_service.get_settings(user_id)
        return serialize_settings(settings)

    @app.put("/settings")
    async def put_settings(payload: SettingsUpdate, request: Request) -> dict[str, object]:
        """Save the caller's settings."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        settings = state_container.user_settings_service.save_settings(
            user_id,
            weight=payload.weight,
            base_goal_calories=payload.goal_calories,
            meal_interval_hours=payload.meal_interval_hours,
            unit_system=payload.unit_system,
        )
        return serialize_settings(settings)

    @app.get("/days/{day}")
    async def get_day(day: str, request: Request) -> dict[str, object]:
        """Return a day's macro config and six meals."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        context = state_container.user_settings_service.load_context(user_id)
        plan = state_container.meal_plan_service.get_day_plan(user_id, _day(day))
        return serialize_plan(plan, context.settings)

    @app.put("/days/{day}/macros")
    async def put_macros(
        day: str, payload: MacroConfigUpdate, request: Request
    ) -> dict[str, object]:
        """Save a day's macro levels and calorie adjustment."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        config = state_container.meal_plan_service.save_macro_config(
            user_id,
            _day(day),
            protein_level=payload.protein_level,
            fat_level=payload.fat_level,
            calorie_adjustment=payload.calorie_adjustment,
        )
        return {
            "protein_level": config.protein_level,
            "fat_level": config.fat_level,
            "calorie_adjustment": config.calorie_adjustment,
        }

    @app.put("/days/{day}/meals/{meal_id}/time")
    async def put_meal_time(
        day: str, payload: MealTimeUpdate, request: Request, meal_id: MealId
    ) -> dict[str, object]:
        """Save a meal time; meal 1 cascades to meals 2-6."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        context = state_container.user_settings_service.load_context(user_id)
        applied = await state_container.schedule_service.update_meal_time(
            user_id,
            _day(day),
            meal_id,
            payload.time,
            interval_hours=context.settings.meal_interval_hours,
        )
        return {"times": {str(key): value for key, value in applied.items()}}

    @app.post("/days/{day}/meals/{meal_id}/items")
    async def add_item(
        day: str, payload: FoodItemCreate, request: Request, meal_id: MealId
    ) -> dict[str, object]:
        """Attach a food item to a meal."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        item = state_container.meal_plan_service.add_food_item(
            user_id,
            _day(day),
            meal_id,
            name=payload.name,
            amount=payload.amount,
            nutrients=NutrientValues(
                calories=payload.calories,
                carbs=payload.carbs,
                protein=payload.protein,
                fat=payload.fat,
                protein_g=payload.protein_g,
            ),
        )
        return serialize_item(item)

    @app.patch("/days/{day}/meals/{meal_id}/items/{item_id}")
    async def update_item(
        day: str,
        item_id: UUID,
        payload: FoodItemUpdate,
        request: Request,
        meal_id: MealId,
    ) -> dict[str, object]:
        """Change an item's amount or name; an empty name deletes it."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        day_key = _day(day)
        service = state_container.meal_plan_service
        item = None
        if payload.amount is not None:
            item = service.change_item_amount(
                user_id, day_key, meal_id, item_id, payload.amount
            )
            if item is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        if payload.name is not None and not payload.name.strip():
            if not service.delete_food_item(user_id, day_key, meal_id, item_id):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
            return {"deleted": True}
        if payload.name is not None:
            item = service.rename_food_item(
                user_id, day_key, meal_id, item_id, payload.name
            )
            if item is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        if item is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)
        return serialize_item(item)

    @app.delete("/days/{day}/meals/{meal_id}/items/{item_id}")
    async def delete_item(
        day: str, item_id: UUID, request: Request, meal_id: MealId
    ) -> dict[str, object]:
        """Remove a food item from a meal."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        deleted = state_container.meal_plan_service.delete_food_item(
            user_id, _day(day), meal_id, item_id
        )
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"deleted": True}

    @app.delete("/days/{day}/meals/{meal_id}/items")
    async def clear_meal(
        day: str, request: Request, meal_id: MealId
    ) -> dict[str, object]:
        """Remove every item from a meal."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        removed = state_container.meal_plan_service.clear_meal(
            user_id, _day(day), meal_id
        )
        return {"removed": removed}

    @app.post("/days/{day}/meals/{meal_id}/copy")
    async def copy_meal(
        day: str, payload: MealCopyRequest, request: Request, meal_id: MealId
    ) -> dict[str, object]:
        """Replace another meal's items with this meal's items."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        items = state_container.meal_plan_service.copy_meal(
            user_id,
            _day(day),
            source_meal_id=meal_id,
            target_meal_id=payload.target_meal_id,
            target_day=payload.target_day,
        )
        return {"items": [serialize_item(item) for item in items]}

    @app.get("/days/{day}/report")
    async def day_report(day: str, request: Request) -> dict[str, object]:
        """Return the achievement report for a day."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        report = state_container.report_service.get_day_report(user_id, _day(day))
        return serialize_day_report(report)

    @app.get("/reports/week")
    async def week_report(request: Request) -> dict[str, object]:
        """Return the weekly achievement report."""
        state_container: AppContainer = request.app.state.container
        user_id = _require_user_id(request)
        report = state_container.report_service.get_week_report(user_id)
        return serialize_week_report(report)

    return app


def _require_user_id(request: Request) -> UUID:
    """Return the caller id set by the upstream auth layer."""
    raw = request.headers.get("X-User-Id")
    if not raw:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(raw)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc


def _day(raw: str) -> DayKey:
    try:
        return parse_day(raw)
    except MalformedDayError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
