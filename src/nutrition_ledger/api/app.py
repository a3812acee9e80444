"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from nutrition_ledger.api.models import (
    DailyGoalRequest,
    MacroGoalsRequest,
    MealRequestBody,
    PreferencesRequest,
    SignInRequest,
    SignUpRequest,
)
from nutrition_ledger.app_logging import configure_logging
from nutrition_ledger.containers import AppContainer
from nutrition_ledger.domain.errors import (
    NotFoundError,
    NotSignedInError,
    RemoteServiceError,
    ValidationError,
)
from nutrition_ledger.domain.meals import FoodItem, Meal
from nutrition_ledger.services.auth import UserSession
from nutrition_ledger.services.calculations import (
    estimate_daily_calories,
    macro_percentages,
    scale_food,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"field": exc.field, "detail": exc.message},
        )

    @app.exception_handler(NotSignedInError)
    async def not_signed_in(request: Request, exc: NotSignedInError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Sign in to continue"},
        )

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(RemoteServiceError)
    async def remote_service_error(
        request: Request, exc: RemoteServiceError
    ) -> JSONResponse:
        logger.warning("Upstream service failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": _format_remote_error(request.app.state.container, exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/sign-in")
    async def sign_in(body: SignInRequest, request: Request) -> dict[str, object]:
        """Sign in and open the user's ledger."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.session_manager.sign_in(
            body.email, body.password
        )
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail=result.error
            )
        return {"user": result.user}

    @app.post("/auth/sign-up")
    async def sign_up(body: SignUpRequest, request: Request) -> dict[str, object]:
        """Create an account and open its ledger."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.session_manager.sign_up(
            body.email, body.password, body.name
        )
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=result.error
            )
        return {"user": result.user}

    @app.post("/auth/sign-out")
    async def sign_out(request: Request) -> dict[str, str]:
        state_container: AppContainer = request.app.state.container
        result = await state_container.session_manager.sign_out()
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=result.error
            )
        return {"status": "ok"}

    @app.get("/ledger")
    async def get_ledger(
        session: UserSession = Depends(require_session),
    ) -> dict[str, object]:
        """Load today's ledger, rolling the day over when needed."""
        snapshot = await session.ledger.load()
        summary = session.ledger.summary()
        return {
            "meals": snapshot.meals,
            "goals": snapshot.goals,
            "streak": snapshot.streak,
            "summary": summary,
            "macro_split": macro_percentages(
                summary.macros.protein, summary.macros.carbs, summary.macros.fat
            ),
        }

    @app.post("/ledger/meals", status_code=status.HTTP_201_CREATED)
    async def add_meal(
        body: MealRequestBody, session: UserSession = Depends(require_session)
    ) -> dict[str, object]:
        """Log a meal for today."""
        meal = Meal.create(
            body.meal_type, _meal_items(body), session.ledger.clock.now()
        )
        persisted = await session.ledger.add_meal(meal)
        return {"meal": meal, "persisted": persisted}

    @app.put("/ledger/meals/{meal_id}")
    async def edit_meal(
        meal_id: str,
        body: MealRequestBody,
        session: UserSession = Depends(require_session),
    ) -> dict[str, object]:
        """Replace a meal's type and items."""
        updated = Meal.create(
            body.meal_type, _meal_items(body), session.ledger.clock.now()
        )
        persisted = await session.ledger.edit_meal(meal_id, updated)
        meal = session.ledger.get_meal(meal_id)
        if meal is None:
            raise NotFoundError(f"no meal with id {meal_id}")
        return {"meal": meal, "persisted": persisted}

    @app.delete("/ledger/meals/{meal_id}")
    async def delete_meal(
        meal_id: str, session: UserSession = Depends(require_session)
    ) -> dict[str, object]:
        persisted = await session.ledger.delete_meal(meal_id)
        return {"persisted": persisted}

    @app.delete("/ledger/data")
    async def clear_data(
        session: UserSession = Depends(require_session),
    ) -> dict[str, object]:
        """Erase everything stored for the signed-in user and start over."""
        persisted = await session.storage.clear()
        snapshot = await session.ledger.load()
        return {
            "persisted": persisted,
            "goals": snapshot.goals,
            "streak": snapshot.streak,
        }

    @app.put("/ledger/goal")
    async def set_daily_goal(
        body: DailyGoalRequest, session: UserSession = Depends(require_session)
    ) -> dict[str, object]:
        update = await session.ledger.set_daily_goal(body.daily_calorie_goal)
        return {"goals": update.goals, "persisted": update.persisted}

    @app.put("/ledger/macro-goals")
    async def set_macro_goals(
        body: MacroGoalsRequest, session: UserSession = Depends(require_session)
    ) -> dict[str, object]:
        update = await session.ledger.set_macro_goals(body.model_dump())
        return {"goals": update.goals, "persisted": update.persisted}

    @app.get("/calculations/daily-calories")
    async def daily_calories(
        weight_kg: float,
        height_cm: float,
        age: int,
        sex: str,
        activity_level: str = "moderate",
    ) -> dict[str, int]:
        """Suggest a daily calorie goal from body measurements."""
        return {
            "daily_calories": estimate_daily_calories(
                weight_kg, height_cm, age, sex, activity_level
            )
        }

    @app.get("/foods/search", dependencies=[Depends(require_session)])
    async def search_foods(q: str, request: Request) -> dict[str, object]:
        """Search foods by name; values are per 100 g."""
        state_container: AppContainer = request.app.state.container
        return {"results": await state_container.food_search_service.search(q)}

    @app.get("/plans/preferences")
    async def get_preferences(
        session: UserSession = Depends(require_session),
    ) -> dict[str, object]:
        return {"preferences": await session.meal_plans.get_preferences()}

    @app.put("/plans/preferences")
    async def save_preferences(
        body: PreferencesRequest, session: UserSession = Depends(require_session)
    ) -> dict[str, object]:
        persisted = await session.meal_plans.save_preferences(body.model_dump())
        return {"persisted": persisted}

    @app.post("/plans/generate")
    async def generate_plan(
        session: UserSession = Depends(require_session),
    ) -> dict[str, object]:
        """Generate a new weekly plan from saved preferences."""
        return {"plan": await session.meal_plans.generate_weekly_plan()}

    @app.get("/plans")
    async def get_plan(
        session: UserSession = Depends(require_session),
    ) -> dict[str, object]:
        return {"plan": await session.meal_plans.load_plan()}

    @app.get("/plans/grocery-list")
    async def grocery_list(
        session: UserSession = Depends(require_session),
    ) -> dict[str, object]:
        return {"categories": await session.meal_plans.grocery_list()}

    return app


def require_session(request: Request) -> UserSession:
    """Return the signed-in user's session; NotSignedInError maps to 401."""
    container: AppContainer = request.app.state.container
    return container.session_manager.require_session()


def _meal_items(body: MealRequestBody) -> list[FoodItem]:
    portions = [
        scale_food(food.to_search_result(), food.multiplier) for food in body.foods
    ]
    return [*body.items, *portions]


def _format_remote_error(state_container: AppContainer, exc: Exception) -> str:
    """Return a user-facing upstream error message with local debug info."""
    fallback = "Upstream service unavailable. Please try again."
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
