"""Weekly meal plan generation with template fallback."""

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from nutrition_ledger.domain.errors import RemoteServiceError, ValidationError
from nutrition_ledger.domain.meals import (
    DAILY_GOAL_MAX,
    DAILY_GOAL_MIN,
    DEFAULT_DAILY_GOAL,
    MealType,
)
from nutrition_ledger.domain.plans import (
    WEEKLY_PLAN_ADAPTER,
    MealPreferences,
    MealRequest,
    Recipe,
    WeeklyMealPlan,
)
from nutrition_ledger.services.grocery import build_grocery_list
from nutrition_ledger.services.meal_templates import PREP_MINUTES, TEMPLATES, image_url
from nutrition_ledger.services.storage import (
    DAILY_GOAL_KEY,
    MEAL_PLAN_KEY,
    PREFERENCES_KEY,
    StorageService,
)

DAYS_PER_WEEK = 7

CALORIE_SPLIT: dict[MealType, float] = {
    MealType.BREAKFAST: 0.25,
    MealType.LUNCH: 0.35,
    MealType.DINNER: 0.30,
    MealType.SNACK: 0.10,
}

RECIPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "calories": {"type": "integer", "minimum": 0},
        "protein": {"type": "integer", "minimum": 0},
        "carbs": {"type": "integer", "minimum": 0},
        "fat": {"type": "integer", "minimum": 0},
        "servings": {"type": "integer", "minimum": 1},
        "prep_minutes": {"type": "integer", "minimum": 0},
        "summary": {"type": "string"},
        "ingredients": {"type": "array", "items": {"type": "string"}},
        "instructions": {"type": "array", "items": {"type": "string"}},
    },
    "required": [
        "title",
        "calories",
        "protein",
        "carbs",
        "fat",
        "servings",
        "prep_minutes",
        "summary",
        "ingredients",
        "instructions",
    ],
    "additionalProperties": False,
}

_DEFAULT_SUMMARY = "Delicious and nutritious meal."

_logger = logging.getLogger(__name__)


class MealGenerator(Protocol):
    """Interface for AI recipe generation."""

    async def generate(
        self, request: MealRequest, schema: dict[str, object]
    ) -> dict[str, object]:
        """Return a raw recipe payload matching the schema."""


@dataclass
class MealPlanService:
    """Stores preferences and builds weekly plans."""

    storage: StorageService
    generator: MealGenerator
    rng: random.Random = field(default_factory=random.Random)

    async def get_preferences(self) -> MealPreferences | None:
        """Return saved preferences, or None when unset or unreadable."""
        raw = await self.storage.get(PREFERENCES_KEY)
        if raw is None:
            return None
        try:
            return MealPreferences.model_validate(raw)
        except PydanticValidationError:
            _logger.warning("Ignoring malformed stored meal preferences")
            return None

    async def save_preferences(
        self, preferences: MealPreferences | Mapping[str, object]
    ) -> bool:
        """Validate and persist preferences; at least one cuisine is required."""
        if isinstance(preferences, Mapping):
            if not preferences.get("cuisines"):
                raise ValidationError("cuisines", "select at least one cuisine")
            try:
                preferences = MealPreferences.model_validate(preferences)
            except PydanticValidationError as exc:
                raise _as_validation_error(exc) from exc
        elif not preferences.cuisines:
            raise ValidationError("cuisines", "select at least one cuisine")
        return await self.storage.set(PREFERENCES_KEY, preferences.model_dump())

    async def load_plan(self) -> WeeklyMealPlan:
        """Return the saved plan, or an empty one."""
        raw = await self.storage.get(MEAL_PLAN_KEY, {})
        try:
            return WEEKLY_PLAN_ADAPTER.validate_python(raw)
        except PydanticValidationError:
            _logger.warning("Ignoring malformed stored meal plan")
            return {}

    async def generate_weekly_plan(self) -> WeeklyMealPlan:
        """Generate and persist seven days of meals from saved preferences."""
        preferences = await self.get_preferences()
        if preferences is None:
            raise ValidationError(
                "preferences", "set meal preferences before generating a plan"
            )
        daily_goal = await self._daily_goal()
        plan: WeeklyMealPlan = {}
        for day in range(DAYS_PER_WEEK):
            plan[day] = {}
            for meal_type, share in CALORIE_SPLIT.items():
                request = MealRequest(
                    meal_type=meal_type,
                    target_calories=round(daily_goal * share),
                    diet=preferences.diet,
                    cuisine=self.rng.choice(preferences.cuisines),
                    allergies=list(preferences.allergies),
                    budget=preferences.budget,
                )
                plan[day][meal_type] = await self.generate_meal(request, day)
        persisted = await self.storage.set(
            MEAL_PLAN_KEY, WEEKLY_PLAN_ADAPTER.dump_python(plan, mode="json")
        )
        if not persisted:
            _logger.warning("Generated meal plan could not be saved")
        return plan

    async def generate_meal(self, request: MealRequest, day_index: int) -> Recipe:
        """Return a generated recipe, or the template for the slot on failure."""
        try:
            payload = await self.generator.generate(request, RECIPE_SCHEMA)
            return _recipe_from_payload(payload, request, day_index)
        except RemoteServiceError as exc:
            _logger.warning(
                "Meal generation failed for %s day %s, using template: %s",
                request.meal_type,
                day_index,
                exc,
            )
            return template_recipe(
                request.meal_type, request.target_calories, day_index
            )

    async def grocery_list(self) -> dict[str, list[str]]:
        """Return the grocery list for the saved plan."""
        return build_grocery_list(await self.load_plan())

    async def _daily_goal(self) -> int:
        goal = await self.storage.get(DAILY_GOAL_KEY, DEFAULT_DAILY_GOAL)
        if (
            isinstance(goal, int)
            and not isinstance(goal, bool)
            and DAILY_GOAL_MIN <= goal <= DAILY_GOAL_MAX
        ):
            return goal
        return DEFAULT_DAILY_GOAL


def template_recipe(meal_type: MealType, calories: int, day_index: int) -> Recipe:
    """Return the canned recipe for a meal slot."""
    variations = TEMPLATES[meal_type]
    title, photo_id, summary = variations[day_index % len(variations)]
    protein, carbs, fat = default_macros(calories)
    return Recipe(
        id=f"template-{meal_type.lower()}-day{day_index}",
        title=title,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        servings=1,
        prep_minutes=PREP_MINUTES[meal_type],
        summary=summary,
        image_url=image_url(photo_id),
        source="template",
    )


def default_macros(calories: int) -> tuple[int, int, int]:
    """Split calories 25/50/25 across protein, carbs and fat grams."""
    return (
        round(calories * 0.25 / 4),
        round(calories * 0.50 / 4),
        round(calories * 0.25 / 9),
    )


def _recipe_from_payload(
    payload: dict[str, object], request: MealRequest, day_index: int
) -> Recipe:
    if not isinstance(payload, dict):
        raise RemoteServiceError("Generated recipe was not a JSON object")
    target = request.target_calories
    protein, carbs, fat = default_macros(target)
    variations = TEMPLATES[request.meal_type]
    _, photo_id, _ = variations[day_index % len(variations)]
    try:
        return Recipe(
            id=(
                f"generated-{request.meal_type.lower()}"
                f"-day{day_index}-{uuid4().hex[:8]}"
            ),
            title=payload["title"],
            calories=payload.get("calories") or target,
            protein=payload.get("protein") or protein,
            carbs=payload.get("carbs") or carbs,
            fat=payload.get("fat") or fat,
            servings=payload.get("servings") or 1,
            prep_minutes=payload.get("prep_minutes") or 30,
            summary=payload.get("summary") or _DEFAULT_SUMMARY,
            ingredients=payload.get("ingredients") or [],
            instructions=payload.get("instructions") or [],
            image_url=image_url(photo_id),
            source="generated",
        )
    except (KeyError, PydanticValidationError) as exc:
        raise RemoteServiceError("Generated recipe was incomplete") from exc


def _as_validation_error(exc: PydanticValidationError) -> ValidationError:
    error = exc.errors()[0]
    name = ".".join(str(part) for part in error.get("loc", ())) or "preferences"
    return ValidationError(name, error.get("msg", "invalid value"))
