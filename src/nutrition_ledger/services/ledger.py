"""Daily nutrition ledger with calendar-day rollover."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, TypeVar

from pydantic import Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from nutrition_ledger.domain.errors import InvalidMealError, ValidationError
from nutrition_ledger.domain.meals import (
    DAILY_GOAL_MAX,
    DAILY_GOAL_MIN,
    DEFAULT_DAILY_GOAL,
    DayLog,
    Goals,
    GoalsUpdate,
    LedgerSnapshot,
    MacroGoals,
    Meal,
)
from nutrition_ledger.domain.nutrition import DailySummary
from nutrition_ledger.services.calculations import (
    percentage,
    remaining_calories,
    total_calories,
    total_macros,
)
from nutrition_ledger.services.clock import Clock, is_same_day
from nutrition_ledger.services.storage import (
    DAILY_GOAL_KEY,
    LAST_ACTIVE_KEY,
    MACRO_GOALS_KEY,
    MEALS_KEY,
    STREAK_KEY,
    StorageService,
)

_MACRO_FIELDS = ("protein", "carbs", "fat")

_MEALS = TypeAdapter(list[Meal])
_DAILY_GOAL = TypeAdapter(
    Annotated[int, Field(ge=DAILY_GOAL_MIN, le=DAILY_GOAL_MAX, strict=True)]
)
_MACRO_GOALS = TypeAdapter(MacroGoals)
_STREAK = TypeAdapter(Annotated[int, Field(ge=0, strict=True)])
_INSTANT = TypeAdapter(datetime)

_T = TypeVar("_T")

_logger = logging.getLogger(__name__)


@dataclass
class NutritionDayLedger:
    """Owns today's meals, the goals, and the logging streak."""

    storage: StorageService
    clock: Clock
    day_log: DayLog = field(default_factory=DayLog)
    goals: Goals = field(default_factory=Goals)
    streak: int = 0

    async def load(self) -> LedgerSnapshot:
        """Read persisted state, rolling the day over when the date changed."""
        last_active = await self._read(LAST_ACTIVE_KEY, _INSTANT, None)
        self.day_log = DayLog(
            meals=await self._read(MEALS_KEY, _MEALS, []),
            last_active=last_active,
        )
        self.goals = Goals(
            daily_calorie_goal=await self._read(
                DAILY_GOAL_KEY, _DAILY_GOAL, DEFAULT_DAILY_GOAL
            ),
            macro_goals=await self._read(MACRO_GOALS_KEY, _MACRO_GOALS, MacroGoals()),
        )
        self.streak = await self._read(STREAK_KEY, _STREAK, 0)

        if last_active is not None and not is_same_day(last_active, self.clock.now()):
            await self.rollover()

        now = self.clock.now()
        self.day_log.last_active = now
        await self.storage.set(LAST_ACTIVE_KEY, now.isoformat())
        return self.snapshot()

    async def rollover(self) -> bool:
        """Close the current day: update the streak and clear the meals."""
        closed_meals = len(self.day_log.meals)
        self.streak = self.streak + 1 if closed_meals else 0
        now = self.clock.now()
        self.day_log = DayLog(meals=[], last_active=now)
        persisted = await self.storage.set_many(
            {
                STREAK_KEY: self.streak,
                MEALS_KEY: [],
                LAST_ACTIVE_KEY: now.isoformat(),
            }
        )
        _logger.info(
            "Day rolled over: closed_meals=%s streak=%s persisted=%s",
            closed_meals,
            self.streak,
            persisted,
        )
        return persisted

    async def add_meal(self, meal: Meal) -> bool:
        """Append a meal and persist the day's list."""
        if not meal.items:
            raise InvalidMealError()
        self.day_log.meals = [*self.day_log.meals, meal]
        return await self._write_meals()

    async def edit_meal(self, meal_id: str, updated: Meal) -> bool:
        """Replace a meal in place, keeping its id and timestamp.

        Unknown ids leave the list unchanged.
        """
        if not updated.items:
            raise InvalidMealError()
        found = False
        meals: list[Meal] = []
        for meal in self.day_log.meals:
            if meal.id == meal_id:
                found = True
                meals.append(
                    updated.model_copy(
                        update={"id": meal.id, "timestamp": meal.timestamp}
                    )
                )
            else:
                meals.append(meal)
        if not found:
            _logger.info("Edit ignored, no meal with id %s", meal_id)
            return True
        self.day_log.meals = meals
        return await self._write_meals()

    async def delete_meal(self, meal_id: str) -> bool:
        """Remove a meal if present and persist the day's list."""
        meals = [meal for meal in self.day_log.meals if meal.id != meal_id]
        if len(meals) == len(self.day_log.meals):
            _logger.info("Delete ignored, no meal with id %s", meal_id)
            return True
        self.day_log.meals = meals
        return await self._write_meals()

    async def set_daily_goal(self, value: object) -> GoalsUpdate:
        """Validate and persist the daily calorie goal."""
        goal = _require_int("daily_calorie_goal", value)
        if not DAILY_GOAL_MIN <= goal <= DAILY_GOAL_MAX:
            raise ValidationError(
                "daily_calorie_goal",
                f"must be between {DAILY_GOAL_MIN} and {DAILY_GOAL_MAX}",
            )
        self.goals = self.goals.model_copy(update={"daily_calorie_goal": goal})
        persisted = await self.storage.set(DAILY_GOAL_KEY, goal)
        return GoalsUpdate(goals=self.goals, persisted=persisted)

    async def set_macro_goals(
        self, values: MacroGoals | Mapping[str, object]
    ) -> GoalsUpdate:
        """Validate and persist protein, carbs and fat targets."""
        raw = values.model_dump() if isinstance(values, MacroGoals) else values
        checked: dict[str, int] = {}
        for name in _MACRO_FIELDS:
            if name not in raw:
                raise ValidationError(name, "is required")
            amount = _require_int(name, raw[name])
            if amount < 0:
                raise ValidationError(name, "cannot be negative")
            checked[name] = amount
        macro_goals = MacroGoals(**checked)
        self.goals = self.goals.model_copy(update={"macro_goals": macro_goals})
        persisted = await self.storage.set(MACRO_GOALS_KEY, macro_goals.model_dump())
        return GoalsUpdate(goals=self.goals, persisted=persisted)

    def get_meal(self, meal_id: str) -> Meal | None:
        """Return today's meal with the given id."""
        for meal in self.day_log.meals:
            if meal.id == meal_id:
                return meal
        return None

    def snapshot(self) -> LedgerSnapshot:
        """Return the current in-memory state."""
        return LedgerSnapshot(
            meals=list(self.day_log.meals), goals=self.goals, streak=self.streak
        )

    def summary(self) -> DailySummary:
        """Compute dashboard aggregates for the current state."""
        meals = self.day_log.meals
        consumed = total_calories(meals)
        macros = total_macros(meals)
        goal = self.goals.daily_calorie_goal
        macro_goals = self.goals.macro_goals
        return DailySummary(
            total_calories=consumed,
            remaining_calories=remaining_calories(goal, consumed),
            calorie_percentage=percentage(consumed, goal),
            macros=macros,
            protein_percentage=percentage(macros.protein, macro_goals.protein),
            carbs_percentage=percentage(macros.carbs, macro_goals.carbs),
            fat_percentage=percentage(macros.fat, macro_goals.fat),
            streak=self.streak,
            meal_count=len(meals),
        )

    async def _write_meals(self) -> bool:
        return await self.storage.set(
            MEALS_KEY, [meal.model_dump(mode="json") for meal in self.day_log.meals]
        )

    async def _read(self, key: str, adapter: TypeAdapter[_T], default: _T) -> _T:
        raw = await self.storage.get(key)
        if raw is None:
            return default
        try:
            return adapter.validate_python(raw)
        except PydanticValidationError:
            _logger.warning("Ignoring malformed stored value for %s", key)
            return default


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(name, "must be a whole number")
    return value
