"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

DAILY_GOAL_MIN = 500
DAILY_GOAL_MAX = 10000
DEFAULT_DAILY_GOAL = 2000


class MealType(StrEnum):
    """Fixed set of meal slots."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


class FoodItem(BaseModel):
    """Food line item with nutrition scaled to the chosen serving."""

    name: str = Field(min_length=1)
    serving: str = "100g"
    brand: str | None = None
    calories: int = Field(default=0, ge=0)
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fat: int = Field(default=0, ge=0)


class Meal(BaseModel):
    """Logged eating event with denormalized totals."""

    id: str = Field(min_length=1)
    meal_type: MealType
    items: list[FoodItem] = Field(default_factory=list)
    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fat: int = Field(ge=0)
    timestamp: datetime

    @model_validator(mode="after")
    def _totals_match_items(self) -> "Meal":
        expected = _sum_items(self.items)
        actual = (self.calories, self.protein, self.carbs, self.fat)
        if actual != expected:
            raise ValueError(
                f"meal totals {actual} do not match the sum of its items {expected}"
            )
        return self

    @classmethod
    def create(
        cls,
        meal_type: MealType,
        items: list[FoodItem],
        timestamp: datetime,
        meal_id: str | None = None,
    ) -> "Meal":
        """Build a meal whose totals are computed from its items."""
        calories, protein, carbs, fat = _sum_items(items)
        return cls(
            id=meal_id or uuid4().hex,
            meal_type=meal_type,
            items=list(items),
            calories=calories,
            protein=protein,
            carbs=carbs,
            fat=fat,
            timestamp=timestamp,
        )


class MacroGoals(BaseModel):
    """Daily macronutrient targets in grams."""

    protein: int = Field(default=150, ge=0)
    carbs: int = Field(default=200, ge=0)
    fat: int = Field(default=65, ge=0)


class Goals(BaseModel):
    """Calorie and macro goals."""

    daily_calorie_goal: int = Field(
        default=DEFAULT_DAILY_GOAL, ge=DAILY_GOAL_MIN, le=DAILY_GOAL_MAX
    )
    macro_goals: MacroGoals = Field(default_factory=MacroGoals)


@dataclass
class DayLog:
    """Meals for the current calendar day."""

    meals: list[Meal] = field(default_factory=list)
    last_active: datetime | None = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """State returned to the UI after loading the ledger."""

    meals: list[Meal]
    goals: Goals
    streak: int


@dataclass(frozen=True)
class GoalsUpdate:
    """Result of a goal change."""

    goals: Goals
    persisted: bool


def _sum_items(items: list[FoodItem]) -> tuple[int, int, int, int]:
    calories = protein = carbs = fat = 0
    for item in items:
        calories += item.calories
        protein += item.protein
        carbs += item.carbs
        fat += item.fat
    return calories, protein, carbs, fat
