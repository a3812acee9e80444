"""Domain models for meal preferences and weekly plans."""

from dataclasses import dataclass

from pydantic import BaseModel, Field, TypeAdapter

from nutrition_ledger.domain.meals import MealType


class MealPreferences(BaseModel):
    """Inputs for weekly meal plan generation."""

    diet: str = "balanced"
    budget: str = "moderate"
    cuisines: list[str] = Field(
        default_factory=lambda: ["american", "italian", "mexican"], min_length=1
    )
    allergies: list[str] = Field(default_factory=list)


class Recipe(BaseModel):
    """Recipe occupying one slot of a meal plan."""

    id: str
    title: str
    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fat: int = Field(ge=0)
    servings: int = Field(default=1, ge=1)
    prep_minutes: int = Field(default=30, ge=0)
    summary: str = ""
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    image_url: str | None = None
    source: str = "template"


@dataclass(frozen=True)
class MealRequest:
    """Parameters sent to a meal generator."""

    meal_type: MealType
    target_calories: int
    diet: str
    cuisine: str
    allergies: list[str]
    budget: str


WeeklyMealPlan = dict[int, dict[MealType, Recipe]]

WEEKLY_PLAN_ADAPTER: TypeAdapter[WeeklyMealPlan] = TypeAdapter(WeeklyMealPlan)
