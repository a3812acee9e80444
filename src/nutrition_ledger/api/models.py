"""Pydantic request bodies for the HTTP API."""

from pydantic import BaseModel, Field

from nutrition_ledger.domain.meals import FoodItem, MealType
from nutrition_ledger.domain.nutrition import FoodSearchResult


class SignInRequest(BaseModel):
    """Credentials for an existing account."""

    email: str
    password: str


class SignUpRequest(BaseModel):
    """Details for a new account."""

    email: str
    password: str
    name: str


class FoodPortionRequest(BaseModel):
    """A searched food, per 100 g, eaten in multiples of 100 g."""

    name: str
    brand: str | None = None
    calories_per_100g: int = Field(ge=0)
    protein_per_100g: int = Field(ge=0)
    carbs_per_100g: int = Field(ge=0)
    fat_per_100g: int = Field(ge=0)
    multiplier: float = 1.0

    def to_search_result(self) -> FoodSearchResult:
        return FoodSearchResult(
            name=self.name,
            brand=self.brand,
            calories_per_100g=self.calories_per_100g,
            protein_per_100g=self.protein_per_100g,
            carbs_per_100g=self.carbs_per_100g,
            fat_per_100g=self.fat_per_100g,
        )


class MealRequestBody(BaseModel):
    """Meal to log or replace; totals are computed from the items.

    Foods picked from search are scaled to their portion and appended
    after the explicit items.
    """

    meal_type: MealType
    items: list[FoodItem] = Field(default_factory=list)
    foods: list[FoodPortionRequest] = Field(default_factory=list)


class DailyGoalRequest(BaseModel):
    daily_calorie_goal: int


class MacroGoalsRequest(BaseModel):
    protein: int
    carbs: int
    fat: int


class PreferencesRequest(BaseModel):
    """Meal plan preferences; validated by the meal plan service."""

    diet: str = "balanced"
    budget: str = "moderate"
    cuisines: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
