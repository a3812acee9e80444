"""Calorie and macronutrient calculations."""

from collections.abc import Sequence

from nutrition_ledger.domain.errors import ValidationError
from nutrition_ledger.domain.meals import FoodItem, Meal
from nutrition_ledger.domain.nutrition import FoodSearchResult, MacroTotals

PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

_ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


def total_calories(meals: Sequence[Meal]) -> int:
    """Return the sum of meal calories."""
    return sum(meal.calories for meal in meals)


def total_macros(meals: Sequence[Meal]) -> MacroTotals:
    """Return component-wise macro totals."""
    protein = carbs = fat = 0
    for meal in meals:
        protein += meal.protein
        carbs += meal.carbs
        fat += meal.fat
    return MacroTotals(protein=protein, carbs=carbs, fat=fat)


def remaining_calories(goal: int, consumed: int) -> int:
    """Return calories left for the day, never negative."""
    return max(0, goal - consumed)


def percentage(current: float, goal: float) -> int:
    """Return progress toward a goal as a display percentage in [0, 100]."""
    if goal == 0:
        return 0
    return max(0, min(100, round(current / goal * 100)))


def calories_from_macros(protein: float, carbs: float, fat: float) -> float:
    """Estimate calories with Atwater factors."""
    return (
        protein * PROTEIN_KCAL_PER_G
        + carbs * CARBS_KCAL_PER_G
        + fat * FAT_KCAL_PER_G
    )


def macro_percentages(protein: float, carbs: float, fat: float) -> MacroTotals:
    """Return each macro's share of total calories."""
    calories = calories_from_macros(protein, carbs, fat)
    if calories == 0:
        return MacroTotals(protein=0, carbs=0, fat=0)
    return MacroTotals(
        protein=round(protein * PROTEIN_KCAL_PER_G / calories * 100),
        carbs=round(carbs * CARBS_KCAL_PER_G / calories * 100),
        fat=round(fat * FAT_KCAL_PER_G / calories * 100),
    )


def estimate_daily_calories(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: str,
    activity_level: str = "moderate",
) -> int:
    """Estimate daily needs with Mifflin-St Jeor and an activity multiplier."""
    for field, value in (
        ("weight_kg", weight_kg),
        ("height_cm", height_cm),
        ("age", age),
    ):
        if value <= 0:
            raise ValidationError(field, f"{field} must be positive")
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr += 5 if sex == "male" else -161
    multiplier = _ACTIVITY_MULTIPLIERS.get(activity_level, 1.55)
    return round(bmr * multiplier)


def scale_food(result: FoodSearchResult, multiplier: float = 1.0) -> FoodItem:
    """Scale a per-100 g search result to a serving multiple."""
    if multiplier <= 0:
        raise ValidationError("multiplier", "serving multiplier must be positive")
    grams = multiplier * 100
    return FoodItem(
        name=result.name,
        brand=result.brand,
        serving=f"{grams:g}g",
        calories=round(result.calories_per_100g * multiplier),
        protein=round(result.protein_per_100g * multiplier),
        carbs=round(result.carbs_per_100g * multiplier),
        fat=round(result.fat_per_100g * multiplier),
    )
