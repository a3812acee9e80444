"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroTotals:
    """Macronutrient totals in grams."""

    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class FoodSearchResult:
    """Food returned by a search provider, with values per 100 g."""

    name: str
    brand: str | None
    calories_per_100g: int
    protein_per_100g: int
    carbs_per_100g: int
    fat_per_100g: int
    serving: str = "100g"
    source: str = "manual"


@dataclass(frozen=True)
class DailySummary:
    """Aggregates shown on the dashboard."""

    total_calories: int
    remaining_calories: int
    calorie_percentage: int
    macros: MacroTotals
    protein_percentage: int
    carbs_percentage: int
    fat_percentage: int
    streak: int
    meal_count: int
