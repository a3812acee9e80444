"""Grocery list built from a weekly meal plan."""

from nutrition_ledger.domain.plans import WeeklyMealPlan

# Order matters: the first category whose keyword matches wins.
_CATEGORIES: list[tuple[str, tuple[str, ...]]] = [
    (
        "Proteins",
        ("chicken", "beef", "pork", "fish", "salmon", "turkey", "tofu", "meat"),
    ),
    (
        "Vegetables",
        (
            "lettuce",
            "tomato",
            "onion",
            "carrot",
            "broccoli",
            "spinach",
            "pepper",
            "cucumber",
            "vegetable",
            "celery",
            "zucchini",
            "kale",
        ),
    ),
    (
        "Fruits",
        (
            "apple",
            "banana",
            "orange",
            "berry",
            "grape",
            "fruit",
            "lemon",
            "lime",
            "avocado",
        ),
    ),
    (
        "Grains & Carbs",
        (
            "rice",
            "pasta",
            "bread",
            "oats",
            "quinoa",
            "flour",
            "tortilla",
            "noodle",
            "cereal",
        ),
    ),
    ("Dairy & Eggs", ("milk", "cheese", "yogurt", "butter", "cream", "egg")),
    (
        "Pantry Staples",
        (
            "oil",
            "salt",
            "spice",
            "sauce",
            "vinegar",
            "sugar",
            "honey",
            "garlic",
            "seasoning",
        ),
    ),
]

OTHER_CATEGORY = "Other"


def categorize_ingredient(ingredient: str) -> str:
    """Return the grocery category for an ingredient line."""
    lower = ingredient.lower()
    for category, keywords in _CATEGORIES:
        if any(keyword in lower for keyword in keywords):
            return category
    return OTHER_CATEGORY


def build_grocery_list(plan: WeeklyMealPlan) -> dict[str, list[str]]:
    """Group every plan ingredient by category, without duplicates."""
    grouped: dict[str, list[str]] = {
        category: [] for category, _ in _CATEGORIES
    }
    grouped[OTHER_CATEGORY] = []
    for day in sorted(plan):
        for recipe in plan[day].values():
            for ingredient in recipe.ingredients:
                bucket = grouped[categorize_ingredient(ingredient)]
                if ingredient not in bucket:
                    bucket.append(ingredient)
    return {category: items for category, items in grouped.items() if items}
