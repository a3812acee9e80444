"""Canned recipes used when meal generation is unavailable."""

from nutrition_ledger.domain.meals import MealType

_UNSPLASH = "https://images.unsplash.com"

TEMPLATES: dict[MealType, list[tuple[str, str, str]]] = {
    MealType.BREAKFAST: [
        (
            "Oatmeal with Berries",
            "photo-1517673132405-a56a62b18caf",
            "Warm oatmeal topped with fresh berries, honey, and almonds.",
        ),
        (
            "Scrambled Eggs & Toast",
            "photo-1525351484163-7529414344d8",
            "Fluffy scrambled eggs with whole wheat toast and avocado.",
        ),
        (
            "Greek Yogurt Parfait",
            "photo-1488477181946-6428a0291777",
            "Creamy Greek yogurt layered with granola and fresh fruit.",
        ),
        (
            "Protein Pancakes",
            "photo-1567620905732-2d1ec7ab7445",
            "Fluffy protein pancakes topped with banana and maple syrup.",
        ),
        (
            "Avocado Toast",
            "photo-1541519227354-08fa5d50c44d",
            "Smashed avocado on sourdough with poached eggs.",
        ),
        (
            "Smoothie Bowl",
            "photo-1590301157890-4810ed352733",
            "Thick smoothie bowl topped with granola, coconut, and berries.",
        ),
        (
            "French Toast",
            "photo-1484723091739-30a097e8f929",
            "Classic French toast with cinnamon and fresh strawberries.",
        ),
    ],
    MealType.LUNCH: [
        (
            "Grilled Chicken Salad",
            "photo-1546069901-ba9599a7e63c",
            "Fresh grilled chicken breast over mixed greens with vinaigrette.",
        ),
        (
            "Turkey & Cheese Wrap",
            "photo-1626700051175-6818013e1d4f",
            "Whole wheat wrap with turkey, cheese, lettuce, and tomato.",
        ),
        (
            "Quinoa Buddha Bowl",
            "photo-1512621776951-a57141f2eefd",
            "Quinoa bowl with roasted vegetables, chickpeas, and tahini.",
        ),
        (
            "Chicken Caesar Salad",
            "photo-1550304943-4f24f54ddde9",
            "Crisp romaine with grilled chicken, parmesan, and Caesar dressing.",
        ),
        (
            "Tuna Sandwich",
            "photo-1619740455993-557d41f24f44",
            "Tuna salad sandwich on whole grain bread with lettuce.",
        ),
        (
            "Veggie Stir-Fry",
            "photo-1512058564366-18510be2db19",
            "Colorful vegetable stir-fry with tofu over brown rice.",
        ),
        (
            "Chicken Burrito Bowl",
            "photo-1604467794349-0b74285de7e7",
            "Grilled chicken with rice, beans, salsa, and guacamole.",
        ),
    ],
    MealType.DINNER: [
        (
            "Baked Salmon with Vegetables",
            "photo-1467003909585-2f8a72700288",
            "Baked salmon fillet with roasted seasonal vegetables.",
        ),
        (
            "Grilled Steak & Potatoes",
            "photo-1588168333986-5078d3ae3976",
            "Grilled steak with roasted potatoes and asparagus.",
        ),
        (
            "Chicken Pasta Primavera",
            "photo-1621996346565-e3dbc646d9a9",
            "Whole wheat pasta with grilled chicken and fresh vegetables.",
        ),
        (
            "Shrimp Tacos",
            "photo-1565299585323-38d6b0865b47",
            "Grilled shrimp tacos with cabbage slaw and avocado.",
        ),
        (
            "Turkey Meatballs & Zoodles",
            "photo-1529042410759-befb1204b468",
            "Lean turkey meatballs with zucchini noodles and marinara.",
        ),
        (
            "Grilled Chicken & Rice",
            "photo-1598103442097-8b74394b95c6",
            "Marinated grilled chicken breast with brown rice and broccoli.",
        ),
        (
            "Beef Stir-Fry",
            "photo-1603360946369-dc9bb6258143",
            "Tender beef strips with mixed vegetables in savory sauce.",
        ),
    ],
    MealType.SNACK: [
        (
            "Greek Yogurt with Nuts",
            "photo-1488477181946-6428a0291777",
            "Protein-rich Greek yogurt topped with mixed nuts and honey.",
        ),
        (
            "Apple & Peanut Butter",
            "photo-1568702846914-96b305d2aaeb",
            "Fresh apple slices with natural peanut butter.",
        ),
        (
            "Protein Shake",
            "photo-1622483767028-3f66f32aef97",
            "Chocolate protein shake with banana and almond milk.",
        ),
        (
            "Trail Mix",
            "photo-1599599810769-bcde5a160d32",
            "Mix of nuts, seeds, and dried fruits.",
        ),
        (
            "Cottage Cheese & Fruit",
            "photo-1628088062854-d1870b4553da",
            "Low-fat cottage cheese with fresh pineapple chunks.",
        ),
        (
            "Hummus & Veggies",
            "photo-1621340635223-9b8f5f9b6440",
            "Creamy hummus with carrot sticks and bell peppers.",
        ),
        (
            "Protein Bar",
            "photo-1582033712908-32d7c6c8e8f0",
            "High-protein energy bar with nuts and chocolate.",
        ),
    ],
}

PREP_MINUTES: dict[MealType, int] = {
    MealType.BREAKFAST: 10,
    MealType.LUNCH: 20,
    MealType.DINNER: 30,
    MealType.SNACK: 5,
}


def image_url(photo_id: str) -> str:
    """Return a sized Unsplash URL for a photo id."""
    return f"{_UNSPLASH}/{photo_id}?w=400"
