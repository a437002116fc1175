"""
FitTrack - Food Catalog

Read-only reference food data seeded at import time.
"""

from typing import Optional

from fittrack.core.models import FoodCategory, FoodItem


def _food(food_id: str, name: str, calories: int, serving: str,
          protein: float, carbs: float, fat: float,
          category: FoodCategory = FoodCategory.OTHER) -> FoodItem:
    return FoodItem(
        id=food_id,
        name=name,
        calories_per_serving=calories,
        serving_size=serving,
        protein=protein,
        carbs=carbs,
        fat=fat,
        category=category,
    )


FOOD_CATALOG: tuple[FoodItem, ...] = (
    # Breakfast
    _food("oatmeal", "Oatmeal with Berries", 280, "1 bowl", 8.0, 54.0, 6.0, FoodCategory.GRAINS),
    _food("greek_yogurt", "Greek Yogurt", 120, "1 cup (200g)", 20.0, 9.0, 0.5, FoodCategory.DAIRY),
    _food("black_coffee", "Black Coffee", 20, "1 cup", 0.3, 0.0, 0.0, FoodCategory.BEVERAGES),
    _food("banana", "Banana", 105, "1 medium (118g)", 1.3, 27.0, 0.4, FoodCategory.FRUITS),
    _food("eggs", "Scrambled Eggs", 91, "1 large egg", 6.3, 0.6, 6.3, FoodCategory.PROTEIN),
    # Lunch
    _food("chicken_salad", "Grilled Chicken Salad", 450, "1 serving", 35.0, 15.0, 25.0, FoodCategory.PROTEIN),
    _food("whole_grain_bread", "Whole Grain Bread", 120, "2 slices", 4.0, 24.0, 2.0, FoodCategory.GRAINS),
    _food("apple", "Apple", 80, "1 medium", 0.4, 21.0, 0.3, FoodCategory.FRUITS),
    _food("quinoa", "Quinoa", 222, "1 cup cooked", 8.1, 39.4, 3.6, FoodCategory.GRAINS),
    # Snacks
    _food("protein_bar", "Protein Bar", 200, "1 bar", 20.0, 15.0, 8.0, FoodCategory.SNACKS),
    _food("almonds", "Almonds", 164, "1 oz (28g)", 6.0, 6.0, 14.0, FoodCategory.SNACKS),
    _food("protein_shake", "Protein Shake", 150, "1 scoop", 25.0, 5.0, 2.0, FoodCategory.BEVERAGES),
    # Dinner
    _food("rice", "White Rice", 205, "1 cup cooked", 4.3, 45.0, 0.4, FoodCategory.GRAINS),
    _food("broccoli", "Broccoli", 25, "1 cup", 3.0, 5.0, 0.3, FoodCategory.VEGETABLES),
    _food("salmon", "Grilled Salmon", 206, "100g", 22.0, 0.0, 12.0, FoodCategory.PROTEIN),
    _food("avocado", "Avocado", 234, "1 whole", 2.9, 12.0, 21.0, FoodCategory.FATS),
    _food("sweet_potato", "Sweet Potato", 112, "1 medium", 2.0, 26.0, 0.1, FoodCategory.VEGETABLES),
)

_FOODS_BY_ID: dict[str, FoodItem] = {food.id: food for food in FOOD_CATALOG}


def find_food(food_id: str) -> Optional[FoodItem]:
    """Look up a catalog food by id."""
    return _FOODS_BY_ID.get(food_id)


def search_foods(query: str) -> list[FoodItem]:
    """Case-insensitive substring search over catalog food names."""
    needle = query.strip().lower()
    if not needle:
        return list(FOOD_CATALOG)
    return [food for food in FOOD_CATALOG if needle in food.name.lower()]
