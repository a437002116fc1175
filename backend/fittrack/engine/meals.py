"""
FitTrack - Meal Merging

At most one meal per (user, date, type): logging another Snack on the same
day appends its food items to the existing Snack instead of adding a second
meal.
"""

from fittrack.core.models import Meal


def meal_key(meal: Meal) -> tuple:
    return (meal.user_id, meal.date, meal.type)


def merge_meal(existing_meals: list[Meal], new_meal: Meal) -> list[Meal]:
    """
    Return a new meal list with `new_meal` merged in.

    The matching meal keeps its id, time label and items, followed by the
    new meal's items in order. Without a match the new meal is added and
    the list is ordered by date then meal type. Inputs are not mutated.
    """
    key = meal_key(new_meal)
    merged: list[Meal] = []
    found = False

    for meal in existing_meals:
        if not found and meal_key(meal) == key:
            meal = meal.model_copy(update={
                "food_items": [*meal.food_items, *new_meal.food_items],
            })
            found = True
        merged.append(meal)

    if not found:
        merged.append(new_meal)
        merged.sort(key=lambda m: (m.date, m.type.order))

    return merged


def find_merge_target(existing_meals: list[Meal], new_meal: Meal) -> Meal | None:
    """The existing meal `new_meal` would be merged into, if any."""
    key = meal_key(new_meal)
    return next((meal for meal in existing_meals if meal_key(meal) == key), None)
