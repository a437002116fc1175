"""
Record builders shared by the test modules.
"""
from datetime import date, datetime, timedelta

from fittrack.core.models import (
    FoodItem,
    Goal,
    GoalCategory,
    Meal,
    MealType,
    SelectedFoodItem,
    WorkoutRecord,
    WorkoutType,
)

USER_ID = "user_1"
OTHER_USER_ID = "user_2"

# A Wednesday
NOW = datetime(2026, 3, 11, 10, 0)
TODAY = NOW.date()


def make_food(calories=100, protein=0.0, carbs=0.0, fat=0.0, name="Test Food"):
    return FoodItem(
        name=name,
        calories_per_serving=calories,
        serving_size="1 serving",
        protein=protein,
        carbs=carbs,
        fat=fat,
    )


def make_meal(meal_type=MealType.LUNCH, day=TODAY, calories=500, protein=0.0, carbs=0.0, fat=0.0,
              quantity=1.0, user_id=USER_ID, time=""):
    food = make_food(calories, protein, carbs, fat)
    return Meal(
        user_id=user_id,
        type=meal_type,
        time=time,
        date=day,
        food_items=[SelectedFoodItem(food_item=food, quantity=quantity)],
    )


def make_workout(day=TODAY, minutes=30, calories=300, workout_type=WorkoutType.CARDIO,
                 user_id=USER_ID, name="Run"):
    return WorkoutRecord(
        user_id=user_id,
        name=name,
        type=workout_type,
        date=day,
        duration_minutes=minutes,
        calories_burned=calories,
    )


def make_goal(category=GoalCategory.STEPS, current=0.0, target=100.0, deadline=None,
              user_id=USER_ID, created_at=None, **extra):
    return Goal(
        user_id=user_id,
        name=f"{category.value} goal",
        category=category,
        current_numeric_value=current,
        target_numeric_value=target,
        deadline=deadline or NOW + timedelta(days=30),
        created_at=created_at or NOW - timedelta(days=10),
        **extra,
    )


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)
