"""
FitTrack - Progress Calculators

Goal completion percentages, deadline status and daily nutrition progress.
Every function is a pure function of its arguments; "now" is always passed
in by the caller.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Iterable

from pydantic import BaseModel, Field

from fittrack.core.models import DailyNutrition, Goal, GoalCategory, Meal

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (82.5 -> 83)."""
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def ratio_percent(part: float, whole: float) -> int:
    """Unclamped integer percentage; 0 when `whole` is 0."""
    if whole == 0:
        return 0
    return round_half_up(part / whole * 100)


# === Goals ===

def goal_progress_percentage(goal: Goal) -> int:
    """
    Progress toward a goal as an integer in [0, 100].

    Weight goals measure the distance travelled from the starting reference
    toward the target, so a goal to go from 73.5 to 70 that is now at 71.75
    is 50% done. Every other category is the plain current/target ratio.

    A completed goal is always 100. Otherwise a zero target yields 0
    rather than raising.
    """
    if goal.is_completed:
        return 100

    target = goal.target_numeric_value
    if target == 0:
        return 0

    current = goal.current_numeric_value
    if goal.category == GoalCategory.WEIGHT:
        start = goal.starting_value
        if start is None:
            start = max(current, target)
        total = abs(target - start)
        achieved = abs(current - start)
        if total == 0:
            # Start coincides with the target (e.g. an upward goal)
            return 100 if current == target else 0
        return clamp(round_half_up(achieved / total * 100))

    return clamp(round_half_up(current / target * 100))


def is_achieved(goal: Goal) -> bool:
    """Whether the goal's progress has reached 100%."""
    return goal_progress_percentage(goal) >= 100


def days_remaining(goal: Goal, now: datetime) -> int:
    """Whole days until the deadline, never negative."""
    return max(0, math.floor((goal.deadline - now) / ONE_DAY))


def is_overdue(goal: Goal, now: datetime) -> bool:
    return not goal.is_completed and now > goal.deadline


class GoalProgressView(BaseModel):
    """Derived progress fields for one goal at a point in time."""
    goal: Goal
    progress_percentage: int
    days_remaining: int
    is_overdue: bool
    is_achieved: bool


def describe_goal(goal: Goal, now: datetime) -> GoalProgressView:
    return GoalProgressView(
        goal=goal,
        progress_percentage=goal_progress_percentage(goal),
        days_remaining=days_remaining(goal, now),
        is_overdue=is_overdue(goal, now),
        is_achieved=is_achieved(goal),
    )


# === Nutrition ===

class NutritionProgress(BaseModel):
    """
    Consumption for a set of meals against daily targets.

    `*_pct_raw` values are unclamped so over-consumption stays visible to
    analytics; the plain `*_pct` values are clamped to 100 for display.
    `calorie_remainder` is signed (negative when over target) while
    `remaining_calories` never drops below 0.
    """
    consumed_calories: int = 0
    consumed_protein: float = 0
    consumed_carbs: float = 0
    consumed_fat: float = 0

    remaining_calories: int = Field(default=0, ge=0)
    calorie_remainder: int = 0

    calorie_pct_raw: int = 0
    protein_pct_raw: int = 0
    carbs_pct_raw: int = 0
    fat_pct_raw: int = 0

    calorie_pct: int = Field(default=0, ge=0, le=100)
    protein_pct: int = Field(default=0, ge=0, le=100)
    carbs_pct: int = Field(default=0, ge=0, le=100)
    fat_pct: int = Field(default=0, ge=0, le=100)


def nutrition_progress(targets: DailyNutrition, meals: Iterable[Meal]) -> NutritionProgress:
    """
    Progress of the supplied meals against a target profile.

    The caller chooses which meals count (normally one day's meals).
    """
    meals = list(meals)
    calories = sum(meal.total_calories for meal in meals)
    protein = sum(meal.total_protein for meal in meals)
    carbs = sum(meal.total_carbs for meal in meals)
    fat = sum(meal.total_fat for meal in meals)

    calorie_raw = ratio_percent(calories, targets.target_calories)
    protein_raw = ratio_percent(protein, targets.target_protein)
    carbs_raw = ratio_percent(carbs, targets.target_carbs)
    fat_raw = ratio_percent(fat, targets.target_fat)

    remainder = targets.target_calories - calories

    logger.debug(
        f"Nutrition progress over {len(meals)} meals: "
        f"{calories}/{targets.target_calories} kcal ({calorie_raw}%)"
    )

    return NutritionProgress(
        consumed_calories=calories,
        consumed_protein=round(protein, 1),
        consumed_carbs=round(carbs, 1),
        consumed_fat=round(fat, 1),
        remaining_calories=max(0, remainder),
        calorie_remainder=remainder,
        calorie_pct_raw=calorie_raw,
        protein_pct_raw=protein_raw,
        carbs_pct_raw=carbs_raw,
        fat_pct_raw=fat_raw,
        calorie_pct=clamp(calorie_raw),
        protein_pct=clamp(protein_raw),
        carbs_pct=clamp(carbs_raw),
        fat_pct=clamp(fat_raw),
    )
