"""
FitTrack - Period Rollups

Weekly, monthly and arbitrary-range summaries over logged workouts, meals
and goals. Windows are half-open `[start, end)` unless `inclusive_end=True`;
an inverted window summarizes nothing.

Integer averages (minutes and calories per workout) use floor division.
"""

import calendar
import logging
from collections import Counter
from datetime import date as date_type, datetime, timedelta
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field

from fittrack.core.models import (
    WEEKDAYS,
    DateRange,
    Goal,
    GoalCategory,
    Meal,
    Priority,
    WorkoutRecord,
    WorkoutType,
    as_date,
)
from fittrack.engine.progress import is_overdue

logger = logging.getLogger(__name__)

# kcal per gram
PROTEIN_KCAL = 4
CARBS_KCAL = 4
FAT_KCAL = 9


class AnalyticsPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


_PERIOD_MONTHS = {
    AnalyticsPeriod.MONTH: 1,
    AnalyticsPeriod.QUARTER: 3,
    AnalyticsPeriod.YEAR: 12,
}


def shift_months(day: date_type, months: int) -> date_type:
    """Move a date by whole months, clamping to the last day of the month."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date_type(year, month, min(day.day, last_day))


def period_window(period: AnalyticsPeriod, today: date_type) -> DateRange:
    """The half-open window covering the period that ends with `today`."""
    today = as_date(today)
    end = today + timedelta(days=1)
    if period == AnalyticsPeriod.WEEK:
        start = end - timedelta(days=7)
    else:
        start = shift_months(end, -_PERIOD_MONTHS[period])
    return DateRange(start=start, end=end)


# === Workouts ===

class WorkoutSummary(BaseModel):
    total_minutes: int = 0
    total_calories: int = 0
    count: int = 0
    average_minutes_per_workout: int = 0
    average_calories_per_workout: int = 0
    # Sparse: types with no workouts are absent
    frequency_by_type: dict[WorkoutType, int] = Field(default_factory=dict)


def _in_window(items, window: DateRange):
    return [item for item in items if window.contains(item.date)]


def aggregate_workouts(
    records: Iterable[WorkoutRecord],
    start: date_type,
    end: date_type,
    inclusive_end: bool = False,
) -> WorkoutSummary:
    """Totals, floor averages and per-type counts for workouts in the window."""
    window = DateRange(start=start, end=end, inclusive_end=inclusive_end)
    selected = _in_window(records, window)
    if not selected:
        return WorkoutSummary()

    count = len(selected)
    total_minutes = sum(w.duration_minutes for w in selected)
    total_calories = sum(w.calories_burned for w in selected)
    frequency = Counter(w.type for w in selected)

    return WorkoutSummary(
        total_minutes=total_minutes,
        total_calories=total_calories,
        count=count,
        average_minutes_per_workout=total_minutes // count,
        average_calories_per_workout=total_calories // count,
        frequency_by_type={t: frequency[t] for t in WorkoutType if frequency[t]},
    )


class DailyTrend(BaseModel):
    date: date_type
    value: float = 0
    secondary_value: float = 0


def workout_daily_trends(
    records: Iterable[WorkoutRecord],
    start: date_type,
    end: date_type,
    inclusive_end: bool = False,
) -> list[DailyTrend]:
    """One entry per day in the window: minutes (value) and calories (secondary)."""
    window = DateRange(start=start, end=end, inclusive_end=inclusive_end)
    minutes: Counter = Counter()
    calories: Counter = Counter()
    for workout in _in_window(records, window):
        minutes[workout.date] += workout.duration_minutes
        calories[workout.date] += workout.calories_burned
    return [
        DailyTrend(date=day, value=minutes[day], secondary_value=calories[day])
        for day in window.days()
    ]


def most_active_day(
    records: Iterable[WorkoutRecord],
    start: date_type,
    end: date_type,
    inclusive_end: bool = False,
) -> str:
    """Weekday name with the most workouts; ties go to the earlier weekday, "" if none."""
    window = DateRange(start=start, end=end, inclusive_end=inclusive_end)
    counts = Counter(WEEKDAYS[w.date.weekday()] for w in _in_window(records, window))
    if not counts:
        return ""
    return max(WEEKDAYS, key=lambda day: counts[day])


def workout_improvement_rate(
    records: Iterable[WorkoutRecord],
    start: date_type,
    end: date_type,
    inclusive_end: bool = False,
) -> float:
    """
    Percent change in workout minutes from the first seven days of the
    window to the last seven. 0 when the first week has no minutes.
    """
    records = list(records)
    window = DateRange(start=start, end=end, inclusive_end=inclusive_end)
    if window.day_count() == 0:
        return 0.0

    first_week = DateRange(start=window.start, end=window.start + timedelta(days=7))
    last_week = DateRange(start=window.last_day - timedelta(days=6), end=window.last_day, inclusive_end=True)

    first_minutes = sum(w.duration_minutes for w in _in_window(records, first_week) if window.contains(w.date))
    last_minutes = sum(w.duration_minutes for w in _in_window(records, last_week) if window.contains(w.date))
    if first_minutes == 0:
        return 0.0
    return round((last_minutes - first_minutes) / first_minutes * 100, 1)


class StreakInfo(BaseModel):
    current_streak_days: int = 0
    longest_streak_days: int = 0
    last_workout_date: date_type | None = None


def workout_streaks(records: Iterable[WorkoutRecord], today: date_type) -> StreakInfo:
    """
    Consecutive calendar days with at least one workout.

    The current streak counts back from today, or from yesterday when
    nothing has been logged today yet. Workouts after `today` are ignored.
    """
    today = as_date(today)
    days = sorted({w.date for w in records if w.date <= today})
    if not days:
        return StreakInfo()

    longest = run = 1
    for previous, day in zip(days, days[1:]):
        run = run + 1 if (day - previous).days == 1 else 1
        longest = max(longest, run)

    active = set(days)
    cursor = today if today in active else today - timedelta(days=1)
    current = 0
    while cursor in active:
        current += 1
        cursor -= timedelta(days=1)

    return StreakInfo(
        current_streak_days=current,
        longest_streak_days=longest,
        last_workout_date=days[-1],
    )


# === Nutrition ===

class MacroDistribution(BaseModel):
    """Share of average daily calories from each macro, in percent."""
    protein_pct: float = 0.0
    carbs_pct: float = 0.0
    fat_pct: float = 0.0


class NutritionSummary(BaseModel):
    total_calories: int = 0
    day_count: int = 0
    avg_daily_calories: float = 0.0
    avg_daily_protein: float = 0.0
    avg_daily_carbs: float = 0.0
    avg_daily_fat: float = 0.0
    macro_distribution: MacroDistribution = Field(default_factory=MacroDistribution)


def macro_distribution(protein_g: float, carbs_g: float, fat_g: float, calories: float) -> MacroDistribution:
    if calories <= 0:
        return MacroDistribution()
    return MacroDistribution(
        protein_pct=round(protein_g * PROTEIN_KCAL / calories * 100, 1),
        carbs_pct=round(carbs_g * CARBS_KCAL / calories * 100, 1),
        fat_pct=round(fat_g * FAT_KCAL / calories * 100, 1),
    )


def aggregate_nutrition(
    meals: Iterable[Meal],
    start: date_type,
    end: date_type,
    inclusive_end: bool = False,
) -> NutritionSummary:
    """
    Totals and daily averages for meals in the window.

    Averages divide by every calendar day the window covers, including days
    with nothing logged.
    """
    window = DateRange(start=start, end=end, inclusive_end=inclusive_end)
    day_count = window.day_count()
    selected = _in_window(meals, window)

    total_calories = sum(m.total_calories for m in selected)
    if day_count == 0:
        return NutritionSummary(total_calories=total_calories)

    avg_calories = total_calories / day_count
    avg_protein = sum(m.total_protein for m in selected) / day_count
    avg_carbs = sum(m.total_carbs for m in selected) / day_count
    avg_fat = sum(m.total_fat for m in selected) / day_count

    return NutritionSummary(
        total_calories=total_calories,
        day_count=day_count,
        avg_daily_calories=round(avg_calories, 1),
        avg_daily_protein=round(avg_protein, 1),
        avg_daily_carbs=round(avg_carbs, 1),
        avg_daily_fat=round(avg_fat, 1),
        macro_distribution=macro_distribution(avg_protein, avg_carbs, avg_fat, avg_calories),
    )


def nutrition_daily_trends(
    meals: Iterable[Meal],
    start: date_type,
    end: date_type,
    inclusive_end: bool = False,
) -> list[DailyTrend]:
    """One entry per day in the window with the calories consumed that day."""
    window = DateRange(start=start, end=end, inclusive_end=inclusive_end)
    calories: Counter = Counter()
    for meal in _in_window(meals, window):
        calories[meal.date] += meal.total_calories
    return [DailyTrend(date=day, value=calories[day]) for day in window.days()]


class CalorieBalance(BaseModel):
    """
    Calories in versus out. A positive `net` is a surplus.

    `burned` is everything expended: exercise plus resting burn.
    """
    consumed: int = 0
    exercise_burned: int = 0
    resting_burned: int = 0
    burned: int = 0
    net: int = 0


def calorie_balance(consumed: int, burned: int, estimated_resting_burn: int, days: int) -> CalorieBalance:
    """net = consumed - (burned + estimated_resting_burn * days)."""
    resting = estimated_resting_burn * max(0, days)
    total_burned = burned + resting
    return CalorieBalance(
        consumed=consumed,
        exercise_burned=burned,
        resting_burned=resting,
        burned=total_burned,
        net=consumed - total_burned,
    )


# === Goals ===

class GoalSummary(BaseModel):
    total: int = 0
    completed: int = 0
    overdue: int = 0
    on_track: int = 0
    completion_rate: float = 0.0
    by_category: dict[GoalCategory, int] = Field(default_factory=dict)
    by_priority: dict[Priority, int] = Field(default_factory=dict)
    average_completion_days: float = 0.0


def summarize_goals(goals: Iterable[Goal], now: datetime) -> GoalSummary:
    """Counts, completion rate (percent) and groupings for a set of goals."""
    goals = list(goals)
    if not goals:
        return GoalSummary()

    completed = [g for g in goals if g.is_completed]
    overdue = sum(1 for g in goals if is_overdue(g, now))
    durations = [
        (g.completed_at - g.created_at).total_seconds() / 86400
        for g in completed if g.completed_at is not None
    ]
    by_category = Counter(g.category for g in goals)
    by_priority = Counter(g.priority for g in goals)

    return GoalSummary(
        total=len(goals),
        completed=len(completed),
        overdue=overdue,
        on_track=len(goals) - len(completed) - overdue,
        completion_rate=round(len(completed) / len(goals) * 100, 1),
        by_category={c: by_category[c] for c in GoalCategory if by_category[c]},
        by_priority={p: by_priority[p] for p in Priority if by_priority[p]},
        average_completion_days=round(sum(durations) / len(durations), 1) if durations else 0.0,
    )


def goals_near_deadline(goals: Iterable[Goal], now: datetime, days_ahead: int = 7) -> list[Goal]:
    """Active goals whose deadline falls between now and now + days_ahead, soonest first."""
    horizon = now + timedelta(days=days_ahead)
    upcoming = [g for g in goals if not g.is_completed and now <= g.deadline <= horizon]
    return sorted(upcoming, key=lambda g: g.deadline)
