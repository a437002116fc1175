"""
FitTrack - Insight & Recommendation Rules

Turns period aggregates into short human-readable messages. Each rule is a
pure function of a ReportAggregates snapshot returning a message or None;
rules are evaluated in list order, so output order is stable.
"""

import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field

from fittrack.core.models import WEEKDAYS
from fittrack.engine.progress import round_half_up
from fittrack.engine.rollups import (
    AnalyticsPeriod,
    CalorieBalance,
    GoalSummary,
    NutritionSummary,
    WorkoutSummary,
)

logger = logging.getLogger(__name__)


# Rule thresholds, evaluated against one report period
RECOMMENDATION_THRESHOLDS = {
    "min_workouts": 3,
    "min_workout_minutes": 30,
    "min_protein_pct": 20,
    "max_calorie_surplus": 500,
    "min_goal_completion_rate": 50,
}


class ReportAggregates(BaseModel):
    """Everything the rules look at for one report period."""
    workouts: WorkoutSummary = Field(default_factory=WorkoutSummary)
    nutrition: NutritionSummary = Field(default_factory=NutritionSummary)
    balance: CalorieBalance = Field(default_factory=CalorieBalance)
    goals: GoalSummary = Field(default_factory=GoalSummary)
    period: AnalyticsPeriod = AnalyticsPeriod.WEEK
    improvement_rate: float = 0.0
    most_active_day: str = ""


Rule = Callable[[ReportAggregates], Optional[str]]


# === Recommendations ===

def low_workout_frequency(agg: ReportAggregates) -> Optional[str]:
    if agg.workouts.count < RECOMMENDATION_THRESHOLDS["min_workouts"]:
        return "Try to increase workout frequency to at least 3 times per week"
    return None


def short_workouts(agg: ReportAggregates) -> Optional[str]:
    if agg.workouts.average_minutes_per_workout < RECOMMENDATION_THRESHOLDS["min_workout_minutes"]:
        return "Consider extending workout duration to 30+ minutes for better results"
    return None


def low_protein(agg: ReportAggregates) -> Optional[str]:
    if agg.nutrition.macro_distribution.protein_pct < RECOMMENDATION_THRESHOLDS["min_protein_pct"]:
        return "Increase protein intake to support muscle recovery and growth"
    return None


def calorie_surplus(agg: ReportAggregates) -> Optional[str]:
    if agg.balance.net > RECOMMENDATION_THRESHOLDS["max_calorie_surplus"]:
        return "Consider reducing calorie intake or increasing physical activity"
    return None


def low_goal_completion(agg: ReportAggregates) -> Optional[str]:
    if agg.goals.completion_rate < RECOMMENDATION_THRESHOLDS["min_goal_completion_rate"]:
        return "Break down large goals into smaller, more achievable milestones"
    return None


def overdue_goals(agg: ReportAggregates) -> Optional[str]:
    if agg.goals.overdue > 0:
        return "Review overdue goals and adjust deadlines or targets if needed"
    return None


RECOMMENDATION_RULES: list[Rule] = [
    low_workout_frequency,
    short_workouts,
    low_protein,
    calorie_surplus,
    low_goal_completion,
    overdue_goals,
]


# === Insights ===

def workouts_completed(agg: ReportAggregates) -> Optional[str]:
    return f"You completed {agg.workouts.count} workouts this {agg.period.value}"


def duration_improvement(agg: ReportAggregates) -> Optional[str]:
    if agg.improvement_rate > 0:
        return f"Your workout duration improved by {round_half_up(agg.improvement_rate)}%"
    return None


def active_day(agg: ReportAggregates) -> Optional[str]:
    if agg.most_active_day in WEEKDAYS:
        return f"Your most active day is {agg.most_active_day}"
    return None


def daily_intake(agg: ReportAggregates) -> Optional[str]:
    if agg.nutrition.total_calories > 0:
        return f"Average daily intake: {round_half_up(agg.nutrition.avg_daily_calories)} calories"
    return None


def macro_split(agg: ReportAggregates) -> Optional[str]:
    if agg.nutrition.total_calories <= 0:
        return None
    macros = agg.nutrition.macro_distribution
    return (
        f"Macro distribution: {round_half_up(macros.protein_pct)}% protein, "
        f"{round_half_up(macros.carbs_pct)}% carbs, {round_half_up(macros.fat_pct)}% fat"
    )


def goal_completion(agg: ReportAggregates) -> Optional[str]:
    if agg.goals.total > 0:
        return f"Goal completion rate: {round_half_up(agg.goals.completion_rate)}%"
    return None


def overdue_count(agg: ReportAggregates) -> Optional[str]:
    if agg.goals.overdue > 0:
        return f"{agg.goals.overdue} goals are overdue and need attention"
    return None


INSIGHT_RULES: list[Rule] = [
    workouts_completed,
    duration_improvement,
    active_day,
    daily_intake,
    macro_split,
    goal_completion,
    overdue_count,
]


def _evaluate(rules: list[Rule], aggregates: ReportAggregates) -> list[str]:
    messages = []
    for rule in rules:
        message = rule(aggregates)
        if message:
            messages.append(message)
    return messages


def generate_recommendations(aggregates: ReportAggregates, rules: Optional[list[Rule]] = None) -> list[str]:
    """Messages from every recommendation rule that fires, in rule order."""
    messages = _evaluate(rules if rules is not None else RECOMMENDATION_RULES, aggregates)
    logger.debug(f"{len(messages)} recommendations for {aggregates.period.value} report")
    return messages


def generate_insights(aggregates: ReportAggregates, rules: Optional[list[Rule]] = None) -> list[str]:
    """Observational messages about the period, in rule order."""
    return _evaluate(rules if rules is not None else INSIGHT_RULES, aggregates)
