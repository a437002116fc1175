"""
FitTrack - Analytics Engine

Pure calculators over record snapshots:
- progress: goal completion percentage, deadlines, daily nutrition progress
- goals: goal lifecycle transitions
- meals: merging meals of the same type and day
- rollups: workout/nutrition/goal summaries over date windows
- insights: recommendation and insight rules
- reminders: next-occurrence helpers and templates
"""

from fittrack.engine.progress import (
    goal_progress_percentage,
    is_achieved,
    days_remaining,
    is_overdue,
    describe_goal,
    nutrition_progress,
    NutritionProgress,
)
from fittrack.engine.goals import GoalStatus, goal_status, complete_goal, update_goal_progress
from fittrack.engine.meals import merge_meal
from fittrack.engine.rollups import (
    AnalyticsPeriod,
    period_window,
    aggregate_workouts,
    aggregate_nutrition,
    calorie_balance,
    summarize_goals,
    workout_streaks,
)
from fittrack.engine.insights import ReportAggregates, generate_recommendations, generate_insights
from fittrack.engine.reminders import upcoming_reminders, REMINDER_TEMPLATES

__all__ = [
    "goal_progress_percentage",
    "is_achieved",
    "days_remaining",
    "is_overdue",
    "describe_goal",
    "nutrition_progress",
    "NutritionProgress",
    "GoalStatus",
    "goal_status",
    "complete_goal",
    "update_goal_progress",
    "merge_meal",
    "AnalyticsPeriod",
    "period_window",
    "aggregate_workouts",
    "aggregate_nutrition",
    "calorie_balance",
    "summarize_goals",
    "workout_streaks",
    "ReportAggregates",
    "generate_recommendations",
    "generate_insights",
    "upcoming_reminders",
    "REMINDER_TEMPLATES",
]
