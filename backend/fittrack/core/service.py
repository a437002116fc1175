"""
FitTrack - Progress Service

Composes the record store, the session and the clock with the pure engine.
Each operation resolves the signed-in user, reads a snapshot from the store,
runs the calculators and persists any resulting goal or meal change.

Store errors are logged and re-raised unchanged.
"""

import logging
from datetime import date as date_type, datetime
from typing import Optional

from pydantic import BaseModel, Field

from fittrack.config import Settings, get_settings
from fittrack.core.errors import RecordNotFoundError, SessionError, StoreError
from fittrack.core.models import (
    DailyNutrition,
    DateRange,
    Goal,
    Meal,
    Reminder,
    WorkoutRecord,
)
from fittrack.core.session import Clock, SessionProvider, SystemClock
from fittrack.core.storage import RecordStore
from fittrack.engine.goals import complete_goal, update_goal_progress
from fittrack.engine.insights import ReportAggregates, generate_insights, generate_recommendations
from fittrack.engine.meals import find_merge_target, merge_meal
from fittrack.engine.progress import (
    GoalProgressView,
    NutritionProgress,
    describe_goal,
    is_achieved,
    nutrition_progress,
)
from fittrack.engine.reminders import UpcomingReminder, upcoming_reminders
from fittrack.engine.rollups import (
    AnalyticsPeriod,
    CalorieBalance,
    DailyTrend,
    GoalSummary,
    NutritionSummary,
    StreakInfo,
    WorkoutSummary,
    aggregate_nutrition,
    aggregate_workouts,
    calorie_balance,
    goals_near_deadline,
    most_active_day,
    nutrition_daily_trends,
    period_window,
    summarize_goals,
    workout_daily_trends,
    workout_improvement_rate,
    workout_streaks,
)

logger = logging.getLogger(__name__)


class Dashboard(BaseModel):
    """Today's snapshot for the signed-in user."""
    user_id: str
    generated_at: datetime
    targets: DailyNutrition
    nutrition: NutritionProgress
    today_meals: list[Meal] = Field(default_factory=list)
    weekly_workouts: WorkoutSummary
    recent_workouts: list[WorkoutRecord] = Field(default_factory=list)
    streaks: StreakInfo
    goal_summary: GoalSummary
    active_goals: list[GoalProgressView] = Field(default_factory=list)
    goals_near_deadline: list[GoalProgressView] = Field(default_factory=list)
    upcoming_reminders: list[UpcomingReminder] = Field(default_factory=list)


class ProgressReport(BaseModel):
    """Rollups, trends and advice for one analytics period."""
    user_id: str
    period: AnalyticsPeriod
    start: date_type
    end: date_type
    generated_at: datetime
    workouts: WorkoutSummary
    nutrition: NutritionSummary
    balance: CalorieBalance
    goals: GoalSummary
    streaks: StreakInfo
    workout_trends: list[DailyTrend] = Field(default_factory=list)
    nutrition_trends: list[DailyTrend] = Field(default_factory=list)
    most_active_day: str = ""
    improvement_rate: float = 0.0
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ProgressService:
    """
    Caller-side composition of the analytics engine.

    Usage:
        service = ProgressService(store, StaticSessionProvider("user_123"))
        report = service.progress_report(AnalyticsPeriod.WEEK)
    """

    def __init__(
        self,
        store: RecordStore,
        session: SessionProvider,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.session = session
        self.clock = clock or SystemClock()
        self.settings = settings or get_settings()
        self._logger = logging.getLogger("fittrack.service")

    # === Session ===

    @property
    def user_id(self) -> str:
        """The signed-in user.

        Raises:
            SessionError: if nobody is signed in
        """
        user_id = self.session.current_user_id()
        if not user_id:
            raise SessionError()
        return user_id

    def _now(self) -> datetime:
        return self.clock.now()

    def _today(self) -> date_type:
        return self._now().date()

    def _store_call(self, operation: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RecordNotFoundError:
            raise
        except StoreError as e:
            self._logger.error(f"Store operation {operation} failed: {e}")
            raise

    # === Dashboard & reports ===

    def dashboard(self) -> Dashboard:
        user_id = self.user_id
        now = self._now()
        today = now.date()
        week = period_window(AnalyticsPeriod.WEEK, today)

        targets = self._store_call("get_nutrition_targets", self.store.get_nutrition_targets, user_id)
        today_meals = self._store_call(
            "list_meals", self.store.list_meals, user_id,
            DateRange(start=today, end=today, inclusive_end=True),
        )
        workouts = self._store_call("list_workouts", self.store.list_workouts, user_id)
        goals = self._store_call("list_goals", self.store.list_goals, user_id)
        reminders = self._store_call("list_reminders", self.store.list_reminders, user_id, True)

        active = [g for g in goals if not g.is_completed]
        limit = self.settings.recent_items_limit

        return Dashboard(
            user_id=user_id,
            generated_at=now,
            targets=targets,
            nutrition=nutrition_progress(targets, today_meals),
            today_meals=today_meals,
            weekly_workouts=aggregate_workouts(workouts, week.start, week.end),
            recent_workouts=list(reversed(workouts))[:limit],
            streaks=workout_streaks(workouts, today),
            goal_summary=summarize_goals(goals, now),
            active_goals=[describe_goal(g, now) for g in active[:limit]],
            goals_near_deadline=[
                describe_goal(g, now)
                for g in goals_near_deadline(active, now, self.settings.deadline_warning_days)
            ],
            upcoming_reminders=upcoming_reminders(reminders, now, self.settings.upcoming_reminder_hours),
        )

    def progress_report(self, period: AnalyticsPeriod = AnalyticsPeriod.WEEK) -> ProgressReport:
        """Build the report for the period ending today."""
        user_id = self.user_id
        now = self._now()
        window = period_window(period, now.date())

        workouts = self._store_call("list_workouts", self.store.list_workouts, user_id)
        meals = self._store_call("list_meals", self.store.list_meals, user_id, window)
        goals = self._store_call("list_goals", self.store.list_goals, user_id)

        workout_summary = aggregate_workouts(workouts, window.start, window.end)
        nutrition_summary = aggregate_nutrition(meals, window.start, window.end)
        balance = calorie_balance(
            nutrition_summary.total_calories,
            workout_summary.total_calories,
            self.settings.resting_burn_kcal,
            window.day_count(),
        )
        goal_summary = summarize_goals(goals, now)
        active_day = most_active_day(workouts, window.start, window.end)
        improvement = workout_improvement_rate(workouts, window.start, window.end)

        aggregates = ReportAggregates(
            workouts=workout_summary,
            nutrition=nutrition_summary,
            balance=balance,
            goals=goal_summary,
            period=period,
            improvement_rate=improvement,
            most_active_day=active_day,
        )

        self._logger.info(
            f"Built {period.value} report for user {user_id}: "
            f"{workout_summary.count} workouts, {len(meals)} meals, {goal_summary.total} goals"
        )

        return ProgressReport(
            user_id=user_id,
            period=period,
            start=window.start,
            end=window.end,
            generated_at=now,
            workouts=workout_summary,
            nutrition=nutrition_summary,
            balance=balance,
            goals=goal_summary,
            streaks=workout_streaks(workouts, now.date()),
            workout_trends=workout_daily_trends(workouts, window.start, window.end),
            nutrition_trends=nutrition_daily_trends(meals, window.start, window.end),
            most_active_day=active_day,
            improvement_rate=improvement,
            insights=generate_insights(aggregates),
            recommendations=generate_recommendations(aggregates),
        )

    # === Nutrition ===

    def nutrition_today(self) -> NutritionProgress:
        user_id = self.user_id
        today = self._today()
        targets = self._store_call("get_nutrition_targets", self.store.get_nutrition_targets, user_id)
        meals = self._store_call(
            "list_meals", self.store.list_meals, user_id,
            DateRange(start=today, end=today, inclusive_end=True),
        )
        return nutrition_progress(targets, meals)

    def get_nutrition_targets(self) -> DailyNutrition:
        return self._store_call("get_nutrition_targets", self.store.get_nutrition_targets, self.user_id)

    def save_nutrition_targets(self, targets: DailyNutrition) -> DailyNutrition:
        return self._store_call(
            "save_nutrition_targets", self.store.save_nutrition_targets, self.user_id, targets
        )

    def list_meals(self, date_range: Optional[DateRange] = None) -> list[Meal]:
        return self._store_call("list_meals", self.store.list_meals, self.user_id, date_range)

    def add_meal(self, meal: Meal) -> Meal:
        """
        Log a meal for the signed-in user.

        A meal of the same type already logged that day absorbs the new
        meal's items; the stored (possibly merged) meal is returned.
        """
        user_id = self.user_id
        meal = meal.model_copy(update={"user_id": user_id})
        same_day = self._store_call(
            "list_meals", self.store.list_meals, user_id,
            DateRange(start=meal.date, end=meal.date, inclusive_end=True),
        )

        target = find_merge_target(same_day, meal)
        saved_id = meal.id
        if target is not None:
            saved_id = target.id
            self._logger.info(f"Merging {meal.type.value} items into meal {target.id}")

        merged = next(m for m in merge_meal(same_day, meal) if m.id == saved_id)

        return self._store_call("upsert_meal", self.store.upsert_meal, merged)

    def delete_meal(self, meal_id: str) -> None:
        owned = {m.id for m in self.list_meals()}
        if meal_id not in owned:
            raise RecordNotFoundError("delete_meal", "Meal", meal_id)
        self._store_call("delete_meal", self.store.delete_meal, meal_id)

    # === Workouts ===

    def list_workouts(self, date_range: Optional[DateRange] = None) -> list[WorkoutRecord]:
        return self._store_call("list_workouts", self.store.list_workouts, self.user_id, date_range)

    def log_workout(self, workout: WorkoutRecord) -> WorkoutRecord:
        workout = workout.model_copy(update={"user_id": self.user_id})
        return self._store_call("upsert_workout", self.store.upsert_workout, workout)

    def delete_workout(self, workout_id: str) -> None:
        owned = {w.id for w in self.list_workouts()}
        if workout_id not in owned:
            raise RecordNotFoundError("delete_workout", "Workout", workout_id)
        self._store_call("delete_workout", self.store.delete_workout, workout_id)

    # === Goals ===

    def list_goals(self, active_only: bool = False) -> list[GoalProgressView]:
        now = self._now()
        goals = self._store_call("list_goals", self.store.list_goals, self.user_id, active_only)
        return [describe_goal(g, now) for g in goals]

    def _owned_goal(self, goal_id: str, operation: str) -> Goal:
        goal = self._store_call("get_goal", self.store.get_goal, goal_id)
        if goal.user_id != self.user_id:
            raise RecordNotFoundError(operation, "Goal", goal_id)
        return goal

    def create_goal(self, goal: Goal) -> GoalProgressView:
        goal = goal.model_copy(update={"user_id": self.user_id})
        saved = self._store_call("upsert_goal", self.store.upsert_goal, goal)
        return describe_goal(saved, self._now())

    def update_goal_progress(self, goal_id: str, value: float) -> GoalProgressView:
        """
        Record a new current value.

        With `auto_complete_goals` enabled, a goal whose progress reaches
        100% is completed in the same write.

        Raises:
            GoalStateError: if the goal is already completed
        """
        now = self._now()
        goal = update_goal_progress(self._owned_goal(goal_id, "update_goal_progress"), value)

        if self.settings.auto_complete_goals and is_achieved(goal):
            self._logger.info(f"Goal {goal_id} reached its target, completing")
            goal = complete_goal(goal, now)

        saved = self._store_call("upsert_goal", self.store.upsert_goal, goal)
        return describe_goal(saved, now)

    def complete_goal(self, goal_id: str) -> GoalProgressView:
        now = self._now()
        goal = self._owned_goal(goal_id, "complete_goal")
        if goal.is_completed:
            return describe_goal(goal, now)
        saved = self._store_call("upsert_goal", self.store.upsert_goal, complete_goal(goal, now))
        return describe_goal(saved, now)

    def delete_goal(self, goal_id: str) -> None:
        self._owned_goal(goal_id, "delete_goal")
        self._store_call("delete_goal", self.store.delete_goal, goal_id)

    # === Reminders ===

    def list_reminders(self, enabled_only: bool = False) -> list[Reminder]:
        return self._store_call("list_reminders", self.store.list_reminders, self.user_id, enabled_only)

    def _owned_reminder(self, reminder_id: str, operation: str) -> Reminder:
        reminder = self._store_call("get_reminder", self.store.get_reminder, reminder_id)
        if reminder.user_id != self.user_id:
            raise RecordNotFoundError(operation, "Reminder", reminder_id)
        return reminder

    def add_reminder(self, reminder: Reminder) -> Reminder:
        reminder = reminder.model_copy(update={"user_id": self.user_id})
        return self._store_call("upsert_reminder", self.store.upsert_reminder, reminder)

    def toggle_reminder(self, reminder_id: str) -> Reminder:
        reminder = self._owned_reminder(reminder_id, "toggle_reminder")
        reminder = reminder.model_copy(update={"is_enabled": not reminder.is_enabled})
        return self._store_call("upsert_reminder", self.store.upsert_reminder, reminder)

    def delete_reminder(self, reminder_id: str) -> None:
        self._owned_reminder(reminder_id, "delete_reminder")
        self._store_call("delete_reminder", self.store.delete_reminder, reminder_id)

    def upcoming_reminders(self) -> list[UpcomingReminder]:
        reminders = self.list_reminders(enabled_only=True)
        return upcoming_reminders(reminders, self._now(), self.settings.upcoming_reminder_hours)
