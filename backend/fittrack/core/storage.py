"""
FitTrack - Record Storage

The RecordStore interface the progress service reads snapshots from, and an
in-memory implementation. Stores are constructed explicitly and passed in;
there is no process-wide instance.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Optional, TypeVar

from pydantic import BaseModel

from fittrack.core.errors import RecordNotFoundError
from fittrack.core.models import (
    DailyNutrition,
    DateRange,
    Goal,
    Meal,
    Reminder,
    WorkoutRecord,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordStore(ABC):
    """
    Persistence collaborator scoped by user.

    Every operation either returns or raises StoreError; callers never
    receive a partially applied write.
    """

    # === Workouts ===

    @abstractmethod
    def list_workouts(self, user_id: str, date_range: Optional[DateRange] = None) -> list[WorkoutRecord]:
        """Workouts for a user, oldest first, optionally limited to a window."""

    @abstractmethod
    def upsert_workout(self, workout: WorkoutRecord) -> WorkoutRecord:
        ...

    @abstractmethod
    def delete_workout(self, workout_id: str) -> None:
        ...

    # === Meals ===

    @abstractmethod
    def list_meals(self, user_id: str, date_range: Optional[DateRange] = None) -> list[Meal]:
        """Meals for a user ordered by date then meal type."""

    @abstractmethod
    def upsert_meal(self, meal: Meal) -> Meal:
        ...

    @abstractmethod
    def delete_meal(self, meal_id: str) -> None:
        ...

    # === Goals ===

    @abstractmethod
    def list_goals(self, user_id: str, active_only: bool = False) -> list[Goal]:
        ...

    @abstractmethod
    def get_goal(self, goal_id: str) -> Goal:
        """Raises RecordNotFoundError for unknown ids."""

    @abstractmethod
    def upsert_goal(self, goal: Goal) -> Goal:
        ...

    @abstractmethod
    def delete_goal(self, goal_id: str) -> None:
        ...

    # === Reminders ===

    @abstractmethod
    def list_reminders(self, user_id: str, enabled_only: bool = False) -> list[Reminder]:
        ...

    @abstractmethod
    def get_reminder(self, reminder_id: str) -> Reminder:
        ...

    @abstractmethod
    def upsert_reminder(self, reminder: Reminder) -> Reminder:
        ...

    @abstractmethod
    def delete_reminder(self, reminder_id: str) -> None:
        ...

    # === Nutrition targets ===

    @abstractmethod
    def get_nutrition_targets(self, user_id: str) -> DailyNutrition:
        """The user's targets, or the default profile when none were saved."""

    @abstractmethod
    def save_nutrition_targets(self, user_id: str, targets: DailyNutrition) -> DailyNutrition:
        ...

    # === Users ===

    @abstractmethod
    def delete_user(self, user_id: str) -> bool:
        """Delete everything a user owns. Returns whether anything was removed."""


class InMemoryRecordStore(RecordStore):
    """
    Thread-safe in-memory record store.

    Records are copied on the way in and on the way out so callers can
    never mutate stored state through a returned object.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._workouts: dict[str, WorkoutRecord] = {}
        self._meals: dict[str, Meal] = {}
        self._goals: dict[str, Goal] = {}
        self._reminders: dict[str, Reminder] = {}
        self._targets: dict[str, DailyNutrition] = {}
        logger.info("InMemoryRecordStore initialized")

    @staticmethod
    def _copy(record: RecordT) -> RecordT:
        return record.model_copy(deep=True)

    def _get(self, table: dict[str, RecordT], record_id: str, operation: str, record_type: str) -> RecordT:
        record = table.get(record_id)
        if record is None:
            raise RecordNotFoundError(operation, record_type, record_id)
        return self._copy(record)

    def _delete(self, table: dict, record_id: str, operation: str, record_type: str) -> None:
        with self._lock:
            if record_id not in table:
                raise RecordNotFoundError(operation, record_type, record_id)
            del table[record_id]
        logger.info(f"Deleted {record_type} {record_id}")

    # === Workouts ===

    def list_workouts(self, user_id: str, date_range: Optional[DateRange] = None) -> list[WorkoutRecord]:
        with self._lock:
            workouts = [
                self._copy(w) for w in self._workouts.values()
                if w.user_id == user_id and (date_range is None or date_range.contains(w.date))
            ]
        workouts.sort(key=lambda w: w.date)
        return workouts

    def upsert_workout(self, workout: WorkoutRecord) -> WorkoutRecord:
        with self._lock:
            self._workouts[workout.id] = self._copy(workout)
        logger.info(f"Saved workout {workout.id} for user {workout.user_id}")
        return workout

    def delete_workout(self, workout_id: str) -> None:
        self._delete(self._workouts, workout_id, "delete_workout", "Workout")

    # === Meals ===

    def list_meals(self, user_id: str, date_range: Optional[DateRange] = None) -> list[Meal]:
        with self._lock:
            meals = [
                self._copy(m) for m in self._meals.values()
                if m.user_id == user_id and (date_range is None or date_range.contains(m.date))
            ]
        meals.sort(key=lambda m: (m.date, m.type.order))
        return meals

    def upsert_meal(self, meal: Meal) -> Meal:
        with self._lock:
            self._meals[meal.id] = self._copy(meal)
        logger.info(f"Saved {meal.type.value} meal {meal.id} for user {meal.user_id}")
        return meal

    def delete_meal(self, meal_id: str) -> None:
        self._delete(self._meals, meal_id, "delete_meal", "Meal")

    # === Goals ===

    def list_goals(self, user_id: str, active_only: bool = False) -> list[Goal]:
        with self._lock:
            goals = [
                self._copy(g) for g in self._goals.values()
                if g.user_id == user_id and not (active_only and g.is_completed)
            ]
        goals.sort(key=lambda g: g.created_at, reverse=True)
        return goals

    def get_goal(self, goal_id: str) -> Goal:
        with self._lock:
            return self._get(self._goals, goal_id, "get_goal", "Goal")

    def upsert_goal(self, goal: Goal) -> Goal:
        with self._lock:
            self._goals[goal.id] = self._copy(goal)
        logger.info(f"Saved goal {goal.id} for user {goal.user_id}")
        return goal

    def delete_goal(self, goal_id: str) -> None:
        self._delete(self._goals, goal_id, "delete_goal", "Goal")

    # === Reminders ===

    def list_reminders(self, user_id: str, enabled_only: bool = False) -> list[Reminder]:
        with self._lock:
            reminders = [
                self._copy(r) for r in self._reminders.values()
                if r.user_id == user_id and (r.is_enabled or not enabled_only)
            ]
        reminders.sort(key=lambda r: r.time)
        return reminders

    def get_reminder(self, reminder_id: str) -> Reminder:
        with self._lock:
            return self._get(self._reminders, reminder_id, "get_reminder", "Reminder")

    def upsert_reminder(self, reminder: Reminder) -> Reminder:
        with self._lock:
            self._reminders[reminder.id] = self._copy(reminder)
        logger.info(f"Saved reminder {reminder.id} for user {reminder.user_id}")
        return reminder

    def delete_reminder(self, reminder_id: str) -> None:
        self._delete(self._reminders, reminder_id, "delete_reminder", "Reminder")

    # === Nutrition targets ===

    def get_nutrition_targets(self, user_id: str) -> DailyNutrition:
        with self._lock:
            targets = self._targets.get(user_id)
            return self._copy(targets) if targets else DailyNutrition()

    def save_nutrition_targets(self, user_id: str, targets: DailyNutrition) -> DailyNutrition:
        with self._lock:
            self._targets[user_id] = self._copy(targets)
        logger.info(f"Saved nutrition targets for user {user_id}")
        return targets

    # === Users ===

    def delete_user(self, user_id: str) -> bool:
        """Delete a user's records of every kind (cascade)."""
        removed: dict[str, int] = defaultdict(int)
        with self._lock:
            for name, table in (
                ("workouts", self._workouts),
                ("meals", self._meals),
                ("goals", self._goals),
                ("reminders", self._reminders),
            ):
                for record_id in [rid for rid, rec in table.items() if rec.user_id == user_id]:
                    del table[record_id]
                    removed[name] += 1
            if self._targets.pop(user_id, None) is not None:
                removed["targets"] += 1

        if removed:
            logger.info(f"Deleted user {user_id}: {dict(removed)}")
        return bool(removed)

    # === Utility ===

    def clear_all(self):
        """Clear all data (for testing)."""
        with self._lock:
            self._workouts.clear()
            self._meals.clear()
            self._goals.clear()
            self._reminders.clear()
            self._targets.clear()
        logger.warning("All storage data cleared")
