"""
FitTrack - Goal Lifecycle

    ACTIVE -> COMPLETED
    ACTIVE -> DELETED
    COMPLETED -> DELETED

Transitions return new Goal objects. Deletion belongs to the record store;
re-opening a completed goal is not supported.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from fittrack.core.errors import GoalStateError
from fittrack.core.models import Goal, format_numeric

logger = logging.getLogger(__name__)


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DELETED = "deleted"


def goal_status(goal: Optional[Goal]) -> GoalStatus:
    """Status of a goal snapshot; a missing goal is deleted."""
    if goal is None:
        return GoalStatus.DELETED
    return GoalStatus.COMPLETED if goal.is_completed else GoalStatus.ACTIVE


def complete_goal(goal: Goal, now: datetime) -> Goal:
    """
    Mark a goal completed and force its current value to the target.

    Completing an already completed goal returns it unchanged, so the
    original completion time is kept.
    """
    if goal.is_completed:
        return goal

    logger.debug(f"Completing goal {goal.id} at {now.isoformat()}")
    return goal.model_copy(update={
        "is_completed": True,
        "completed_at": now,
        "current_numeric_value": goal.target_numeric_value,
        "current_value": goal.target_value or format_numeric(goal.target_numeric_value),
    })


def update_goal_progress(goal: Goal, new_value: float) -> Goal:
    """
    Record a new current value for an active goal.

    Never completes the goal; callers check `is_achieved` and decide.

    Raises:
        GoalStateError: if the goal is already completed
    """
    if goal.is_completed:
        raise GoalStateError(goal.id, "cannot update progress of a completed goal")

    return goal.model_copy(update={
        "current_numeric_value": float(new_value),
        "current_value": format_numeric(new_value),
    })
