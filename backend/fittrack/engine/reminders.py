"""
FitTrack - Reminder Scheduling Helpers

Works out when a recurring reminder next fires. Nothing here schedules or
delivers notifications; callers poll `upcoming_reminders` and act on it.

A reminder with no repeat days fires every day.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from fittrack.core.models import WEEKDAYS, Priority, Reminder, ReminderType

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = WEEKDAYS[:5]


def parse_reminder_time(value: str) -> time:
    """Parse an "HH:MM" string into a time.

    Raises:
        ValueError: if the string is not a valid 24-hour time
    """
    try:
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid reminder time {value!r}, expected HH:MM") from e


def _fires_on(reminder: Reminder, day_name: str) -> bool:
    return not reminder.repeat_days or day_name in reminder.repeat_days


def next_occurrence(reminder: Reminder, now: datetime) -> Optional[datetime]:
    """
    The first time strictly after `now` that the reminder fires.

    Disabled reminders never fire and return None.
    """
    if not reminder.is_enabled:
        return None

    at = parse_reminder_time(reminder.time)
    # Eight days covers a weekly repeat whose only slot today has passed
    for offset in range(8):
        day = now.date() + timedelta(days=offset)
        if not _fires_on(reminder, WEEKDAYS[day.weekday()]):
            continue
        candidate = datetime.combine(day, at)
        if candidate > now:
            return candidate
    return None


class UpcomingReminder(BaseModel):
    reminder: Reminder
    occurs_at: datetime


def upcoming_reminders(
    reminders: Iterable[Reminder],
    now: datetime,
    hours_ahead: int = 24,
) -> list[UpcomingReminder]:
    """Enabled reminders that next fire within `hours_ahead`, soonest first."""
    horizon = now + timedelta(hours=hours_ahead)
    upcoming = []
    for reminder in reminders:
        occurs_at = next_occurrence(reminder, now)
        if occurs_at is not None and occurs_at <= horizon:
            upcoming.append(UpcomingReminder(reminder=reminder, occurs_at=occurs_at))
    upcoming.sort(key=lambda item: item.occurs_at)
    return upcoming


class ReminderTemplate(BaseModel):
    title: str
    type: ReminderType
    time: str
    repeat_days: list[str] = Field(default_factory=list)
    description: str = ""

    def to_reminder(self, user_id: str, priority: Priority = Priority.MEDIUM) -> Reminder:
        """Instantiate the template as a new reminder for a user."""
        return Reminder(
            user_id=user_id,
            title=self.title,
            type=self.type,
            time=self.time,
            repeat_days=list(self.repeat_days),
            description=self.description,
            priority=priority,
        )


REMINDER_TEMPLATES: list[ReminderTemplate] = [
    ReminderTemplate(
        title="Morning Workout",
        type=ReminderType.WORKOUT,
        time="07:00",
        repeat_days=["Monday", "Wednesday", "Friday"],
        description="Time for your morning workout!",
    ),
    ReminderTemplate(
        title="Drink Water",
        type=ReminderType.WATER,
        time="10:00",
        repeat_days=list(WEEKDAYS),
        description="Stay hydrated! Drink a glass of water.",
    ),
    ReminderTemplate(
        title="Healthy Lunch",
        type=ReminderType.MEAL,
        time="12:30",
        repeat_days=list(WEEKDAY_NAMES),
        description="Time for a nutritious lunch!",
    ),
    ReminderTemplate(
        title="Evening Walk",
        type=ReminderType.WORKOUT,
        time="18:00",
        repeat_days=list(WEEKDAYS),
        description="Take a relaxing evening walk.",
    ),
    ReminderTemplate(
        title="Sleep Time",
        type=ReminderType.SLEEP,
        time="22:00",
        repeat_days=list(WEEKDAYS),
        description="Time to prepare for bed for better recovery.",
    ),
]


def find_template(title: str) -> Optional[ReminderTemplate]:
    return next((t for t in REMINDER_TEMPLATES if t.title.lower() == title.lower()), None)
