"""
FitTrack - Domain Models

Defines the logged entities the analytics engine reads:
- Workouts and their types
- Food reference data, selected portions and meals
- Goals with their category, priority and completion state
- Daily nutrition targets
- Reminders
- Date windows used by every rollup
"""

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from typing import Optional, NamedTuple
from datetime import date as date_type, datetime, timedelta
from enum import Enum
from uuid import uuid4


def _new_id() -> str:
    return str(uuid4())


def format_numeric(value: float) -> str:
    """String form of a numeric goal value ("70" for whole numbers, "71.75" otherwise)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


# === Workouts ===

class WorkoutType(str, Enum):
    """Kinds of logged workout."""
    CARDIO = "cardio"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"
    HIIT = "hiit"

    @property
    def display_name(self) -> str:
        return "HIIT" if self is WorkoutType.HIIT else self.value.title()


class WorkoutRecord(BaseModel):
    """A single logged workout."""
    id: str = Field(default_factory=_new_id, description="Unique workout ID")
    user_id: str = Field(..., description="Owning user")
    name: str = Field(..., min_length=1)
    type: WorkoutType
    date: date_type
    duration_minutes: int = Field(..., gt=0, description="Duration in minutes")
    calories_burned: int = Field(default=0, ge=0, description="Calories burned")
    notes: str = ""


# === Nutrition ===

class FoodCategory(str, Enum):
    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    GRAINS = "grains"
    PROTEIN = "protein"
    DAIRY = "dairy"
    FATS = "fats"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    OTHER = "other"


class FoodItem(BaseModel):
    """Reference nutrition data for one serving of a food."""
    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1)
    calories_per_serving: int = Field(..., ge=0)
    serving_size: str = Field(..., description="Human-readable serving (e.g., '1 cup')")
    protein: float = Field(default=0, ge=0, description="Protein in grams")
    carbs: float = Field(default=0, ge=0, description="Carbohydrates in grams")
    fat: float = Field(default=0, ge=0, description="Fat in grams")
    fiber: Optional[float] = Field(default=None, ge=0, description="Fiber in grams")
    sugar: Optional[float] = Field(default=None, ge=0, description="Sugar in grams")
    sodium: Optional[float] = Field(default=None, ge=0, description="Sodium in mg")
    category: FoodCategory = FoodCategory.OTHER


class SelectedFoodItem(BaseModel):
    """A food item added to a meal with a quantity multiplier."""
    food_item: FoodItem
    quantity: float = Field(default=1.0, gt=0)
    custom_portion: Optional[str] = None

    @computed_field
    @property
    def total_calories(self) -> int:
        # Truncated, never rounded
        return int(self.food_item.calories_per_serving * self.quantity)

    @computed_field
    @property
    def total_protein(self) -> float:
        return self.food_item.protein * self.quantity

    @computed_field
    @property
    def total_carbs(self) -> float:
        return self.food_item.carbs * self.quantity

    @computed_field
    @property
    def total_fat(self) -> float:
        return self.food_item.fat * self.quantity

    @property
    def display_portion(self) -> str:
        return self.custom_portion or self.food_item.serving_size


class MealType(str, Enum):
    """Categorization of meal timing. Declaration order is display order."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @property
    def order(self) -> int:
        return list(MealType).index(self)


class Meal(BaseModel):
    """A meal of a given type on a given day."""
    id: str = Field(default_factory=_new_id)
    user_id: str = Field(..., description="Owning user")
    type: MealType
    time: str = Field(default="", description="Time label (e.g., '08:30')")
    date: date_type
    food_items: list[SelectedFoodItem] = Field(default_factory=list)

    @computed_field
    @property
    def total_calories(self) -> int:
        return sum(item.total_calories for item in self.food_items)

    @computed_field
    @property
    def total_protein(self) -> float:
        return sum(item.total_protein for item in self.food_items)

    @computed_field
    @property
    def total_carbs(self) -> float:
        return sum(item.total_carbs for item in self.food_items)

    @computed_field
    @property
    def total_fat(self) -> float:
        return sum(item.total_fat for item in self.food_items)


class DailyNutrition(BaseModel):
    """Per-user daily nutrition target profile."""
    target_calories: int = Field(default=2000, ge=0)
    target_protein: float = Field(default=150.0, ge=0, description="Protein target in grams")
    target_carbs: float = Field(default=250.0, ge=0, description="Carbohydrate target in grams")
    target_fat: float = Field(default=65.0, ge=0, description="Fat target in grams")
    target_fiber: float = Field(default=25.0, ge=0, description="Fiber target in grams")
    target_sodium: float = Field(default=2300.0, ge=0, description="Sodium target in mg")


# === Goals ===

class GoalCategory(str, Enum):
    """What a goal tracks."""
    WEIGHT = "weight"
    CARDIO = "cardio"
    STRENGTH = "strength"
    NUTRITION = "nutrition"
    HYDRATION = "hydration"
    ACTIVITY = "activity"
    SLEEP = "sleep"
    STEPS = "steps"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return list(Priority).index(self) + 1


class CategoryInfo(NamedTuple):
    label: str
    unit: str
    color: str


# Presentation metadata only; the engine never reads this table
GOAL_CATEGORY_INFO: dict[GoalCategory, CategoryInfo] = {
    GoalCategory.WEIGHT: CategoryInfo("Weight", "kg", "#4ECDC4"),
    GoalCategory.CARDIO: CategoryInfo("Cardio", "km", "#FF9500"),
    GoalCategory.STRENGTH: CategoryInfo("Strength", "reps", "#45B7D1"),
    GoalCategory.NUTRITION: CategoryInfo("Nutrition", "kcal", "#96CEB4"),
    GoalCategory.HYDRATION: CategoryInfo("Hydration", "L", "#00C851"),
    GoalCategory.ACTIVITY: CategoryInfo("Activity", "times", "#8E44AD"),
    GoalCategory.SLEEP: CategoryInfo("Sleep", "hours", "#5C6BC0"),
    GoalCategory.STEPS: CategoryInfo("Steps", "steps", "#FFB300"),
}


class Goal(BaseModel):
    """
    A user goal with a numeric current/target pair.

    `starting_value` is the reference weight-category progress is measured
    from. When omitted it is captured at construction as the larger of the
    current and target values.
    """
    id: str = Field(default_factory=_new_id, description="Unique goal ID")
    user_id: str = Field(..., description="Owning user")
    name: str = Field(..., min_length=1)
    category: GoalCategory
    current_value: str = ""
    target_value: str = ""
    current_numeric_value: float = 0.0
    target_numeric_value: float = 0.0
    starting_value: Optional[float] = None
    deadline: datetime
    created_at: datetime = Field(default_factory=datetime.now)
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    priority: Priority = Priority.MEDIUM
    description: str = ""

    @field_validator("deadline", "created_at", "completed_at", mode="after")
    @classmethod
    def _to_local_naive(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Clocks report naive local time; aware inputs are converted to match
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def _fill_derived_values(self) -> "Goal":
        if self.starting_value is None:
            self.starting_value = max(self.current_numeric_value, self.target_numeric_value)
        if not self.current_value:
            self.current_value = format_numeric(self.current_numeric_value)
        if not self.target_value:
            self.target_value = format_numeric(self.target_numeric_value)
        return self


# === Reminders ===

class ReminderType(str, Enum):
    WORKOUT = "workout"
    WATER = "water"
    MEAL = "meal"
    MEDICATION = "medication"
    SLEEP = "sleep"
    WEIGH_IN = "weigh_in"
    CUSTOM = "custom"


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class Reminder(BaseModel):
    """A recurring reminder. Delivery is handled outside this package."""
    id: str = Field(default_factory=_new_id)
    user_id: str
    title: str = Field(..., min_length=1)
    type: ReminderType = ReminderType.CUSTOM
    time: str = Field(..., pattern=r"^([01]?\d|2[0-3]):[0-5]\d$", description="HH:MM")
    repeat_days: list[str] = Field(default_factory=list, description="Weekday names")
    is_enabled: bool = True
    description: Optional[str] = None
    snooze_minutes: int = Field(default=5, ge=0)
    priority: Priority = Priority.MEDIUM
    created_at: datetime = Field(default_factory=datetime.now)


# === Date windows ===

def as_date(value: date_type) -> date_type:
    """Normalize a datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


class DateRange(BaseModel):
    """
    A calendar-day window.

    Half-open `[start, end)` by default; `inclusive_end=True` makes it
    `[start, end]`. An inverted window contains no days.
    """
    start: date_type
    end: date_type
    inclusive_end: bool = False

    @field_validator("start", "end", mode="before")
    @classmethod
    def _truncate_datetimes(cls, value):
        return as_date(value) if isinstance(value, datetime) else value

    @property
    def last_day(self) -> date_type:
        return self.end if self.inclusive_end else self.end - timedelta(days=1)

    def contains(self, day: date_type) -> bool:
        day = as_date(day)
        if self.inclusive_end:
            return self.start <= day <= self.end
        return self.start <= day < self.end

    def day_count(self) -> int:
        return max(0, (self.last_day - self.start).days + 1)

    def days(self) -> list[date_type]:
        return [self.start + timedelta(days=i) for i in range(self.day_count())]
