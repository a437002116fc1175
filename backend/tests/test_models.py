"""
Tests for the domain models

Covers derived meal totals, goal value defaults, reminder validation and
the DateRange boundary contract.
"""
import pytest
from datetime import date, datetime, timezone
from pydantic import ValidationError

from fittrack.core.models import (
    DailyNutrition,
    DateRange,
    GOAL_CATEGORY_INFO,
    GoalCategory,
    Meal,
    MealType,
    Priority,
    Reminder,
    SelectedFoodItem,
    WorkoutRecord,
    WorkoutType,
    format_numeric,
)

from factories import USER_ID, make_food, make_goal, make_meal


class TestFormatNumeric:
    """String form of numeric goal values"""

    def test_whole_number_has_no_decimal(self):
        assert format_numeric(70.0) == "70"

    def test_fraction_is_kept(self):
        assert format_numeric(71.75) == "71.75"


class TestMealTotals:
    """Derived totals on selected items and meals"""

    def test_item_calories_are_truncated(self):
        """105 kcal x 1.5 = 157.5, truncated to 157"""
        item = SelectedFoodItem(food_item=make_food(105), quantity=1.5)
        assert item.total_calories == 157

    def test_item_macros_scale_with_quantity(self):
        item = SelectedFoodItem(food_item=make_food(100, protein=10, carbs=20, fat=5), quantity=2)
        assert item.total_protein == 20
        assert item.total_carbs == 40
        assert item.total_fat == 10

    def test_display_portion_prefers_custom_portion(self):
        food = make_food(100)
        assert SelectedFoodItem(food_item=food).display_portion == "1 serving"
        assert SelectedFoodItem(food_item=food, custom_portion="half").display_portion == "half"

    def test_meal_totals_sum_items(self):
        meal = make_meal(calories=300, protein=10)
        meal.food_items.append(SelectedFoodItem(food_item=make_food(200, protein=5)))
        assert meal.total_calories == 500
        assert meal.total_protein == 15

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            SelectedFoodItem(food_item=make_food(100), quantity=0)

    def test_meal_requires_a_date(self):
        with pytest.raises(ValidationError):
            Meal(user_id=USER_ID, type=MealType.LUNCH, food_items=[])

    def test_meal_type_order(self):
        assert [t.order for t in MealType] == [0, 1, 2, 3]
        assert MealType.SNACK.order > MealType.DINNER.order

    def test_default_targets(self):
        targets = DailyNutrition()
        assert targets.target_calories == 2000
        assert targets.target_protein == 150
        assert targets.target_fat == 65


class TestWorkoutRecord:
    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError):
            WorkoutRecord(user_id=USER_ID, name="Run", type=WorkoutType.CARDIO,
                          date=date(2026, 3, 1), duration_minutes=0)

    def test_hiit_display_name(self):
        assert WorkoutType.HIIT.display_name == "HIIT"
        assert WorkoutType.CARDIO.display_name == "Cardio"


class TestGoalDefaults:
    """Values filled in when a goal is constructed"""

    def test_string_values_follow_numeric_values(self):
        goal = make_goal(GoalCategory.WEIGHT, current=73.5, target=70)
        assert goal.current_value == "73.5"
        assert goal.target_value == "70"

    def test_starting_value_captured(self):
        goal = make_goal(GoalCategory.WEIGHT, current=73.5, target=70)
        assert goal.starting_value == 73.5

    def test_explicit_starting_value_kept(self):
        goal = make_goal(GoalCategory.WEIGHT, current=72, target=70, starting_value=75)
        assert goal.starting_value == 75

    def test_priority_rank(self):
        assert Priority.LOW.rank < Priority.URGENT.rank

    def test_aware_deadline_becomes_local_naive(self):
        deadline = datetime(2026, 4, 1, tzinfo=timezone.utc)
        goal = make_goal(deadline=deadline)
        assert goal.deadline.tzinfo is None
        assert goal.deadline == deadline.astimezone().replace(tzinfo=None)

    def test_naive_deadline_unchanged(self):
        goal = make_goal(deadline=datetime(2026, 4, 1, 9, 0))
        assert goal.deadline == datetime(2026, 4, 1, 9, 0)

    def test_every_category_has_display_info(self):
        assert set(GOAL_CATEGORY_INFO) == set(GoalCategory)
        assert GOAL_CATEGORY_INFO[GoalCategory.WEIGHT].unit == "kg"


class TestReminderValidation:
    def test_valid_time(self):
        reminder = Reminder(user_id=USER_ID, title="Water", time="07:30")
        assert reminder.is_enabled

    @pytest.mark.parametrize("value", ["24:00", "7.30", "12:60", "noon"])
    def test_invalid_time_rejected(self, value):
        with pytest.raises(ValidationError):
            Reminder(user_id=USER_ID, title="Water", time=value)


class TestDateRange:
    """Half-open by default, closed on request, empty when inverted"""

    def test_half_open_excludes_end(self):
        window = DateRange(start=date(2026, 3, 1), end=date(2026, 3, 8))
        assert window.contains(date(2026, 3, 1))
        assert window.contains(date(2026, 3, 7))
        assert not window.contains(date(2026, 3, 8))
        assert window.day_count() == 7

    def test_inclusive_end(self):
        window = DateRange(start=date(2026, 3, 1), end=date(2026, 3, 8), inclusive_end=True)
        assert window.contains(date(2026, 3, 8))
        assert window.day_count() == 8

    def test_inverted_window_is_empty(self):
        window = DateRange(start=date(2026, 3, 8), end=date(2026, 3, 1))
        assert window.day_count() == 0
        assert window.days() == []
        assert not window.contains(date(2026, 3, 5))

    def test_datetimes_are_truncated(self):
        window = DateRange(start=datetime(2026, 3, 1, 18, 30), end=datetime(2026, 3, 2, 6, 0))
        assert window.start == date(2026, 3, 1)
        assert window.days() == [date(2026, 3, 1)]
