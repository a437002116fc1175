"""
Tests for insight and recommendation rules
"""
from fittrack.engine.insights import (
    RECOMMENDATION_RULES,
    ReportAggregates,
    generate_insights,
    generate_recommendations,
)
from fittrack.engine.rollups import (
    AnalyticsPeriod,
    CalorieBalance,
    GoalSummary,
    MacroDistribution,
    NutritionSummary,
    WorkoutSummary,
)


def healthy_aggregates(**overrides) -> ReportAggregates:
    """Aggregates that trigger no recommendation."""
    values = dict(
        workouts=WorkoutSummary(total_minutes=180, total_calories=1500, count=4,
                                average_minutes_per_workout=45, average_calories_per_workout=375),
        nutrition=NutritionSummary(
            total_calories=14000, day_count=7, avg_daily_calories=2000,
            macro_distribution=MacroDistribution(protein_pct=30.0, carbs_pct=45.0, fat_pct=25.0),
        ),
        balance=CalorieBalance(consumed=14000, burned=14100, net=-100),
        goals=GoalSummary(total=4, completed=3, on_track=1, completion_rate=75.0),
        period=AnalyticsPeriod.WEEK,
    )
    values.update(overrides)
    return ReportAggregates(**values)


class TestRecommendations:
    """Each rule fires on its threshold"""

    def test_healthy_period_has_no_recommendations(self):
        assert generate_recommendations(healthy_aggregates()) == []

    def test_low_frequency(self):
        agg = healthy_aggregates(workouts=WorkoutSummary(count=2, average_minutes_per_workout=45))
        assert generate_recommendations(agg) == [
            "Try to increase workout frequency to at least 3 times per week"
        ]

    def test_short_workouts(self):
        agg = healthy_aggregates(workouts=WorkoutSummary(count=5, average_minutes_per_workout=29))
        assert generate_recommendations(agg) == [
            "Consider extending workout duration to 30+ minutes for better results"
        ]

    def test_low_protein(self):
        nutrition = NutritionSummary(total_calories=14000, macro_distribution=MacroDistribution(protein_pct=15.0))
        recs = generate_recommendations(healthy_aggregates(nutrition=nutrition))
        assert recs == ["Increase protein intake to support muscle recovery and growth"]

    def test_calorie_surplus(self):
        recs = generate_recommendations(healthy_aggregates(balance=CalorieBalance(net=501)))
        assert recs == ["Consider reducing calorie intake or increasing physical activity"]

    def test_surplus_threshold_is_exclusive(self):
        assert generate_recommendations(healthy_aggregates(balance=CalorieBalance(net=500))) == []

    def test_goals(self):
        goals = GoalSummary(total=4, completed=1, overdue=2, completion_rate=25.0)
        assert generate_recommendations(healthy_aggregates(goals=goals)) == [
            "Break down large goals into smaller, more achievable milestones",
            "Review overdue goals and adjust deadlines or targets if needed",
        ]

    def test_empty_period_fires_in_rule_order(self):
        recs = generate_recommendations(ReportAggregates())
        assert recs == [
            "Try to increase workout frequency to at least 3 times per week",
            "Consider extending workout duration to 30+ minutes for better results",
            "Increase protein intake to support muscle recovery and growth",
            "Break down large goals into smaller, more achievable milestones",
        ]

    def test_custom_rule_list(self):
        agg = ReportAggregates()
        assert generate_recommendations(agg, rules=RECOMMENDATION_RULES[:1]) == [
            "Try to increase workout frequency to at least 3 times per week"
        ]


class TestInsights:
    def test_full_period(self):
        goals = GoalSummary(total=4, completed=2, overdue=1, completion_rate=50.0)
        agg = healthy_aggregates(goals=goals, improvement_rate=12.4, most_active_day="Monday")
        assert generate_insights(agg) == [
            "You completed 4 workouts this week",
            "Your workout duration improved by 12%",
            "Your most active day is Monday",
            "Average daily intake: 2000 calories",
            "Macro distribution: 30% protein, 45% carbs, 25% fat",
            "Goal completion rate: 50%",
            "1 goals are overdue and need attention",
        ]

    def test_empty_period(self):
        agg = ReportAggregates(period=AnalyticsPeriod.MONTH)
        assert generate_insights(agg) == ["You completed 0 workouts this month"]

    def test_no_improvement_line_when_declining(self):
        agg = healthy_aggregates(improvement_rate=-20.0)
        assert not any("improved" in line for line in generate_insights(agg))
