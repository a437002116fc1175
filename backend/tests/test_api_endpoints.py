"""
Integration tests for the HTTP endpoints

Runs the FastAPI app through TestClient against a fresh in-memory store
and a fixed clock.
"""
from datetime import timedelta

from factories import NOW, days_ago


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestAuthentication:
    def test_missing_user_header_is_unauthorized(self, client):
        response = client.get("/dashboard")
        assert response.status_code == 401
        assert response.json()["detail"] == "User not logged in"


class TestWorkoutEndpoints:
    def test_log_list_delete(self, client, auth_headers):
        created = client.post("/workouts", headers=auth_headers, json={
            "name": "Morning Run", "type": "cardio", "duration_minutes": 30, "calories_burned": 320,
        })
        assert created.status_code == 200
        workout = created.json()
        assert workout["date"] == NOW.date().isoformat()

        listed = client.get("/workouts", headers=auth_headers).json()
        assert listed["total"] == 1

        assert client.delete(f"/workouts/{workout['id']}", headers=auth_headers).status_code == 200
        assert client.delete(f"/workouts/{workout['id']}", headers=auth_headers).status_code == 404

    def test_invalid_duration(self, client, auth_headers):
        response = client.post("/workouts", headers=auth_headers, json={
            "name": "Run", "type": "cardio", "duration_minutes": 0,
        })
        assert response.status_code == 422


class TestMealEndpoints:
    def test_meals_of_same_type_merge(self, client, auth_headers):
        client.post("/meals", headers=auth_headers, json={
            "type": "snack", "items": [{"food_id": "apple"}],
        })
        response = client.post("/meals", headers=auth_headers, json={
            "type": "snack", "items": [{"food_id": "almonds", "quantity": 2}],
        })
        assert response.status_code == 200
        assert len(response.json()["food_items"]) == 2
        assert response.json()["total_calories"] == 80 + 328

        meals = client.get("/meals", headers=auth_headers, params={"date": NOW.date().isoformat()}).json()
        assert meals["total"] == 1

    def test_unknown_food(self, client, auth_headers):
        response = client.post("/meals", headers=auth_headers, json={
            "type": "lunch", "items": [{"food_id": "pizza"}],
        })
        assert response.status_code == 404

    def test_nutrition_today_against_targets(self, client, auth_headers):
        client.put("/nutrition/targets", headers=auth_headers, json={"target_calories": 2200})
        client.post("/meals", headers=auth_headers, json={
            "type": "lunch", "items": [{"food_id": "chicken_salad", "quantity": 4}],
        })
        progress = client.get("/nutrition/today", headers=auth_headers).json()
        assert progress["consumed_calories"] == 1800
        assert progress["remaining_calories"] == 400
        assert progress["calorie_pct"] == 82

    def test_food_search(self, client):
        foods = client.get("/foods", params={"q": "protein"}).json()
        assert {f["id"] for f in foods["foods"]} == {"protein_bar", "protein_shake"}


class TestGoalEndpoints:
    def _create(self, client, headers, **overrides):
        body = {
            "name": "Lose weight",
            "category": "weight",
            "current_numeric_value": 73.5,
            "target_numeric_value": 70,
            "deadline": (NOW + timedelta(days=30)).isoformat(),
        }
        body.update(overrides)
        response = client.post("/goals", headers=headers, json=body)
        assert response.status_code == 200
        return response.json()

    def test_progress_and_completion(self, client, auth_headers):
        view = self._create(client, auth_headers)
        goal_id = view["goal"]["id"]
        assert view["progress_percentage"] == 0

        halfway = client.post(f"/goals/{goal_id}/progress", headers=auth_headers, json={"value": 71.75})
        assert halfway.json()["progress_percentage"] == 50

        done = client.post(f"/goals/{goal_id}/progress", headers=auth_headers, json={"value": 70})
        assert done.json()["goal"]["is_completed"] is True

        again = client.post(f"/goals/{goal_id}/progress", headers=auth_headers, json={"value": 69})
        assert again.status_code == 409

    def test_overdue_goal(self, client, auth_headers):
        self._create(client, auth_headers, category="steps", current_numeric_value=10,
                     target_numeric_value=100, deadline=(NOW - timedelta(days=1)).isoformat())
        goals = client.get("/goals", headers=auth_headers).json()["goals"]
        assert goals[0]["is_overdue"] is True
        assert goals[0]["days_remaining"] == 0

    def test_goals_are_per_user(self, client, auth_headers):
        view = self._create(client, auth_headers)
        other = {"X-User-Id": "someone_else"}
        assert client.get("/goals", headers=other).json()["total"] == 0
        assert client.delete(f"/goals/{view['goal']['id']}", headers=other).status_code == 404
        assert client.post(f"/goals/{view['goal']['id']}/complete", headers=auth_headers).status_code == 200

    def test_deadline_with_utc_offset(self, client, auth_headers):
        """A Z-suffixed deadline is stored as local time and compares with the clock"""
        view = self._create(client, auth_headers, deadline="2026-04-01T00:00:00Z")
        assert view["days_remaining"] in (20, 21)
        assert client.get("/goals", headers=auth_headers).status_code == 200
        assert client.get("/dashboard", headers=auth_headers).status_code == 200

    def test_categories(self, client):
        response = client.get("/goals/categories")
        assert response.status_code == 200
        categories = {item["value"]: item for item in response.json()["categories"]}
        assert len(categories) == 8
        assert categories["weight"]["unit"] == "kg"
        assert categories["weight"]["label"] == "Weight"


class TestReportEndpoints:
    def test_weekly_report(self, client, auth_headers):
        for day, minutes, calories in ((days_ago(2), 30, 320), (days_ago(1), 45, 280)):
            client.post("/workouts", headers=auth_headers, json={
                "name": "Run", "type": "cardio", "date": day.isoformat(),
                "duration_minutes": minutes, "calories_burned": calories,
            })
        report = client.get("/reports/week", headers=auth_headers).json()
        assert report["workouts"]["total_minutes"] == 75
        assert report["workouts"]["total_calories"] == 600
        assert report["workouts"]["average_minutes_per_workout"] == 37
        assert report["insights"][0] == "You completed 2 workouts this week"

    def test_unknown_period(self, client, auth_headers):
        assert client.get("/reports/decade", headers=auth_headers).status_code == 422

    def test_dashboard(self, client, auth_headers):
        response = client.get("/dashboard", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["targets"]["target_calories"] == 2000


class TestReminderEndpoints:
    def test_create_toggle_upcoming(self, client, auth_headers):
        created = client.post("/reminders", headers=auth_headers, json={
            "title": "Lunch", "type": "meal", "time": "12:30",
        }).json()
        upcoming = client.get("/reminders/upcoming", headers=auth_headers).json()
        assert upcoming["total"] == 1

        toggled = client.post(f"/reminders/{created['id']}/toggle", headers=auth_headers).json()
        assert toggled["is_enabled"] is False
        assert client.get("/reminders/upcoming", headers=auth_headers).json()["total"] == 0

    def test_invalid_time(self, client, auth_headers):
        response = client.post("/reminders", headers=auth_headers, json={"title": "Lunch", "time": "25:00"})
        assert response.status_code == 422

    def test_from_template(self, client, auth_headers):
        assert len(client.get("/reminders/templates").json()["templates"]) == 5
        created = client.post("/reminders/templates/Sleep Time", headers=auth_headers).json()
        assert created["time"] == "22:00"
        assert client.get("/reminders", headers=auth_headers).json()["total"] == 1

    def test_delete(self, client, auth_headers):
        created = client.post("/reminders", headers=auth_headers, json={"title": "Lunch", "time": "12:30"}).json()
        assert client.delete(f"/reminders/{created['id']}", headers=auth_headers).status_code == 200
        assert client.get("/reminders", headers=auth_headers).json()["total"] == 0
