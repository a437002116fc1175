"""
FitTrack - FastAPI Application

HTTP entry point over the progress service. The signed-in user is taken
from the X-User-Id header; the record store and clock live on app.state.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date as date_type, datetime
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fittrack.config import Settings, get_settings
from fittrack.core.errors import (
    FitTrackError,
    GoalStateError,
    RecordNotFoundError,
    SessionError,
    StoreError,
)
from fittrack.core.food_catalog import find_food, search_foods
from fittrack.core.models import (
    DailyNutrition,
    DateRange,
    GOAL_CATEGORY_INFO,
    Goal,
    GoalCategory,
    Meal,
    MealType,
    Priority,
    Reminder,
    ReminderType,
    SelectedFoodItem,
    WorkoutRecord,
    WorkoutType,
)
from fittrack.core.service import ProgressService
from fittrack.core.session import StaticSessionProvider, SystemClock
from fittrack.core.storage import InMemoryRecordStore
from fittrack.engine.reminders import REMINDER_TEMPLATES, find_template
from fittrack.engine.rollups import AnalyticsPeriod

VERSION = "0.1.0"

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# === Lifespan Management ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup and shutdown."""
    settings = get_settings()

    # Startup
    logger.info("Starting FitTrack analytics backend")
    for key, value in settings.summary().items():
        logger.info(f"  {key}: {value}")

    yield

    # Shutdown
    logger.info("Shutting down FitTrack analytics backend")


# === FastAPI Application ===
app = FastAPI(
    title="FitTrack",
    description="Fitness progress and analytics engine",
    version=VERSION,
    lifespan=lifespan,
)

# Configure CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.store = InMemoryRecordStore()
app.state.clock = SystemClock()


# === Error Mapping ===

_STATUS_BY_ERROR = [
    (RecordNotFoundError, 404),
    (SessionError, 401),
    (GoalStateError, 409),
    (StoreError, 503),
]


@app.exception_handler(FitTrackError)
async def fittrack_error_handler(request: Request, exc: FitTrackError):
    status_code = next((code for error, code in _STATUS_BY_ERROR if isinstance(exc, error)), 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# === Dependencies ===

def get_service(
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> ProgressService:
    """Build a request-scoped service for the calling user."""
    return ProgressService(
        store=request.app.state.store,
        session=StaticSessionProvider(x_user_id),
        clock=request.app.state.clock,
        settings=settings,
    )


# === Request/Response Models ===

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    environment: str


class WorkoutCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    type: WorkoutType
    date: Optional[date_type] = None
    duration_minutes: int = Field(..., gt=0)
    calories_burned: int = Field(default=0, ge=0)
    notes: str = ""


class MealItemRequest(BaseModel):
    food_id: str
    quantity: float = Field(default=1.0, gt=0)
    custom_portion: Optional[str] = None


class MealCreateRequest(BaseModel):
    type: MealType
    time: str = ""
    date: Optional[date_type] = None
    items: list[MealItemRequest] = Field(..., min_length=1)


class GoalCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    category: GoalCategory
    current_numeric_value: float = 0.0
    target_numeric_value: float
    starting_value: Optional[float] = None
    deadline: datetime
    priority: Priority = Priority.MEDIUM
    description: str = ""


class GoalProgressRequest(BaseModel):
    value: float


class ReminderCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    type: ReminderType = ReminderType.CUSTOM
    time: str = Field(..., pattern=r"^([01]?\d|2[0-3]):[0-5]\d$")
    repeat_days: list[str] = []
    description: Optional[str] = None
    snooze_minutes: int = Field(default=5, ge=0)
    priority: Priority = Priority.MEDIUM


# === Endpoints ===

@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint for monitoring."""
    settings = get_settings()
    return HealthResponse(
        status="ok",
        timestamp=datetime.now().isoformat(),
        version=VERSION,
        environment=settings.environment,
    )


# === Dashboard & Reports ===

@app.get("/dashboard", tags=["dashboard"])
async def get_dashboard(service: ProgressService = Depends(get_service)):
    """Today's nutrition, this week's workouts, goals and upcoming reminders."""
    return service.dashboard().model_dump()


@app.get("/reports/{period}", tags=["reports"])
async def get_report(period: AnalyticsPeriod, service: ProgressService = Depends(get_service)):
    """Rollups, trends, insights and recommendations for a period ending today."""
    return service.progress_report(period).model_dump()


# === Nutrition ===

@app.get("/nutrition/today", tags=["nutrition"])
async def get_nutrition_today(service: ProgressService = Depends(get_service)):
    return service.nutrition_today().model_dump()


@app.get("/nutrition/targets", tags=["nutrition"])
async def get_nutrition_targets(service: ProgressService = Depends(get_service)):
    return service.get_nutrition_targets().model_dump()


@app.put("/nutrition/targets", tags=["nutrition"])
async def put_nutrition_targets(targets: DailyNutrition, service: ProgressService = Depends(get_service)):
    saved = service.save_nutrition_targets(targets)
    logger.info(f"Updated nutrition targets for user {service.user_id}")
    return saved.model_dump()


@app.get("/foods", tags=["nutrition"])
async def get_foods(q: str = ""):
    """Search the food catalog by name."""
    foods = search_foods(q)
    return {"foods": [f.model_dump() for f in foods], "total": len(foods)}


# === Meals ===

@app.get("/meals", tags=["meals"])
async def get_meals(date: Optional[date_type] = None, service: ProgressService = Depends(get_service)):
    """Meals for one day, or every meal when no date is given."""
    date_range = DateRange(start=date, end=date, inclusive_end=True) if date else None
    meals = service.list_meals(date_range)
    return {"meals": [m.model_dump() for m in meals], "total": len(meals)}


@app.post("/meals", tags=["meals"])
async def create_meal(request: MealCreateRequest, service: ProgressService = Depends(get_service)):
    """Log a meal; a meal of the same type on the same day is extended instead."""
    items = []
    for item in request.items:
        food = find_food(item.food_id)
        if food is None:
            raise HTTPException(status_code=404, detail=f"Food {item.food_id} not found")
        items.append(SelectedFoodItem(food_item=food, quantity=item.quantity, custom_portion=item.custom_portion))

    meal = Meal(
        user_id=service.user_id,
        type=request.type,
        time=request.time,
        date=request.date or service.clock.now().date(),
        food_items=items,
    )
    return service.add_meal(meal).model_dump()


@app.delete("/meals/{meal_id}", tags=["meals"])
async def delete_meal(meal_id: str, service: ProgressService = Depends(get_service)):
    service.delete_meal(meal_id)
    return {"message": "Meal deleted"}


# === Workouts ===

@app.get("/workouts", tags=["workouts"])
async def get_workouts(
    start: Optional[date_type] = None,
    end: Optional[date_type] = None,
    service: ProgressService = Depends(get_service),
):
    """Workouts in [start, end], or all workouts when either bound is missing."""
    date_range = DateRange(start=start, end=end, inclusive_end=True) if start and end else None
    workouts = service.list_workouts(date_range)
    return {"workouts": [w.model_dump() for w in workouts], "total": len(workouts)}


@app.post("/workouts", tags=["workouts"])
async def create_workout(request: WorkoutCreateRequest, service: ProgressService = Depends(get_service)):
    workout = WorkoutRecord(
        user_id=service.user_id,
        name=request.name,
        type=request.type,
        date=request.date or service.clock.now().date(),
        duration_minutes=request.duration_minutes,
        calories_burned=request.calories_burned,
        notes=request.notes,
    )
    return service.log_workout(workout).model_dump()


@app.delete("/workouts/{workout_id}", tags=["workouts"])
async def delete_workout(workout_id: str, service: ProgressService = Depends(get_service)):
    service.delete_workout(workout_id)
    return {"message": "Workout deleted"}


# === Goals ===

@app.get("/goals/categories", tags=["goals"])
async def get_goal_categories():
    """Goal categories with their display label, unit and color."""
    return {
        "categories": [
            {"value": category.value, **info._asdict()}
            for category, info in GOAL_CATEGORY_INFO.items()
        ]
    }


@app.get("/goals", tags=["goals"])
async def get_goals(active_only: bool = False, service: ProgressService = Depends(get_service)):
    goals = service.list_goals(active_only)
    return {"goals": [g.model_dump() for g in goals], "total": len(goals)}


@app.post("/goals", tags=["goals"])
async def create_goal(request: GoalCreateRequest, service: ProgressService = Depends(get_service)):
    goal = Goal(
        user_id=service.user_id,
        created_at=service.clock.now(),
        **request.model_dump(),
    )
    return service.create_goal(goal).model_dump()


@app.post("/goals/{goal_id}/progress", tags=["goals"])
async def post_goal_progress(
    goal_id: str,
    request: GoalProgressRequest,
    service: ProgressService = Depends(get_service),
):
    """Record a new current value; may complete the goal when it reaches its target."""
    return service.update_goal_progress(goal_id, request.value).model_dump()


@app.post("/goals/{goal_id}/complete", tags=["goals"])
async def post_goal_complete(goal_id: str, service: ProgressService = Depends(get_service)):
    return service.complete_goal(goal_id).model_dump()


@app.delete("/goals/{goal_id}", tags=["goals"])
async def delete_goal(goal_id: str, service: ProgressService = Depends(get_service)):
    service.delete_goal(goal_id)
    return {"message": "Goal deleted"}


# === Reminders ===

@app.get("/reminders", tags=["reminders"])
async def get_reminders(enabled_only: bool = False, service: ProgressService = Depends(get_service)):
    reminders = service.list_reminders(enabled_only)
    return {"reminders": [r.model_dump() for r in reminders], "total": len(reminders)}


@app.post("/reminders", tags=["reminders"])
async def create_reminder(request: ReminderCreateRequest, service: ProgressService = Depends(get_service)):
    reminder = Reminder(
        user_id=service.user_id,
        created_at=service.clock.now(),
        **request.model_dump(),
    )
    return service.add_reminder(reminder).model_dump()


@app.get("/reminders/upcoming", tags=["reminders"])
async def get_upcoming_reminders(service: ProgressService = Depends(get_service)):
    upcoming = service.upcoming_reminders()
    return {"upcoming": [u.model_dump() for u in upcoming], "total": len(upcoming)}


@app.get("/reminders/templates", tags=["reminders"])
async def get_reminder_templates():
    return {"templates": [t.model_dump() for t in REMINDER_TEMPLATES]}


@app.post("/reminders/templates/{title}", tags=["reminders"])
async def create_reminder_from_template(title: str, service: ProgressService = Depends(get_service)):
    template = find_template(title)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Reminder template {title} not found")
    return service.add_reminder(template.to_reminder(service.user_id)).model_dump()


@app.post("/reminders/{reminder_id}/toggle", tags=["reminders"])
async def toggle_reminder(reminder_id: str, service: ProgressService = Depends(get_service)):
    return service.toggle_reminder(reminder_id).model_dump()


@app.delete("/reminders/{reminder_id}", tags=["reminders"])
async def delete_reminder(reminder_id: str, service: ProgressService = Depends(get_service)):
    service.delete_reminder(reminder_id)
    return {"message": "Reminder deleted"}


# === Run with Uvicorn ===
if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "fittrack.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
