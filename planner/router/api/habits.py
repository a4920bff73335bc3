from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from planner.database import get_db
from planner.model.users import User
from planner.router.api.logics.habit_logic import (
    check_in_logic,
    create_habit_logic,
    daily_stats_logic,
    delete_habit_logic,
    get_habit_logic,
    list_completions_logic,
    list_habits_logic,
    monthly_summary_logic,
    update_habit_logic,
)
from planner.router.dependencies import get_current_user, get_today
from planner.schema.auth_schema import MessageOut
from planner.schema.habit_schema import (
    CompletionOut,
    DailyStatsOut,
    HabitCreate,
    HabitOut,
    HabitUpdate,
    MonthlySummaryOut,
)

router = APIRouter()


@router.get("", response_model=List[HabitOut], status_code=status.HTTP_200_OK)
async def get_habits(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    """All habits of the current user with `streak`, `lastCompleted`,
    `completedToday` and `inDanger` computed for the user's today."""
    return list_habits_logic(db, user, today)


@router.post("", response_model=HabitOut, status_code=status.HTTP_201_CREATED)
async def create_habit(
    request: HabitCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return create_habit_logic(db, user, request, today)


@router.get("/completions", response_model=List[CompletionOut], status_code=status.HTTP_200_OK)
async def get_completions(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Raw check-ins used by the calendar and heatmap views."""
    return list_completions_logic(db, user, start, end)


@router.get("/stats/daily", response_model=List[DailyStatsOut], status_code=status.HTTP_200_OK)
async def get_daily_stats(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    """Completed/total/percentage for every day in the range (current month by default)."""
    return daily_stats_logic(db, user, today, start, end)


@router.get("/stats/summary", response_model=MonthlySummaryOut, status_code=status.HTTP_200_OK)
async def get_monthly_summary(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return monthly_summary_logic(db, user, today, month)


@router.get("/{habit_id}", response_model=HabitOut, status_code=status.HTTP_200_OK)
async def get_habit(
    habit_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return get_habit_logic(db, user, habit_id, today)


@router.put("/{habit_id}", response_model=HabitOut, status_code=status.HTTP_200_OK)
async def update_habit(
    habit_id: int,
    request: HabitUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    return update_habit_logic(db, user, habit_id, request, today)


@router.delete("/{habit_id}", response_model=MessageOut, status_code=status.HTTP_200_OK)
async def delete_habit(
    habit_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return delete_habit_logic(db, user, habit_id)


@router.post("/{habit_id}/checkin", response_model=HabitOut, status_code=status.HTTP_200_OK)
async def check_in(
    habit_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    today: date = Depends(get_today),
):
    """Record today's completion. Repeating it on the same day changes nothing
    and returns the same habit state."""
    return check_in_logic(db, user, habit_id, today)
