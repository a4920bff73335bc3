from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date, datetime


class HabitCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    time: Optional[str] = Field(default=None, max_length=50)
    location: Optional[str] = Field(default=None, max_length=255)


class HabitUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    time: Optional[str] = Field(default=None, max_length=50)
    location: Optional[str] = Field(default=None, max_length=255)
    is_active: Optional[bool] = None


class HabitOut(BaseModel):
    """A habit with its streak state computed for the caller's "today"."""
    id: int
    title: str
    time: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    created_at: datetime
    streak: int
    longestStreak: int
    lastCompleted: Optional[date] = None
    completedToday: bool
    inDanger: bool


class CompletionOut(BaseModel):
    habit_id: int
    completion_date: date
    title: str
    time: Optional[str] = None
    location: Optional[str] = None


class DailyStatsOut(BaseModel):
    date: date
    completed: int
    total: int
    percentage: int


class MonthlySummaryOut(BaseModel):
    month: str
    tasks_completed: int
    tasks_total: int
    habits_completed_today: int
    habits_total: int
    today_percentage: int
    longest_streak: int
    perfect_days: int
    perfect_day_streak: int
    companion: Literal["phase1", "phase2", "phase3", "sad", "bones"]
