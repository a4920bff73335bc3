from datetime import date, datetime
from typing import Dict, List, Optional
import calendar

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from planner.log import get_logger
from planner.model.habits import Habit, HabitCompletion
from planner.model.tasks import Task, TaskStatus
from planner.model.users import User
from planner.schema.habit_schema import (
    CompletionOut,
    DailyStatsOut,
    HabitCreate,
    HabitOut,
    HabitUpdate,
    MonthlySummaryOut,
)
from planner.streak_util import (
    companion_mood,
    completion_calendar,
    daily_completion_stats,
    habit_progress,
    longest_streak,
    perfect_day_streak,
    perfect_days,
)

log = get_logger(__name__)

MAX_STATS_RANGE_DAYS = 366


def _get_owned_habit(db: Session, user: User, habit_id: int) -> Habit:
    """Habits of other users are reported exactly like missing ones."""
    habit = db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user.id).first()
    if not habit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hábito no encontrado")
    return habit


def _completion_dates(db: Session, habit_ids: List[int]) -> Dict[int, List[date]]:
    dates: Dict[int, List[date]] = {hid: [] for hid in habit_ids}
    if not habit_ids:
        return dates
    rows = db.query(HabitCompletion.habit_id, HabitCompletion.completion_date).filter(
        HabitCompletion.habit_id.in_(habit_ids)
    ).all()
    for habit_id, completion_date in rows:
        dates[habit_id].append(completion_date)
    return dates


def _habit_out(habit: Habit, dates: List[date], today: date) -> HabitOut:
    progress = habit_progress(dates, today)
    return HabitOut(
        id=habit.id,
        title=habit.title,
        time=habit.time,
        location=habit.location,
        is_active=habit.is_active,
        created_at=habit.created_at,
        streak=progress.streak,
        longestStreak=progress.longest_streak,
        lastCompleted=progress.last_completed,
        completedToday=progress.completed_today,
        inDanger=progress.in_danger,
    )


def _completed_on(db: Session, habit_id: int, day: date) -> bool:
    return db.query(HabitCompletion.id).filter(
        HabitCompletion.habit_id == habit_id,
        HabitCompletion.completion_date == day,
    ).first() is not None


def _user_completions(db: Session, user: User, start: Optional[date] = None, end: Optional[date] = None):
    query = db.query(HabitCompletion, Habit).join(Habit, HabitCompletion.habit_id == Habit.id).filter(
        Habit.user_id == user.id
    )
    if start is not None:
        query = query.filter(HabitCompletion.completion_date >= start)
    if end is not None:
        query = query.filter(HabitCompletion.completion_date <= end)
    return query.order_by(HabitCompletion.completion_date, HabitCompletion.habit_id).all()


##############
### Habits ###
##############

def list_habits_logic(db: Session, user: User, today: date) -> List[HabitOut]:
    """Every habit of the user with streak fields computed for ``today``."""
    habits = db.query(Habit).filter(Habit.user_id == user.id).order_by(Habit.created_at, Habit.id).all()
    dates = _completion_dates(db, [h.id for h in habits])
    return [_habit_out(h, dates[h.id], today) for h in habits]


def get_habit_logic(db: Session, user: User, habit_id: int, today: date) -> HabitOut:
    habit = _get_owned_habit(db, user, habit_id)
    return _habit_out(habit, _completion_dates(db, [habit.id])[habit.id], today)


def create_habit_logic(db: Session, user: User, request: HabitCreate, today: date) -> HabitOut:
    habit = Habit(
        user_id=user.id,
        title=request.title,
        time=request.time,
        location=request.location,
        is_active=True,
        created_at=datetime.now(),
        created_on=today,
    )
    db.add(habit)
    db.commit()
    db.refresh(habit)
    log.info("CREATE habit %s - User: %s - SUCCESS", habit.id, user.id)
    return _habit_out(habit, [], today)


def update_habit_logic(db: Session, user: User, habit_id: int, request: HabitUpdate, today: date) -> HabitOut:
    """Edit title/time/location. Toggling ``is_active`` stamps or clears ``deactivated_at``."""
    habit = _get_owned_habit(db, user, habit_id)
    changes = request.model_dump(exclude_unset=True)

    is_active = changes.pop("is_active", None)
    if is_active is not None and is_active != habit.is_active:
        habit.is_active = is_active
        habit.deactivated_at = None if is_active else datetime.now()
        habit.deactivated_on = None if is_active else today

    for field, value in changes.items():
        if field == "title" and value is None:
            continue
        setattr(habit, field, value)

    db.commit()
    db.refresh(habit)
    log.info("UPDATE habit %s - User: %s - SUCCESS", habit.id, user.id)
    return get_habit_logic(db, user, habit.id, today)


def delete_habit_logic(db: Session, user: User, habit_id: int) -> Dict[str, str]:
    habit = _get_owned_habit(db, user, habit_id)
    db.delete(habit)
    db.commit()
    log.info("DELETE habit %s - User: %s - SUCCESS", habit_id, user.id)
    return {"message": "Hábito eliminado"}


################
### Check-in ###
################

def check_in_logic(db: Session, user: User, habit_id: int, today: date) -> HabitOut:
    """Mark ``habit_id`` as done on ``today``.

    A second check-in on the same day is a no-op that still answers with the
    current habit state. The unique (habit_id, completion_date) constraint
    settles concurrent requests: the losing insert is rolled back and handled
    like the already-completed case.

    Raises:
        HTTPException: 404 for a missing or foreign habit, 400 for an inactive one
    """
    habit = _get_owned_habit(db, user, habit_id)
    if not habit.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El hábito está desactivado")

    if _completed_on(db, habit.id, today):
        log.info("Check-in habit %s on %s - User: %s - already completed", habit.id, today, user.id)
    else:
        db.add(HabitCompletion(habit_id=habit.id, completion_date=today, created_at=datetime.now()))
        try:
            db.commit()
            log.info("Check-in habit %s on %s - User: %s - SUCCESS", habit.id, today, user.id)
        except IntegrityError:
            db.rollback()
            log.info("Check-in habit %s on %s - User: %s - concurrent duplicate ignored", habit.id, today, user.id)

    return get_habit_logic(db, user, habit_id, today)


###################
### Completions ###
###################

def list_completions_logic(
    db: Session, user: User, start: Optional[date] = None, end: Optional[date] = None
) -> List[CompletionOut]:
    return [
        CompletionOut(
            habit_id=c.habit_id,
            completion_date=c.completion_date,
            title=h.title,
            time=h.time,
            location=h.location,
        )
        for c, h in _user_completions(db, user, start, end)
    ]


def _month_bounds(month: Optional[str], today: date):
    if month is None:
        year, month_num = today.year, today.month
    else:
        try:
            year, month_num = (int(part) for part in month.split("-"))
            date(year, month_num, 1)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="El mes debe tener el formato YYYY-MM"
            ) from e
    first = date(year, month_num, 1)
    last = date(year, month_num, calendar.monthrange(year, month_num)[1])
    return first, last


def daily_stats_logic(
    db: Session, user: User, today: date, start: Optional[date] = None, end: Optional[date] = None
) -> List[DailyStatsOut]:
    """Per-day completion stats for the calendar heatmap, current month by default."""
    month_start, month_end = _month_bounds(None, today)
    start = start or month_start
    end = end or month_end
    if end < start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="La fecha final es anterior a la inicial")
    if (end - start).days >= MAX_STATS_RANGE_DAYS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El rango máximo es de un año")

    habits = db.query(Habit).filter(Habit.user_id == user.id).all()
    completions = [c for c, _ in _user_completions(db, user, start, end)]
    return [DailyStatsOut(**vars(s)) for s in completion_calendar(habits, completions, start, end)]


def monthly_summary_logic(db: Session, user: User, today: date, month: Optional[str] = None) -> MonthlySummaryOut:
    first, last = _month_bounds(month, today)

    habits = db.query(Habit).filter(Habit.user_id == user.id).all()
    completions = [c for c, _ in _user_completions(db, user, end=today)]

    today_stats = daily_completion_stats(habits, completions, today)

    month_perfect = 0
    if first <= today:
        month_perfect = perfect_days(completion_calendar(habits, completions, first, min(last, today)))

    fire = 0
    if completions:
        earliest = min(c.completion_date for c in completions)
        fire = perfect_day_streak(completion_calendar(habits, completions, earliest, today), today)

    month_tasks = db.query(Task).filter(
        Task.user_id == user.id,
        Task.due_date >= first,
        Task.due_date <= last,
    ).all()

    return MonthlySummaryOut(
        month=f"{first.year:04d}-{first.month:02d}",
        tasks_completed=sum(1 for t in month_tasks if t.status == TaskStatus.completada),
        tasks_total=len(month_tasks),
        habits_completed_today=today_stats.completed,
        habits_total=today_stats.total,
        today_percentage=today_stats.percentage,
        longest_streak=longest_streak(c.completion_date for c in completions),
        perfect_days=month_perfect,
        perfect_day_streak=fire,
        companion=companion_mood((c.completion_date for c in completions), today),
    )
