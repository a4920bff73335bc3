"""Streak and completion arithmetic over calendar days.

Every function here works on ``datetime.date`` values. Anything coming from
the wire or the database goes through :func:`normalize_date` first, so two
check-ins are compared as ``YYYY-MM-DD`` days and never as timestamps.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DateLike = Union[date, datetime, str, None]

ONE_DAY = timedelta(days=1)


@dataclass
class HabitProgress:
    streak: int
    longest_streak: int
    last_completed: Optional[date]
    completed_today: bool
    in_danger: bool


@dataclass
class DailyStats:
    date: date
    completed: int
    total: int
    percentage: int


def normalize_date(value: DateLike) -> Optional[date]:
    """
    Reduce a date, datetime or ISO string to its calendar day.

    Strings may be plain ``YYYY-MM-DD`` or full ISO timestamps; anything after
    ``T`` is dropped, the same way the client truncates them.

    Raises:
        ValueError: If a string does not start with a valid ``YYYY-MM-DD``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip().split("T")[0][:10])


def is_valid_timezone(tz_name: Optional[str]) -> bool:
    if not tz_name:
        return False
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def today_in(tz_name: str, now: Optional[datetime] = None) -> date:
    """Current calendar day as seen from ``tz_name``."""
    tz = ZoneInfo(tz_name)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=ZoneInfo("UTC"))
    return now.astimezone(tz).date()


def _date_set(completion_dates: Iterable[DateLike]) -> Set[date]:
    return {d for d in (normalize_date(v) for v in completion_dates) if d is not None}


def compute_streak(completion_dates: Iterable[DateLike], today: DateLike) -> int:
    """
    Count consecutive completed days ending today, or ending yesterday when
    today has no check-in yet. Any older last completion means the streak
    is broken and the result is 0.
    """
    days = _date_set(completion_dates)
    today = normalize_date(today)
    if today in days:
        cursor = today
    elif today - ONE_DAY in days:
        cursor = today - ONE_DAY
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= ONE_DAY
    return streak


def longest_streak(completion_dates: Iterable[DateLike]) -> int:
    days = sorted(_date_set(completion_dates))
    if not days:
        return 0
    best = current = 1
    for prev, curr in zip(days, days[1:]):
        if curr - prev == ONE_DAY:
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best


def last_completed(completion_dates: Iterable[DateLike], today: DateLike = None) -> Optional[date]:
    """Most recent completion, ignoring days after ``today`` when given."""
    days = _date_set(completion_dates)
    if today is not None:
        today = normalize_date(today)
        days = {d for d in days if d <= today}
    return max(days) if days else None


def is_completed_today(last_completed_date: DateLike, today: DateLike) -> bool:
    if last_completed_date is None:
        return False
    return normalize_date(last_completed_date).isoformat() == normalize_date(today).isoformat()


def is_streak_in_danger(last_completed_date: DateLike, today: DateLike) -> bool:
    """True only when the last check-in was exactly yesterday."""
    if last_completed_date is None:
        return False
    yesterday = normalize_date(today) - ONE_DAY
    return normalize_date(last_completed_date).isoformat() == yesterday.isoformat()


def habit_progress(completion_dates: Iterable[DateLike], today: DateLike) -> HabitProgress:
    days = _date_set(completion_dates)
    today = normalize_date(today)
    last = last_completed(days, today)
    return HabitProgress(
        streak=compute_streak(days, today),
        longest_streak=longest_streak(days),
        last_completed=last,
        completed_today=is_completed_today(last, today),
        in_danger=is_streak_in_danger(last, today),
    )


def round_percentage(completed: int, total: int) -> int:
    """``completed / total`` as a whole percentage, halves rounded up."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (2 * total)


def _first_set(obj, *names):
    for name in names:
        value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def was_active_on(habit, day: date) -> bool:
    """
    Whether ``habit`` existed and was active on ``day``.

    The owner-local ``created_on``/``deactivated_on`` days are used when set,
    otherwise the ``created_at``/``deactivated_at`` timestamps. A habit with
    neither creation value is treated as always existing.
    """
    created = normalize_date(_first_set(habit, "created_on", "created_at"))
    if created is not None and created > day:
        return False
    deactivated = normalize_date(_first_set(habit, "deactivated_on", "deactivated_at"))
    if deactivated is not None:
        return deactivated > day
    return bool(getattr(habit, "is_active", True))


def _completions_by_day(completions: Iterable) -> Dict[date, Set[int]]:
    by_day: Dict[date, Set[int]] = {}
    for c in completions:
        day = normalize_date(c.completion_date)
        by_day.setdefault(day, set()).add(c.habit_id)
    return by_day


def _stats_for_day(habits: List, by_day: Dict[date, Set[int]], day: date) -> DailyStats:
    done = by_day.get(day, set())
    counted = {h.id for h in habits if was_active_on(h, day)} | done
    completed = len(done)
    total = len(counted)
    return DailyStats(date=day, completed=completed, total=total, percentage=round_percentage(completed, total))


def daily_completion_stats(habits: Iterable, completions: Iterable, day: DateLike) -> DailyStats:
    """
    Completion ratio of a user's habits on one calendar day.

    ``completed`` counts distinct habits checked in on ``day``. ``total``
    counts habits active on ``day`` plus any habit completed that day, so a
    percentage never exceeds 100. With no habits the percentage is 0.
    """
    return _stats_for_day(list(habits), _completions_by_day(completions), normalize_date(day))


def completion_calendar(habits: Iterable, completions: Iterable, start: DateLike, end: DateLike) -> List[DailyStats]:
    start, end = normalize_date(start), normalize_date(end)
    if end < start:
        raise ValueError("end must not be before start")
    habits = list(habits)
    by_day = _completions_by_day(completions)
    stats = []
    day = start
    while day <= end:
        stats.append(_stats_for_day(habits, by_day, day))
        day += ONE_DAY
    return stats


def is_perfect_day(stats: DailyStats) -> bool:
    return stats.total > 0 and stats.completed == stats.total


def perfect_days(stats: Iterable[DailyStats]) -> int:
    return sum(1 for s in stats if is_perfect_day(s))


def perfect_day_streak(stats: Iterable[DailyStats], today: DateLike) -> int:
    """Consecutive perfect days ending today."""
    by_day = {s.date: s for s in stats}
    cursor = normalize_date(today)
    streak = 0
    while cursor in by_day and is_perfect_day(by_day[cursor]):
        streak += 1
        cursor -= ONE_DAY
    return streak


def companion_mood(completion_dates: Iterable[DateLike], today: DateLike) -> str:
    """
    Mood of the progress companion.

    ``bones`` after 7 or more days without any check-in, ``sad`` after 2 or
    more. Otherwise the phase grows with the run ending at the last
    check-in: ``phase1`` under 3 days, ``phase2`` under 7, then ``phase3``.
    A user with no check-ins starts at ``phase1``.
    """
    days = _date_set(completion_dates)
    today = normalize_date(today)
    last = last_completed(days, today)
    if last is None:
        return "phase1"

    idle = (today - last).days
    if idle >= 7:
        return "bones"
    if idle >= 2:
        return "sad"

    run = compute_streak(days, last)
    if run < 3:
        return "phase1"
    if run < 7:
        return "phase2"
    return "phase3"
