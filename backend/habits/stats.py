# habits/stats.py
"""
Streak & Rate Calculator
========================

Everything here works on the sequence of due days between a habit's
creation day and ``as_of`` (both inclusive), as produced by
``recurrence.due_dates``. Checks on days that were not due are ignored.

Current-streak policy: a due ``as_of`` without a check does not break the
streak, since the day is not over yet. The backward walk then starts at
the previous due day.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Set, Union

from lifeboard.dates import to_canonical_date

from .recurrence import RecurrenceRule, due_dates

DateLike = Union[datetime.date, datetime.datetime]

WEEKLY_WINDOW_DAYS = 7
TOP_STREAKS_LIMIT = 3


@dataclass(frozen=True)
class HabitStreaks:
    current: int = 0
    longest: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"current": self.current, "longest": self.longest}


@dataclass(frozen=True)
class HabitRates:
    total_checks: int = 0
    total_expected: int = 0
    overall_rate: int = 0
    weekly_checks: int = 0
    weekly_expected: int = 0
    weekly_rate: int = 0
    monthly_checks: int = 0
    monthly_expected: int = 0
    monthly_rate: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_checks": self.total_checks,
            "total_expected": self.total_expected,
            "overall_rate": self.overall_rate,
            "weekly_checks": self.weekly_checks,
            "weekly_expected": self.weekly_expected,
            "weekly_rate": self.weekly_rate,
            "monthly_checks": self.monthly_checks,
            "monthly_expected": self.monthly_expected,
            "monthly_rate": self.monthly_rate,
        }


@dataclass(frozen=True)
class HabitRecord:
    """One habit as the overview needs it, detached from the ORM."""

    id: Hashable
    title: str
    rule: RecurrenceRule
    created_at: DateLike
    check_dates: Sequence[DateLike] = ()
    icon: Optional[str] = None
    focus_minutes: int = 0


@dataclass(frozen=True)
class TopStreak:
    habit_id: Hashable
    habit_title: str
    habit_icon: Optional[str]
    streak: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "habit_id": self.habit_id,
            "habit_title": self.habit_title,
            "habit_icon": self.habit_icon,
            "streak": self.streak,
        }


@dataclass(frozen=True)
class HabitsOverview:
    total_habits: int = 0
    today_total: int = 0
    today_completed: int = 0
    today_rate: int = 0
    weekly_rate: int = 0
    monthly_rate: int = 0
    average_streak: float = 0.0
    total_focus_minutes: int = 0
    top_streaks: List[TopStreak] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_habits": self.total_habits,
            "today_total": self.today_total,
            "today_completed": self.today_completed,
            "today_rate": self.today_rate,
            "weekly_rate": self.weekly_rate,
            "monthly_rate": self.monthly_rate,
            "average_streak": self.average_streak,
            "total_focus_minutes": self.total_focus_minutes,
            "top_streaks": [s.to_dict() for s in self.top_streaks],
        }


@dataclass(frozen=True)
class FocusSummary:
    sessions: int = 0
    total_minutes: int = 0
    average_minutes: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "focus_sessions": self.sessions,
            "total_focus_minutes": self.total_minutes,
            "avg_focus_minutes": self.average_minutes,
        }


def summarize_focus(minutes: Iterable[Optional[int]]) -> FocusSummary:
    """Session count, summed minutes and the half-up rounded mean."""
    values = [m or 0 for m in minutes]
    if not values:
        return FocusSummary()
    total = sum(values)
    return FocusSummary(
        sessions=len(values),
        total_minutes=total,
        average_minutes=(2 * total + len(values)) // (2 * len(values)),
    )


def completion_rate(checks: int, expected: int) -> int:
    """Percentage rounded half up; 0 when nothing was expected."""
    if expected <= 0:
        return 0
    return (200 * checks + expected) // (2 * expected)


def _due_sequence(rule: RecurrenceRule, created_at: DateLike, as_of: datetime.date) -> List[datetime.date]:
    start = to_canonical_date(created_at)
    if as_of < start:
        return []
    return list(due_dates(rule, start, as_of))


def _check_set(check_dates: Iterable[DateLike]) -> Set[datetime.date]:
    return {to_canonical_date(d) for d in check_dates}


def compute_streaks(
    check_dates: Iterable[DateLike],
    rule: RecurrenceRule,
    created_at: DateLike,
    as_of: datetime.date,
) -> HabitStreaks:
    due = _due_sequence(rule, created_at, as_of)
    if not due:
        return HabitStreaks()
    checked = _check_set(check_dates)

    longest = run = 0
    for day in due:
        if day in checked:
            run += 1
            longest = max(longest, run)
        else:
            run = 0

    walk = due
    if walk[-1] == as_of and as_of not in checked:
        walk = walk[:-1]

    current = 0
    for day in reversed(walk):
        if day not in checked:
            break
        current += 1

    return HabitStreaks(current=current, longest=longest)


def compute_rates(
    check_dates: Iterable[DateLike],
    rule: RecurrenceRule,
    created_at: DateLike,
    as_of: datetime.date,
) -> HabitRates:
    """
    Completion rates over three windows ending at ``as_of``: all time, the
    trailing seven days and the calendar month to date. Each window starts
    no earlier than the creation day.
    """
    due = _due_sequence(rule, created_at, as_of)
    checked = _check_set(check_dates)

    week_start = as_of - datetime.timedelta(days=WEEKLY_WINDOW_DAYS - 1)
    month_start = as_of.replace(day=1)

    def window(since: datetime.date):
        days = [d for d in due if d >= since]
        hits = sum(1 for d in days if d in checked)
        return hits, len(days)

    total_checks, total_expected = window(datetime.date.min)
    weekly_checks, weekly_expected = window(week_start)
    monthly_checks, monthly_expected = window(month_start)

    return HabitRates(
        total_checks=total_checks,
        total_expected=total_expected,
        overall_rate=completion_rate(total_checks, total_expected),
        weekly_checks=weekly_checks,
        weekly_expected=weekly_expected,
        weekly_rate=completion_rate(weekly_checks, weekly_expected),
        monthly_checks=monthly_checks,
        monthly_expected=monthly_expected,
        monthly_rate=completion_rate(monthly_checks, monthly_expected),
    )


def habits_overview(habits: Iterable[HabitRecord], today: datetime.date) -> HabitsOverview:
    """
    Aggregate per-habit results for the dashboard.

    Weekly and monthly rates pool checks and expected days across habits
    rather than averaging the per-habit percentages.
    """
    total_habits = 0
    today_total = today_completed = 0
    weekly_checks = weekly_expected = 0
    monthly_checks = monthly_expected = 0
    focus_minutes = 0
    streaks: List[TopStreak] = []

    for habit in habits:
        total_habits += 1
        focus_minutes += habit.focus_minutes
        checked = _check_set(habit.check_dates)

        due = _due_sequence(habit.rule, habit.created_at, today)
        if due and due[-1] == today:
            today_total += 1
            if today in checked:
                today_completed += 1

        rates = compute_rates(checked, habit.rule, habit.created_at, today)
        weekly_checks += rates.weekly_checks
        weekly_expected += rates.weekly_expected
        monthly_checks += rates.monthly_checks
        monthly_expected += rates.monthly_expected

        current = compute_streaks(checked, habit.rule, habit.created_at, today).current
        streaks.append(TopStreak(habit.id, habit.title, habit.icon, current))

    average_streak = round(sum(s.streak for s in streaks) / len(streaks), 1) if streaks else 0.0
    top_streaks = sorted(streaks, key=lambda s: (-s.streak, s.habit_title))[:TOP_STREAKS_LIMIT]

    return HabitsOverview(
        total_habits=total_habits,
        today_total=today_total,
        today_completed=today_completed,
        today_rate=completion_rate(today_completed, today_total),
        weekly_rate=completion_rate(weekly_checks, weekly_expected),
        monthly_rate=completion_rate(monthly_checks, monthly_expected),
        average_streak=average_streak,
        total_focus_minutes=focus_minutes,
        top_streaks=top_streaks,
    )
