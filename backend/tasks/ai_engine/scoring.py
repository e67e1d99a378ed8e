# tasks/ai_engine/scoring.py
"""
Candidate Scorer
================

Deterministic multi-factor scoring of a single candidate task.

Each factor is normalized to 0-100 before weighting:

    score = urgency * w_urgency + priority * w_priority
          + staleness * w_staleness + goal * w_goal

The factor tables below are the tuning surface; weights live in
``ScoringWeights`` and can be overridden per engine or through
``settings.DECISION_ENGINE_WEIGHTS``.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from lifeboard.dates import get_canonical_tz, to_canonical_date

from .types import (
    FACTOR_GOAL,
    FACTOR_PRIORITY,
    FACTOR_STALENESS,
    FACTOR_URGENCY,
    PENDING_STATUSES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MID,
    FactorBreakdown,
    Score,
    ScoringWeights,
    TaskSnapshot,
)

# Urgency buckets by days until the scheduled day
URGENCY_OVERDUE = 100.0
URGENCY_TODAY = 90.0
URGENCY_TOMORROW = 80.0
URGENCY_SOON = 50.0
URGENCY_LATER = 20.0
URGENCY_UNSCHEDULED = 10.0  # neutral baseline for tasks without a date
SOON_HORIZON_DAYS = 3

PRIORITY_SCORES = {
    PRIORITY_HIGH: 100.0,
    PRIORITY_MID: 60.0,
    PRIORITY_LOW: 30.0,
}

GOAL_LINKED_SCORE = 100.0
GOAL_UNLINKED_SCORE = 0.0

# A task pending this long gets the full staleness score
STALENESS_HORIZON_DAYS = 14

# Upper bound of every factor value
FACTOR_CEILING = 100.0

DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ScoringContext:
    """The "now" a scoring pass is evaluated against."""

    now: datetime.datetime
    tz: datetime.tzinfo

    @classmethod
    def at(
        cls,
        now: Optional[datetime.datetime] = None,
        tz: Optional[datetime.tzinfo] = None,
    ) -> "ScoringContext":
        if now is None:
            now = datetime.datetime.now(datetime.timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=datetime.timezone.utc)
        return cls(now=now, tz=tz or get_canonical_tz())

    @property
    def today(self) -> datetime.date:
        return self.now.astimezone(self.tz).date()


def compute_urgency(task: TaskSnapshot, context: ScoringContext) -> Tuple[float, Optional[int], bool]:
    """
    Map a task's schedule to an urgency value.

    Returns:
        (urgency, days_until, overdue). ``days_until`` is None for
        unscheduled tasks. A task scheduled for today whose start time has
        already passed counts as overdue.
    """
    if task.scheduled_date is None:
        return URGENCY_UNSCHEDULED, None, False

    days_until = (task.scheduled_date - context.today).days

    overdue = days_until < 0
    if days_until == 0 and task.scheduled_time is not None:
        starts_at = datetime.datetime.combine(
            task.scheduled_date, task.scheduled_time, tzinfo=context.tz
        )
        overdue = starts_at < context.now

    if overdue:
        return URGENCY_OVERDUE, days_until, True
    if days_until == 0:
        return URGENCY_TODAY, days_until, False
    if days_until == 1:
        return URGENCY_TOMORROW, days_until, False
    if days_until <= SOON_HORIZON_DAYS:
        return URGENCY_SOON, days_until, False
    return URGENCY_LATER, days_until, False


def compute_priority(priority: str) -> float:
    # Unknown tiers score as mid
    return PRIORITY_SCORES.get(priority, PRIORITY_SCORES[PRIORITY_MID])


def compute_goal_linkage(task: TaskSnapshot) -> float:
    return GOAL_LINKED_SCORE if task.has_goal else GOAL_UNLINKED_SCORE


def compute_staleness(task: TaskSnapshot, context: ScoringContext) -> Tuple[float, int]:
    """
    Grow linearly with the days a task has been waiting, capped at the horizon.

    Returns:
        (staleness, pending_days)
    """
    created_day = to_canonical_date(task.created_at, context.tz)
    pending_days = max(0, (context.today - created_day).days)

    if task.status not in PENDING_STATUSES:
        return 0.0, pending_days

    ratio = min(pending_days / float(STALENESS_HORIZON_DAYS), 1.0)
    return round(ratio * FACTOR_CEILING, 2), pending_days


class CandidateScorer:
    """
    Scores candidate tasks against a fixed set of weights.

    Scoring is a pure function of the task snapshot and the context, so
    repeated calls with the same inputs give identical results.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or DEFAULT_WEIGHTS

    def score(self, task: TaskSnapshot, context: ScoringContext) -> Score:
        urgency, days_until, overdue = compute_urgency(task, context)
        priority = compute_priority(task.priority)
        goal = compute_goal_linkage(task)
        staleness, pending_days = compute_staleness(task, context)

        contributions = {
            FACTOR_URGENCY: urgency * self.weights.urgency,
            FACTOR_PRIORITY: priority * self.weights.priority,
            FACTOR_GOAL: goal * self.weights.goal,
            FACTOR_STALENESS: staleness * self.weights.staleness,
        }
        total = round(sum(contributions.values()), 4)

        breakdown = FactorBreakdown(
            urgency=urgency,
            priority=priority,
            goal=goal,
            staleness=staleness,
            contributions={k: round(v, 4) for k, v in contributions.items()},
            days_until=days_until,
            overdue=overdue,
            pending_days=pending_days,
        )
        return Score(task_id=task.id, score=total, breakdown=breakdown)

    def rank(self, tasks: Iterable[TaskSnapshot], context: ScoringContext) -> List[Tuple[Score, TaskSnapshot]]:
        """
        Score every task and order them best first.

        Ties on score go to the task created earliest, then to the smaller
        id (compared as text), so the order never depends on input order.
        """
        scored = [(self.score(task, context), task) for task in tasks]
        scored.sort(key=lambda pair: (-pair[0].score, pair[1].created_at, str(pair[1].id)))
        return scored

    @property
    def max_score(self) -> float:
        return FACTOR_CEILING * self.weights.total
