# tasks/ai_engine/types.py
"""
Typed records passed through the decision engine.

Requests are validated into these shapes at the HTTP/ORM boundary; the
engine itself never works on raw dictionaries.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

TaskId = Hashable

PRIORITY_HIGH = "high"
PRIORITY_MID = "mid"
PRIORITY_LOW = "low"

STATUS_TODO = "todo"
STATUS_IN_PROGRESS = "in_progress"
PENDING_STATUSES = (STATUS_TODO, STATUS_IN_PROGRESS)

FACTOR_URGENCY = "urgency"
FACTOR_PRIORITY = "priority"
FACTOR_GOAL = "goal"
FACTOR_STALENESS = "staleness"
FACTORS: Tuple[str, ...] = (FACTOR_URGENCY, FACTOR_PRIORITY, FACTOR_GOAL, FACTOR_STALENESS)


@dataclass(frozen=True)
class TaskSnapshot:
    """Immutable view of one candidate task for a single scoring pass."""

    id: TaskId
    title: str
    priority: str
    status: str
    created_at: datetime.datetime
    scheduled_date: Optional[datetime.date] = None
    scheduled_time: Optional[datetime.time] = None
    goal_id: Optional[TaskId] = None
    goal_title: Optional[str] = None

    @property
    def has_goal(self) -> bool:
        return self.goal_id is not None


@dataclass(frozen=True)
class ScoringWeights:
    """
    Relative weight of each factor in the total score.

    Factor values are on a 0-100 scale, so with weights summing to 1.0 the
    total score is also on a 0-100 scale.
    """

    urgency: float = 0.45
    priority: float = 0.30
    staleness: float = 0.15
    goal: float = 0.10

    def __post_init__(self) -> None:
        for name in FACTORS:
            if getattr(self, name) < 0:
                raise ValueError(f"Weight for '{name}' must be non-negative")
        if self.total <= 0:
            raise ValueError("At least one factor weight must be positive")

    @property
    def total(self) -> float:
        return self.urgency + self.priority + self.staleness + self.goal

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, float]]) -> "ScoringWeights":
        """Build weights from a partial {factor: weight} mapping over the defaults."""
        if not overrides:
            return cls()
        unknown = set(overrides) - set(FACTORS)
        if unknown:
            raise ValueError(f"Unknown scoring factors: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in overrides.items()})

    def to_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in FACTORS}


@dataclass(frozen=True)
class FactorBreakdown:
    """Raw factor values (0-100) and the facts they were derived from."""

    urgency: float
    priority: float
    goal: float
    staleness: float
    contributions: Mapping[str, float]
    days_until: Optional[int] = None
    overdue: bool = False
    pending_days: int = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            FACTOR_URGENCY: self.urgency,
            FACTOR_PRIORITY: self.priority,
            FACTOR_GOAL: self.goal,
            FACTOR_STALENESS: self.staleness,
        }


@dataclass(frozen=True)
class Score:
    task_id: TaskId
    score: float
    breakdown: FactorBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "score": self.score,
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class Reason:
    type: str
    description: str
    weight: float = 0.0

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "description": self.description}


@dataclass
class Decision:
    """Outcome of one recommendation request."""

    recommended_id: TaskId
    scores: List[Score]
    reasons: List[Reason]
    confidence: float
    candidate_ids: List[TaskId] = field(default_factory=list)
    decision_log_id: Optional[TaskId] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommended_id": self.recommended_id,
            "scores": [s.to_dict() for s in self.scores],
            "reasons": [r.to_dict() for r in self.reasons],
            "confidence": self.confidence,
            "decision_log_id": self.decision_log_id,
        }


@dataclass(frozen=True)
class DecisionLogRecord:
    """The parts of a stored decision log the feedback path needs."""

    id: TaskId
    user_id: Hashable
    candidate_ids: Tuple[TaskId, ...]
    recommended_id: TaskId
