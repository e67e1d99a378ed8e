# tasks/ai_engine/decision.py

import datetime
from typing import Hashable, List, Optional, Sequence

from django.conf import settings

from .exceptions import InvalidInputError
from .scoring import SOON_HORIZON_DAYS, CandidateScorer, ScoringContext
from .store import DecisionStore
from .types import (
    FACTOR_GOAL,
    FACTOR_PRIORITY,
    FACTOR_STALENESS,
    FACTOR_URGENCY,
    PENDING_STATUSES,
    PRIORITY_HIGH,
    Decision,
    Reason,
    Score,
    ScoringWeights,
    TaskId,
    TaskSnapshot,
)

REASON_OVERDUE = "overdue"
REASON_DUE_TODAY = "due_today"
REASON_DUE_SOON = "due_soon"
REASON_HIGH_PRIORITY = "high_priority"
REASON_GOAL_LINKED = "goal_linked"
REASON_LONG_PENDING = "long_pending"
REASON_BALANCED = "balanced"

# Pending at least this many days earns a "long pending" reason
LONG_PENDING_DAYS = 7


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def build_reasons(task: TaskSnapshot, score: Score) -> List[Reason]:
    """
    Explain a recommendation from the factor breakdown that produced it.

    Reasons are ordered by the weighted contribution of their factor, so
    the first reason is the one that moved the score the most.
    """
    breakdown = score.breakdown
    contributions = breakdown.contributions
    reasons: List[Reason] = []

    days = breakdown.days_until
    if breakdown.overdue:
        if days is not None and days < 0:
            text = f'"{task.title}" is overdue by {_plural(-days, "day")}'
        else:
            text = f'"{task.title}" was scheduled earlier today'
        reasons.append(Reason(REASON_OVERDUE, text, contributions[FACTOR_URGENCY]))
    elif days == 0:
        reasons.append(Reason(REASON_DUE_TODAY, f'"{task.title}" is due today', contributions[FACTOR_URGENCY]))
    elif days is not None and days <= SOON_HORIZON_DAYS:
        when = "tomorrow" if days == 1 else f"in {days} days"
        reasons.append(Reason(REASON_DUE_SOON, f'"{task.title}" is due {when}', contributions[FACTOR_URGENCY]))

    if task.priority == PRIORITY_HIGH:
        reasons.append(Reason(REASON_HIGH_PRIORITY, f'"{task.title}" is high priority', contributions[FACTOR_PRIORITY]))

    if task.has_goal:
        goal = f'goal "{task.goal_title}"' if task.goal_title else "an active goal"
        reasons.append(Reason(REASON_GOAL_LINKED, f"Moves {goal} forward", contributions[FACTOR_GOAL]))

    if task.status in PENDING_STATUSES and breakdown.pending_days >= LONG_PENDING_DAYS:
        reasons.append(Reason(
            REASON_LONG_PENDING,
            f'"{task.title}" has been pending for {_plural(breakdown.pending_days, "day")}',
            contributions[FACTOR_STALENESS],
        ))

    if not reasons:
        reasons.append(Reason(
            REASON_BALANCED,
            f'"{task.title}" has the best combined urgency and priority',
            score.score,
        ))

    # sort() is stable: equal contributions keep the order above
    reasons.sort(key=lambda r: r.weight, reverse=True)
    return reasons


class DecisionEngine:
    """
    Picks the next task to work on from a set of candidates.

    Storage is an explicit collaborator; the engine itself holds no
    request state, so one instance can serve concurrent requests.
    """

    MIN_CANDIDATES = 2
    CONFIDENCE_FLOOR = 0.5
    # Only a single-candidate decision may be fully confident
    CONFIDENCE_CEILING = 0.99

    def __init__(
        self,
        store: DecisionStore,
        weights: Optional[ScoringWeights] = None,
        tz: Optional[datetime.tzinfo] = None,
    ):
        if weights is None:
            weights = ScoringWeights.from_mapping(getattr(settings, "DECISION_ENGINE_WEIGHTS", None))
        self.store = store
        self.scorer = CandidateScorer(weights)
        self.tz = tz

    def recommend_next(
        self,
        task_ids: Sequence[TaskId],
        user_id: Hashable,
        now: Optional[datetime.datetime] = None,
        persist: bool = True,
    ) -> Optional[Decision]:
        """
        Rank the candidates and return the recommendation.

        Returns None when fewer than two of the supplied ids resolve to
        pending tasks owned by ``user_id``. With ``persist`` the decision
        is logged (seeded with the first two supplied ids) after scoring
        completes, and the log id is stamped on the returned decision.

        Raises:
            InvalidInputError: if fewer than two ids are supplied.
        """
        task_ids = list(task_ids)
        if len(task_ids) < self.MIN_CANDIDATES:
            raise InvalidInputError(
                f"At least {self.MIN_CANDIDATES} candidate task ids are required, got {len(task_ids)}"
            )

        snapshots = self.store.load_candidates(task_ids, user_id)
        resolved = [task_id for task_id in task_ids if task_id in snapshots]
        if len(resolved) < self.MIN_CANDIDATES:
            return None

        candidate_ids = list(dict.fromkeys(resolved))
        context = ScoringContext.at(now, self.tz)
        ranked = self.scorer.rank([snapshots[task_id] for task_id in candidate_ids], context)

        top_score, top_task = ranked[0]
        scores = [score for score, _ in ranked]

        decision = Decision(
            recommended_id=top_task.id,
            scores=scores,
            reasons=build_reasons(top_task, top_score),
            confidence=self.compute_confidence(scores),
            candidate_ids=candidate_ids,
        )

        if persist:
            decision.decision_log_id = self.save_decision_log(
                task_ids[0], task_ids[1], decision, user_id
            )
        return decision

    def compute_confidence(self, ranked_scores: Sequence[Score]) -> float:
        """
        Map the gap between the top two scores onto [FLOOR, CEILING].

        A tie gives the floor; the ceiling would need the runner-up to score
        zero on every factor against a perfect winner.
        """
        if len(ranked_scores) == 1:
            return 1.0

        gap = max(0.0, ranked_scores[0].score - ranked_scores[1].score)
        confidence = self.CONFIDENCE_FLOOR + (gap / self.scorer.max_score) * (1.0 - self.CONFIDENCE_FLOOR)
        confidence = max(self.CONFIDENCE_FLOOR, min(self.CONFIDENCE_CEILING, confidence))
        return round(confidence, 2)

    def save_decision_log(
        self,
        seed_a: TaskId,
        seed_b: TaskId,
        decision: Decision,
        user_id: Hashable,
    ) -> TaskId:
        """Persist a decision and return the new log id."""
        candidate_ids = decision.candidate_ids or [s.task_id for s in decision.scores]
        scored_ids = {s.task_id for s in decision.scores}
        if decision.recommended_id not in candidate_ids or decision.recommended_id not in scored_ids:
            raise InvalidInputError("Recommended task must be one of the scored candidates")
        if not 0.0 <= decision.confidence <= 1.0:
            raise InvalidInputError(f"Confidence {decision.confidence} is outside [0, 1]")

        if not decision.candidate_ids:
            decision.candidate_ids = list(candidate_ids)
        return self.store.create_decision_log(seed_a, seed_b, decision, user_id)
