# tasks/services.py
"""
ORM-backed storage for the decision engine.

This is the only place the engine's typed records meet Django models.
Ownership and status filtering happen here, before any data reaches the
scorer.
"""

import datetime
import logging
from typing import Dict, Hashable, Iterable, Optional

from django.db import transaction

from .ai_engine.decision import DecisionEngine
from .ai_engine.feedback import FeedbackRecorder
from .ai_engine.store import DecisionStore
from .ai_engine.types import Decision, DecisionLogRecord, TaskId, TaskSnapshot
from .models import DecisionLog, Task

logger = logging.getLogger(__name__)


def snapshot_from_task(task: Task) -> TaskSnapshot:
    """Freeze a Task row into the shape the scorer consumes."""
    # Archived goals no longer count as goal linkage
    goal = task.goal if task.goal_id is not None and not task.goal.is_archived else None
    return TaskSnapshot(
        id=task.id,
        title=task.title,
        priority=task.priority,
        status=task.status,
        created_at=task.created_at,
        scheduled_date=task.scheduled_date,
        scheduled_time=task.scheduled_time,
        goal_id=goal.id if goal else None,
        goal_title=goal.title if goal else None,
    )


class DjangoDecisionStore(DecisionStore):

    def load_candidates(self, task_ids: Iterable[TaskId], user_id: Hashable) -> Dict[TaskId, TaskSnapshot]:
        tasks = (
            Task.objects
            .filter(id__in=set(task_ids), user_id=user_id, status__in=Task.PENDING_STATUSES)
            .select_related('goal')
        )
        snapshots = {task.id: snapshot_from_task(task) for task in tasks}
        logger.debug(f"Resolved {len(snapshots)} candidate task(s) for user {user_id}")
        return snapshots

    def create_decision_log(self, seed_a: TaskId, seed_b: TaskId, decision: Decision, user_id: Hashable) -> TaskId:
        with transaction.atomic():
            log = DecisionLog.objects.create(
                user_id=user_id,
                seed_task_a=seed_a,
                seed_task_b=seed_b,
                candidate_ids=list(decision.candidate_ids),
                recommended_task=decision.recommended_id,
                scores=[score.to_dict() for score in decision.scores],
                reasons=[reason.to_dict() for reason in decision.reasons],
                confidence=decision.confidence,
            )
        logger.info(
            f"Decision log {log.id} saved for user {user_id}: "
            f"task {decision.recommended_id} (confidence={decision.confidence:.2f})"
        )
        return log.id

    def get_decision_log(self, decision_log_id: TaskId, user_id: Optional[Hashable] = None) -> Optional[DecisionLogRecord]:
        logs = DecisionLog.objects.filter(pk=decision_log_id)
        if user_id is not None:
            logs = logs.filter(user_id=user_id)
        row = logs.values('id', 'user_id', 'candidate_ids', 'recommended_task').first()
        if row is None:
            return None
        return DecisionLogRecord(
            id=row['id'],
            user_id=row['user_id'],
            candidate_ids=tuple(row['candidate_ids']),
            recommended_id=row['recommended_task'],
        )

    def record_feedback(
        self,
        decision_log_id: TaskId,
        user_choice: TaskId,
        user_override: bool,
        feedback: Optional[str],
        recorded_at: datetime.datetime,
    ) -> bool:
        # One UPDATE statement: concurrent submissions cannot interleave
        updated = DecisionLog.objects.filter(pk=decision_log_id).update(
            user_choice=user_choice,
            user_override=user_override,
            user_feedback=feedback,
            feedback_at=recorded_at,
        )
        if updated:
            logger.info(f"Feedback recorded on decision log {decision_log_id} (override={user_override})")
        else:
            logger.warning(f"Feedback update matched no decision log {decision_log_id}")
        return bool(updated)


def get_decision_engine() -> DecisionEngine:
    return DecisionEngine(DjangoDecisionStore())


def get_feedback_recorder() -> FeedbackRecorder:
    return FeedbackRecorder(DjangoDecisionStore())
