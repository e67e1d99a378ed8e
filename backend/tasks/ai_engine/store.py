# tasks/ai_engine/store.py

import abc
import datetime
from typing import Hashable, Iterable, Mapping, Optional

from .types import Decision, DecisionLogRecord, TaskId, TaskSnapshot


class DecisionStore(abc.ABC):
    """
    Persistence collaborator of the decision engine.

    Implementations own ownership checks: ``load_candidates`` must only
    return tasks the given user may see, and ``get_decision_log`` must
    hide logs belonging to someone else when ``user_id`` is given.
    """

    @abc.abstractmethod
    def load_candidates(
        self, task_ids: Iterable[TaskId], user_id: Hashable
    ) -> Mapping[TaskId, TaskSnapshot]:
        """Return snapshots of the owned, pending tasks among ``task_ids``, keyed by id."""

    @abc.abstractmethod
    def create_decision_log(
        self, seed_a: TaskId, seed_b: TaskId, decision: Decision, user_id: Hashable
    ) -> TaskId:
        """Persist a complete decision log in one write and return its id."""

    @abc.abstractmethod
    def get_decision_log(
        self, decision_log_id: TaskId, user_id: Optional[Hashable] = None
    ) -> Optional[DecisionLogRecord]:
        """Return the stored log, or None if it is missing or not visible."""

    @abc.abstractmethod
    def record_feedback(
        self,
        decision_log_id: TaskId,
        user_choice: TaskId,
        user_override: bool,
        feedback: Optional[str],
        recorded_at: datetime.datetime,
    ) -> bool:
        """
        Overwrite the feedback columns of one log atomically.

        Returns False if no row was updated.
        """
