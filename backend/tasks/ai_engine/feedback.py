# tasks/ai_engine/feedback.py

import datetime
from typing import Hashable, Optional

from .exceptions import InvalidInputError, NotFoundError
from .store import DecisionStore
from .types import TaskId


class FeedbackRecorder:
    """
    Attaches the user's actual choice to a stored decision.

    Resubmitting feedback for the same log overwrites the previous
    feedback (last write wins). The recommendation itself is never touched.
    """

    def __init__(self, store: DecisionStore):
        self.store = store

    def save_user_feedback(
        self,
        decision_log_id: TaskId,
        user_choice: TaskId,
        feedback: Optional[str] = None,
        user_id: Optional[Hashable] = None,
        now: Optional[datetime.datetime] = None,
    ) -> None:
        """
        Raises:
            NotFoundError: if the log does not exist (or belongs to another user).
            InvalidInputError: if ``user_choice`` was not a candidate of that log.
        """
        log = self.store.get_decision_log(decision_log_id, user_id)
        if log is None:
            raise NotFoundError(f"Decision log {decision_log_id} not found")

        if user_choice not in log.candidate_ids:
            raise InvalidInputError(
                f"Task {user_choice} was not a candidate of decision log {decision_log_id}"
            )

        recorded_at = now or datetime.datetime.now(datetime.timezone.utc)
        updated = self.store.record_feedback(
            decision_log_id,
            user_choice,
            user_choice != log.recommended_id,
            feedback,
            recorded_at,
        )
        if not updated:
            # Row vanished between the read and the update
            raise NotFoundError(f"Decision log {decision_log_id} not found")
