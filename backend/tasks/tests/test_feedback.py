# tasks/tests/test_feedback.py

from __future__ import annotations

import datetime

from django.test import SimpleTestCase

from tasks.ai_engine.decision import DecisionEngine
from tasks.ai_engine.exceptions import InvalidInputError, NotFoundError
from tasks.ai_engine.feedback import FeedbackRecorder

from .fakes import FIXED_NOW, InMemoryDecisionStore, make_task


class TestFeedbackRecorder(SimpleTestCase):

    def setUp(self) -> None:
        self.store = InMemoryDecisionStore()
        self.store.add(make_task(1, priority="high"))
        self.store.add(make_task(2))
        self.store.add(make_task(3))
        self.decision = DecisionEngine(self.store).recommend_next([1, 2, 3], 1, now=FIXED_NOW)
        self.log_id = self.decision.decision_log_id
        self.recorder = FeedbackRecorder(self.store)

    def test_accepting_the_recommendation_is_not_an_override(self) -> None:
        self.recorder.save_user_feedback(self.log_id, 1, feedback="Good call", user_id=1, now=FIXED_NOW)

        log = self.store.logs[self.log_id]
        self.assertEqual(log["user_choice"], 1)
        self.assertFalse(log["user_override"])
        self.assertEqual(log["user_feedback"], "Good call")
        self.assertEqual(log["feedback_at"], FIXED_NOW)

    def test_choosing_another_candidate_is_an_override(self) -> None:
        self.recorder.save_user_feedback(self.log_id, 3, user_id=1)

        log = self.store.logs[self.log_id]
        self.assertEqual(log["user_choice"], 3)
        self.assertTrue(log["user_override"])
        self.assertIsNone(log["user_feedback"])

    def test_unknown_log_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.recorder.save_user_feedback(999, 1)

    def test_other_users_log_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.recorder.save_user_feedback(self.log_id, 1, user_id=2)

    def test_choice_outside_candidates_is_rejected_without_mutation(self) -> None:
        with self.assertRaises(InvalidInputError):
            self.recorder.save_user_feedback(self.log_id, 42, user_id=1)

        log = self.store.logs[self.log_id]
        self.assertIsNone(log["user_choice"])
        self.assertIsNone(log["feedback_at"])

    def test_resubmission_overwrites_previous_feedback(self) -> None:
        later = FIXED_NOW + datetime.timedelta(minutes=5)
        self.recorder.save_user_feedback(self.log_id, 2, feedback="first", user_id=1, now=FIXED_NOW)
        self.recorder.save_user_feedback(self.log_id, 1, feedback="second", user_id=1, now=later)

        log = self.store.logs[self.log_id]
        self.assertEqual(log["user_choice"], 1)
        self.assertFalse(log["user_override"])
        self.assertEqual(log["user_feedback"], "second")
        self.assertEqual(log["feedback_at"], later)

    def test_recommendation_is_left_untouched(self) -> None:
        self.recorder.save_user_feedback(self.log_id, 2, user_id=1)

        log = self.store.logs[self.log_id]
        self.assertEqual(log["recommended_task"], self.decision.recommended_id)
        self.assertEqual(log["confidence"], self.decision.confidence)
