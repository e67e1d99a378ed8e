# tasks/tests/test_api.py
"""
HTTP tests for the task endpoints under /api/v1/tasks/.
"""

from __future__ import annotations

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APITestCase

from goals.models import Goal
from tasks.models import DecisionLog, Task

User = get_user_model()

TASKS_URL = '/api/v1/tasks/'
RECOMMEND_URL = '/api/v1/tasks/recommend-next/'
FEEDBACK_URL = '/api/v1/tasks/decision-feedback/'
PARSE_URL = '/api/v1/tasks/parse-nl/'


def create_test_user(username: str = "testuser") -> User:
    return User.objects.create_user(
        email=f"{username}@example.com",
        password="testpass123",
        username=username,
    )


class TaskAPITestCase(APITestCase):

    def setUp(self) -> None:
        self.user = create_test_user()
        self.other = create_test_user("other")
        self.client.force_authenticate(user=self.user)


class TestTaskCrud(TaskAPITestCase):

    def test_authentication_is_required(self) -> None:
        self.client.force_authenticate(user=None)
        response = self.client.get(TASKS_URL)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_assigns_owner(self) -> None:
        goal = Goal.objects.create(user=self.user, title="Fitness")

        response = self.client.post(TASKS_URL, {
            'title': 'Run 5k', 'priority': 'high', 'goal': goal.id, 'scheduled_date': '2024-01-20',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        task = Task.objects.get(pk=response.data['id'])
        self.assertEqual(task.user, self.user)
        self.assertEqual(response.data['goal_title'], "Fitness")
        self.assertEqual(response.data['status'], Task.Status.TODO)

    def test_cannot_link_another_users_goal(self) -> None:
        foreign_goal = Goal.objects.create(user=self.other, title="Not yours")

        response = self.client.post(TASKS_URL, {'title': 'Sneaky', 'goal': foreign_goal.id}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('goal', response.data)

    def test_list_only_shows_own_tasks(self) -> None:
        Task.objects.create(user=self.user, title="Mine")
        Task.objects.create(user=self.other, title="Theirs")

        response = self.client.get(TASKS_URL)

        self.assertEqual([t['title'] for t in response.data], ["Mine"])

    def test_other_users_task_is_not_found(self) -> None:
        theirs = Task.objects.create(user=self.other, title="Theirs")
        response = self.client.get(f'{TASKS_URL}{theirs.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_completing_through_patch_stamps_completion(self) -> None:
        task = Task.objects.create(user=self.user, title="Finish me")

        response = self.client.patch(f'{TASKS_URL}{task.id}/', {'status': 'completed'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['completed_at'])


class TestRecommendNext(TaskAPITestCase):

    def setUp(self) -> None:
        super().setUp()
        self.high = Task.objects.create(user=self.user, title="Pay rent", priority=Task.Priority.HIGH)
        self.low = Task.objects.create(user=self.user, title="Tidy desk", priority=Task.Priority.LOW)

    def test_recommendation_is_returned_and_logged(self) -> None:
        response = self.client.post(RECOMMEND_URL, {'task_ids': [self.low.id, self.high.id]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['recommended_id'], self.high.id)
        self.assertEqual(len(response.data['scores']), 2)
        self.assertTrue(response.data['reasons'])
        self.assertTrue(0.0 <= response.data['confidence'] <= 1.0)

        log = DecisionLog.objects.get(pk=response.data['decision_log_id'])
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.recommended_task, self.high.id)

    def test_single_id_is_rejected(self) -> None:
        response = self.client.post(RECOMMEND_URL, {'task_ids': [self.high.id]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(DecisionLog.objects.exists())

    def test_unresolvable_candidates_are_not_found(self) -> None:
        theirs = Task.objects.create(user=self.other, title="Theirs")

        response = self.client.post(RECOMMEND_URL, {'task_ids': [self.high.id, theirs.id]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(DecisionLog.objects.exists())


class TestDecisionFeedback(TaskAPITestCase):

    def setUp(self) -> None:
        super().setUp()
        self.a = Task.objects.create(user=self.user, title="A", priority=Task.Priority.HIGH)
        self.b = Task.objects.create(user=self.user, title="B")
        response = self.client.post(RECOMMEND_URL, {'task_ids': [self.a.id, self.b.id]}, format='json')
        self.log_id = response.data['decision_log_id']

    def test_feedback_is_recorded(self) -> None:
        response = self.client.post(FEEDBACK_URL, {
            'decision_log_id': self.log_id, 'user_choice': self.b.id, 'feedback': 'Not in the mood',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = DecisionLog.objects.get(pk=self.log_id)
        self.assertEqual(log.user_choice, self.b.id)
        self.assertTrue(log.user_override)
        self.assertEqual(log.user_feedback, 'Not in the mood')

    def test_choice_outside_candidates_is_bad_request(self) -> None:
        response = self.client.post(FEEDBACK_URL, {'decision_log_id': self.log_id, 'user_choice': 999999}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIsNone(DecisionLog.objects.get(pk=self.log_id).user_choice)

    def test_other_users_log_is_not_found(self) -> None:
        self.client.force_authenticate(user=self.other)
        response = self.client.post(FEEDBACK_URL, {'decision_log_id': self.log_id, 'user_choice': self.a.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class TestParseNaturalLanguage(TaskAPITestCase):

    def setUp(self) -> None:
        super().setUp()
        cache.clear()

    def tearDown(self) -> None:
        cache.clear()

    @patch("tasks.views.ExternalTaskParser")
    def test_parsed_draft_is_returned(self, mock_parser_class) -> None:
        mock_parser_class.return_value.parse.return_value = {
            "parsed": {"title": "Dentist", "priority": "mid", "scheduled_date": "2024-01-16"},
            "confidence": 0.9,
        }

        response = self.client.post(PARSE_URL, {'input': 'dentist tomorrow'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['parsed']['title'], "Dentist")
        self.assertFalse(Task.objects.exists())

    @patch("tasks.views.ExternalTaskParser")
    def test_parser_errors_map_to_status_codes(self, mock_parser_class) -> None:
        cases = {
            "PARSER_NOT_CONFIGURED": status.HTTP_503_SERVICE_UNAVAILABLE,
            "RATE_LIMIT": status.HTTP_429_TOO_MANY_REQUESTS,
            "PARSE_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
            "CONNECTION_ERROR": status.HTTP_502_BAD_GATEWAY,
        }
        for error_code, expected_status in cases.items():
            with self.subTest(error_code=error_code):
                mock_parser_class.return_value.parse.return_value = {
                    "parsed": None, "confidence": 0.0,
                    "error_code": error_code, "error_message": "nope",
                }
                response = self.client.post(PARSE_URL, {'input': 'anything'}, format='json')

                self.assertEqual(response.status_code, expected_status)
                self.assertEqual(response.data['error_code'], error_code)

    def test_blank_input_is_rejected(self) -> None:
        response = self.client.post(PARSE_URL, {'input': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
