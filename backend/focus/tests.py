# focus/tests.py
"""
Focus Session Test Suite
========================

Owner-scoped focus session endpoints and the focus figures they feed into
habit statistics.
"""

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from habits.models import Habit
from tasks.models import Task

from .models import FocusSession

User = get_user_model()

FOCUS_URL = '/api/v1/focus-sessions/'
HABITS_URL = '/api/v1/habits/'


class FocusSessionAPITest(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='testuser', email='test@example.com', password='testpass123')
        self.other = User.objects.create_user(username='other', email='other@example.com', password='testpass123')
        self.client.force_authenticate(user=self.user)
        self.task = Task.objects.create(user=self.user, title='Write report')

    def test_start_session_for_own_task(self):
        response = self.client.post(FOCUS_URL, {'duration': 25, 'task': self.task.id}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        session = FocusSession.objects.get(pk=response.data['id'])
        self.assertEqual(session.user, self.user)
        self.assertEqual(session.actual_time, 0)
        self.assertIsNone(session.ended_at)
        self.assertEqual(response.data['task_title'], 'Write report')

    def test_invalid_duration_is_rejected(self):
        for duration in (0, None):
            with self.subTest(duration=duration):
                response = self.client.post(FOCUS_URL, {'duration': duration}, format='json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_attach_to_another_users_task_or_habit(self):
        their_task = Task.objects.create(user=self.other, title='Theirs')
        their_habit = Habit.objects.create(user=self.other, title='Theirs')

        by_task = self.client.post(FOCUS_URL, {'duration': 25, 'task': their_task.id}, format='json')
        by_habit = self.client.post(FOCUS_URL, {'duration': 25, 'habit': their_habit.id}, format='json')

        self.assertEqual(by_task.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('task', by_task.data)
        self.assertIn('habit', by_habit.data)
        self.assertFalse(FocusSession.objects.exists())

    def test_completing_a_session_stamps_its_end(self):
        session = FocusSession.objects.create(user=self.user, duration=25)

        progress = self.client.patch(f'{FOCUS_URL}{session.id}/', {'actual_time': 10}, format='json')
        self.assertIsNone(progress.data['ended_at'])

        done = self.client.patch(f'{FOCUS_URL}{session.id}/', {'actual_time': 25, 'completed': True}, format='json')

        self.assertEqual(done.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(done.data['ended_at'])
        self.assertEqual(done.data['actual_time'], 25)

    def test_list_is_owner_scoped_with_totals(self):
        FocusSession.objects.create(user=self.user, duration=25, actual_time=25, completed=True, task=self.task)
        FocusSession.objects.create(user=self.user, duration=25, actual_time=7, interrupted=True)
        FocusSession.objects.create(user=self.other, duration=50, actual_time=50)

        response = self.client.get(FOCUS_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['sessions']), 2)
        self.assertEqual(response.data['stats'], {
            'total': 2, 'completed': 1, 'interrupted': 1, 'total_minutes': 32,
        })

        by_task = self.client.get(FOCUS_URL, {'task': self.task.id})
        self.assertEqual(by_task.data['stats']['total_minutes'], 25)

        limited = self.client.get(FOCUS_URL, {'limit': 1})
        self.assertEqual(len(limited.data['sessions']), 1)

    def test_other_users_session_is_not_found(self):
        theirs = FocusSession.objects.create(user=self.other, duration=25)

        self.assertEqual(self.client.get(f'{FOCUS_URL}{theirs.id}/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.delete(f'{FOCUS_URL}{theirs.id}/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(FocusSession.objects.filter(pk=theirs.id).exists())

    def test_delete_own_session(self):
        session = FocusSession.objects.create(user=self.user, duration=25)

        response = self.client.delete(f'{FOCUS_URL}{session.id}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(FocusSession.objects.exists())


class HabitFocusStatsTest(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='testuser', email='test@example.com', password='testpass123')
        self.client.force_authenticate(user=self.user)
        self.read = Habit.objects.create(user=self.user, title='Read')
        self.run = Habit.objects.create(user=self.user, title='Run')
        FocusSession.objects.create(user=self.user, habit=self.read, duration=30, actual_time=20)
        FocusSession.objects.create(user=self.user, habit=self.read, duration=30, actual_time=25)
        FocusSession.objects.create(user=self.user, habit=self.run, duration=30, actual_time=10)

    def test_single_habit_focus_summary(self):
        response = self.client.get(f'{HABITS_URL}{self.read.id}/stats/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['focus'], {
            'focus_sessions': 2, 'total_focus_minutes': 45, 'avg_focus_minutes': 23,
        })

    def test_overview_sums_focus_minutes_of_active_habits(self):
        paused = Habit.objects.create(user=self.user, title='Paused', active=False)
        FocusSession.objects.create(user=self.user, habit=paused, duration=30, actual_time=30)
        # Check and focus rows must not multiply each other in the sum
        self.client.post(f'{HABITS_URL}{self.read.id}/check/')

        response = self.client.get(f'{HABITS_URL}stats/')

        self.assertEqual(response.data['total_focus_minutes'], 55)
