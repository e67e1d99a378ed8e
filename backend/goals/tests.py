# goals/tests.py
"""
Goals App Test Suite
====================

Tests for the Goal model and the owner-scoped goal endpoints.
"""

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from tasks.models import Task

from .models import Goal

User = get_user_model()

GOALS_URL = '/api/v1/goals/'


class GoalModelTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(
            username='testuser',
            email='test@example.com',
            password='testpass123'
        )

    def test_new_goal_is_active(self):
        goal = Goal.objects.create(user=self.user, title='Learn Korean')
        self.assertTrue(goal.is_active)
        self.assertFalse(goal.is_archived)

    def test_deleting_goal_keeps_its_tasks(self):
        goal = Goal.objects.create(user=self.user, title='Learn Korean')
        task = Task.objects.create(user=self.user, title='Flashcards', goal=goal)

        goal.delete()

        task.refresh_from_db()
        self.assertIsNone(task.goal)


class GoalAPITest(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(
            username='testuser',
            email='test@example.com',
            password='testpass123'
        )
        self.other = User.objects.create_user(
            username='other',
            email='other@example.com',
            password='testpass123'
        )
        self.client.force_authenticate(user=self.user)

    def test_create_goal_for_authenticated_user(self):
        response = self.client.post(GOALS_URL, {'title': 'Run a marathon', 'user': self.other.id}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        goal = Goal.objects.get(pk=response.data['id'])
        # The payload cannot pick the owner
        self.assertEqual(goal.user, self.user)
        self.assertEqual(response.data['user_email'], 'test@example.com')
        self.assertEqual(response.data['task_count'], 0)

    def test_list_hides_archived_and_foreign_goals(self):
        Goal.objects.create(user=self.user, title='Active')
        Goal.objects.create(user=self.user, title='Archived', is_archived=True)
        Goal.objects.create(user=self.other, title='Theirs')

        response = self.client.get(GOALS_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([g['title'] for g in response.data], ['Active'])

    def test_task_count(self):
        goal = Goal.objects.create(user=self.user, title='Fitness')
        Task.objects.create(user=self.user, title='Gym', goal=goal)
        Task.objects.create(user=self.user, title='Stretch', goal=goal)

        response = self.client.get(f'{GOALS_URL}{goal.id}/')

        self.assertEqual(response.data['task_count'], 2)

    def test_archive_with_patch(self):
        goal = Goal.objects.create(user=self.user, title='Fitness')

        response = self.client.patch(f'{GOALS_URL}{goal.id}/', {'is_archived': True}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        goal.refresh_from_db()
        self.assertTrue(goal.is_archived)

    def test_other_users_goal_is_not_found(self):
        theirs = Goal.objects.create(user=self.other, title='Theirs')

        for method in ('get', 'patch', 'delete'):
            with self.subTest(method=method):
                response = getattr(self.client, method)(f'{GOALS_URL}{theirs.id}/')
                self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.assertTrue(Goal.objects.filter(pk=theirs.id).exists())

    def test_unauthenticated_request_is_rejected(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(GOALS_URL)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
