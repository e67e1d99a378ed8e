# habits/tests/test_services.py

from __future__ import annotations

import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase

from habits.models import Routine
from habits.services import DEFAULT_ROUTINE_TIME, generate_routine_tasks
from tasks.models import Task

User = get_user_model()

MONDAY = datetime.date(2024, 1, 15)
LONG_AGO = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


class TestGenerateRoutineTasks(TestCase):

    def setUp(self) -> None:
        self.user = User.objects.create_user(email="g@example.com", password="pw", username="g")
        self.other = User.objects.create_user(email="o@example.com", password="pw", username="o")
        self.stretch = Routine.objects.create(
            user=self.user, title="Stretch", priority=Task.Priority.LOW, time_of_day=datetime.time(7, 30)
        )
        self.gym = Routine.objects.create(
            user=self.user, title="Gym", recurrence_type="weekly", recurrence_days="[1, 3, 5]",
            description="Leg day rotation",
        )
        Routine.objects.create(user=self.user, title="Paused", active=False)
        Routine.objects.create(user=self.other, title="Theirs")
        Routine.objects.update(created_at=LONG_AGO)

    def test_one_task_per_due_day(self) -> None:
        created = generate_routine_tasks(self.user, MONDAY, days=7)

        self.assertEqual(len(created), 10)
        gym_days = sorted(t.scheduled_date.day for t in created if t.title == "Gym")
        self.assertEqual(gym_days, [15, 17, 19])
        self.assertFalse(Task.objects.filter(title__in=["Paused", "Theirs"]).exists())
        self.assertFalse(Task.objects.filter(user=self.other).exists())

    def test_tasks_copy_routine_fields(self) -> None:
        generate_routine_tasks(self.user, MONDAY, days=1)

        stretch = Task.objects.get(title="Stretch")
        gym = Task.objects.get(title="Gym")
        self.assertEqual(stretch.user, self.user)
        self.assertEqual(stretch.status, Task.Status.TODO)
        self.assertEqual(stretch.priority, Task.Priority.LOW)
        self.assertEqual(stretch.scheduled_time, datetime.time(7, 30))
        self.assertEqual(stretch.description, "Generated from routine: Stretch")
        self.assertEqual(gym.scheduled_time, DEFAULT_ROUTINE_TIME)
        self.assertEqual(gym.description, "Leg day rotation")

    def test_existing_tasks_are_not_duplicated(self) -> None:
        Task.objects.create(user=self.user, title="Stretch", scheduled_date=MONDAY)
        generate_routine_tasks(self.user, MONDAY, days=3)

        rerun = generate_routine_tasks(self.user, MONDAY, days=3)

        self.assertEqual(rerun, [])
        self.assertEqual(Task.objects.filter(title="Stretch", scheduled_date=MONDAY).count(), 1)
        self.assertEqual(Task.objects.filter(title="Stretch").count(), 3)

    def test_days_before_creation_are_skipped(self) -> None:
        Routine.objects.filter(pk=self.stretch.pk).update(
            created_at=datetime.datetime(2024, 1, 18, tzinfo=datetime.timezone.utc)
        )

        generate_routine_tasks(self.user, MONDAY, days=7)

        stretch_days = sorted(
            Task.objects.filter(title="Stretch").values_list('scheduled_date', flat=True)
        )
        self.assertEqual(stretch_days[0], datetime.date(2024, 1, 18))
        self.assertEqual(len(stretch_days), 4)

    def test_no_active_routines(self) -> None:
        Routine.objects.update(active=False)
        self.assertEqual(generate_routine_tasks(self.user, MONDAY), [])
