# tasks/tests/test_archive.py

from __future__ import annotations

import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase

from tasks.models import Task
from tasks.tasks import archive_completed_tasks

User = get_user_model()

NOW = datetime.datetime(2024, 1, 15, 3, 0, tzinfo=datetime.timezone.utc)
TWO_DAYS_AGO = NOW - datetime.timedelta(days=2)  # 2024-01-13 in Seoul


class TestArchiveCompletedTasks(TestCase):

    def setUp(self) -> None:
        self.user = User.objects.create_user(email="a@example.com", password="pw", username="a")

    def completed_task(self, completed_at, scheduled_date=None, title="Done") -> Task:
        task = Task.objects.create(
            user=self.user, title=title, status=Task.Status.COMPLETED, scheduled_date=scheduled_date
        )
        # update() bypasses the pre_save stamp
        Task.objects.filter(pk=task.pk).update(completed_at=completed_at)
        return task

    def test_on_time_and_late_are_split(self) -> None:
        on_time = self.completed_task(TWO_DAYS_AGO, scheduled_date=datetime.date(2024, 1, 13))
        early = self.completed_task(TWO_DAYS_AGO, scheduled_date=datetime.date(2024, 1, 14))
        late = self.completed_task(TWO_DAYS_AGO, scheduled_date=datetime.date(2024, 1, 12))
        unscheduled = self.completed_task(TWO_DAYS_AGO)

        result = archive_completed_tasks(now=NOW)

        self.assertEqual(result, {"archived_success": 3, "archived_failed": 1})
        statuses = dict(Task.objects.values_list('id', 'status'))
        self.assertEqual(statuses[on_time.id], Task.Status.ARCHIVED_SUCCESS)
        self.assertEqual(statuses[early.id], Task.Status.ARCHIVED_SUCCESS)
        self.assertEqual(statuses[unscheduled.id], Task.Status.ARCHIVED_SUCCESS)
        self.assertEqual(statuses[late.id], Task.Status.ARCHIVED_FAILED)

    def test_completion_time_is_preserved(self) -> None:
        task = self.completed_task(TWO_DAYS_AGO)

        archive_completed_tasks(now=NOW)

        task.refresh_from_db()
        self.assertEqual(task.completed_at, TWO_DAYS_AGO)

    def test_recent_completions_and_pending_tasks_are_untouched(self) -> None:
        recent = self.completed_task(NOW - datetime.timedelta(hours=3))
        pending = Task.objects.create(user=self.user, title="Still open")

        result = archive_completed_tasks(now=NOW)

        self.assertEqual(result, {"archived_success": 0, "archived_failed": 0})
        recent.refresh_from_db()
        pending.refresh_from_db()
        self.assertEqual(recent.status, Task.Status.COMPLETED)
        self.assertEqual(pending.status, Task.Status.TODO)


class TestCompletedAtSignal(TestCase):

    def setUp(self) -> None:
        self.user = User.objects.create_user(email="b@example.com", password="pw", username="b")

    def test_completing_stamps_and_reopening_clears(self) -> None:
        task = Task.objects.create(user=self.user, title="Read")
        self.assertIsNone(task.completed_at)

        task.status = Task.Status.COMPLETED
        task.save()
        self.assertIsNotNone(task.completed_at)
        stamped = task.completed_at

        task.title = "Read a book"
        task.save()
        self.assertEqual(task.completed_at, stamped)

        task.status = Task.Status.TODO
        task.save()
        self.assertIsNone(task.completed_at)
