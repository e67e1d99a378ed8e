# tasks/tasks.py

import datetime
import logging

from celery import shared_task
from django.db import transaction
from django.utils import timezone

from lifeboard.dates import to_canonical_date

from .models import Task

logger = logging.getLogger(__name__)

# Completed tasks stay visible this long before being archived
ARCHIVE_AFTER = datetime.timedelta(hours=24)


@shared_task
def archive_completed_tasks(now=None):
    """
    Move tasks completed more than a day ago into an archived status.

    A task completed on or before its scheduled day (or with no scheduled
    day) is archived as a success; one completed after it as a failure.
    """
    now = now or timezone.now()
    cutoff = now - ARCHIVE_AFTER

    try:
        with transaction.atomic():
            stale = (
                Task.objects
                .select_for_update()
                .filter(status=Task.Status.COMPLETED, completed_at__lte=cutoff)
                .only('id', 'scheduled_date', 'completed_at')
            )

            on_time, late = [], []
            for task in stale:
                if task.scheduled_date is None or to_canonical_date(task.completed_at) <= task.scheduled_date:
                    on_time.append(task.id)
                else:
                    late.append(task.id)

            # QuerySet.update() skips pre_save, so completed_at is preserved
            if on_time:
                Task.objects.filter(id__in=on_time).update(status=Task.Status.ARCHIVED_SUCCESS, updated_at=now)
            if late:
                Task.objects.filter(id__in=late).update(status=Task.Status.ARCHIVED_FAILED, updated_at=now)

    except Exception as e:
        logger.exception(f"Archiving completed tasks failed: {str(e)}")
        raise

    logger.info(f"Archived {len(on_time)} on-time and {len(late)} late task(s)")
    return {"archived_success": len(on_time), "archived_failed": len(late)}
