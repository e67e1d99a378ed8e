# habits/services.py
"""
Turns a user's active routines into concrete tasks on the days they are due.
"""

import datetime
import logging
from typing import List

from django.db import transaction

from lifeboard.dates import iter_days, to_canonical_date
from tasks.models import Task

from .models import Routine
from .recurrence import is_due

logger = logging.getLogger(__name__)

DEFAULT_ROUTINE_TIME = datetime.time(9, 0)


def generate_routine_tasks(user, start: datetime.date, days: int = 7) -> List[Task]:
    """
    Create a TODO task for every active routine on each due day of
    ``start`` .. ``start + days - 1``.

    Days before a routine was created are not due. A task with the routine's
    title already scheduled on that day counts as generated, so re-running
    over an overlapping range creates nothing twice.
    """
    end = start + datetime.timedelta(days=days - 1)
    routines = list(Routine.objects.filter(user=user, active=True))
    if not routines:
        return []

    existing = set(
        Task.objects
        .filter(user=user, scheduled_date__range=(start, end), title__in={r.title for r in routines})
        .values_list('title', 'scheduled_date')
    )

    created = []
    with transaction.atomic():
        for day in iter_days(start, end):
            for routine in routines:
                if day < to_canonical_date(routine.created_at):
                    continue
                if not is_due(routine.recurrence_rule, day):
                    continue
                if (routine.title, day) in existing:
                    continue

                task = Task.objects.create(
                    user=user,
                    title=routine.title,
                    description=routine.description or f"Generated from routine: {routine.title}",
                    priority=routine.priority,
                    status=Task.Status.TODO,
                    scheduled_date=day,
                    scheduled_time=routine.time_of_day or DEFAULT_ROUTINE_TIME,
                )
                existing.add((routine.title, day))
                created.append(task)

    logger.info(f"Generated {len(created)} routine tasks for user {user.id} from {start} to {end}")
    return created
