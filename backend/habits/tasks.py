# habits/tasks.py

import datetime
import logging

from celery import shared_task
from django.db import transaction

from lifeboard.dates import canonical_today, to_canonical_date

from .models import Routine, RoutineCheck, RoutineResult
from .recurrence import is_due

logger = logging.getLogger(__name__)


@shared_task
def record_routine_results(target=None):
    """
    Record success or failure of every active routine that was due on
    ``target`` (default: yesterday's canonical day).

    Routines created after ``target`` are skipped. Re-running for the same
    day overwrites the earlier results.
    """
    if target is None:
        target = canonical_today() - datetime.timedelta(days=1)
    elif isinstance(target, str):
        # Celery hands dates over as ISO strings
        target = datetime.date.fromisoformat(target)

    logger.info(f"Recording routine results for {target}")
    counts = {"total": 0, "success": 0, "failed": 0}

    try:
        routines = Routine.objects.filter(active=True)
        checked = set(
            RoutineCheck.objects
            .filter(date=target, routine__active=True)
            .values_list('routine_id', 'user_id')
        )

        with transaction.atomic():
            for routine in routines:
                if to_canonical_date(routine.created_at) > target:
                    continue
                if not is_due(routine.recurrence_rule, target):
                    continue

                if (routine.id, routine.user_id) in checked:
                    result_status = RoutineResult.Status.SUCCESS
                else:
                    result_status = RoutineResult.Status.FAILED

                RoutineResult.objects.update_or_create(
                    routine=routine,
                    user_id=routine.user_id,
                    date=target,
                    defaults={'status': result_status},
                )
                counts["total"] += 1
                counts[result_status.value] += 1

    except Exception as e:
        logger.exception(f"Recording routine results for {target} failed: {str(e)}")
        raise

    logger.info(
        f"Routine results for {target}: {counts['success']} success, {counts['failed']} failed"
    )
    return counts
