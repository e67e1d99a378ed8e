# tasks/signals.py

import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver
from django.utils import timezone

from .models import Task

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Task)
def stamp_completed_at(sender, instance, **kwargs):
    """
    Keep ``completed_at`` in step with ``status``.

    Completing a task stamps the time once; moving it back to a pending
    status clears it. Archived statuses keep the original completion time.
    """
    if instance.status == Task.Status.COMPLETED:
        if instance.completed_at is None:
            instance.completed_at = timezone.now()
            logger.debug(f"Task {instance.pk} completed at {instance.completed_at}")
    elif instance.status in Task.PENDING_STATUSES:
        instance.completed_at = None
