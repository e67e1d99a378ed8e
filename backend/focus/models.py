from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from habits.models import Habit
from tasks.models import Task


class FocusSession(models.Model):
    """
    One run of the focus timer, optionally spent on a task or a habit.

    ``duration`` is the planned length and ``actual_time`` the minutes
    actually focused; habit statistics sum the latter.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='focus_sessions',
        verbose_name=_("user")
    )
    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        null=True, blank=True,
        related_name='focus_sessions',
        verbose_name=_("task")
    )
    habit = models.ForeignKey(
        Habit,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='focus_sessions',
        verbose_name=_("habit")
    )

    duration = models.PositiveIntegerField(verbose_name=_("planned minutes"))
    actual_time = models.PositiveIntegerField(default=0, verbose_name=_("focused minutes"))
    completed = models.BooleanField(default=False, verbose_name=_("completed"))
    interrupted = models.BooleanField(default=False, verbose_name=_("interrupted"))

    started_at = models.DateTimeField(default=timezone.now, verbose_name=_("started at"))
    ended_at = models.DateTimeField(null=True, blank=True, verbose_name=_("ended at"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Focus session")
        verbose_name_plural = _("Focus sessions")
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user}'s focus session ({self.actual_time}/{self.duration} min)"

    @property
    def is_finished(self):
        return self.completed or self.interrupted
