from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _
from tasks.models import Task

from .recurrence import RecurrenceRule, parse_weekdays, serialize_weekdays


class RecurrenceType(models.TextChoices):
    DAILY = 'daily', _('Daily')
    WEEKLY = 'weekly', _('Weekly')
    MONTHLY = 'monthly', _('Monthly')


class RecurringItem(models.Model):
    """
    Shared recurrence columns of habits and routines.

    ``recurrence_days`` holds a JSON list of Sunday-based weekday indices,
    e.g. "[1,3,5]" for Mon/Wed/Fri. Only weekly rules read it.
    """
    title = models.CharField(max_length=200, verbose_name=_("title"))
    description = models.TextField(blank=True, verbose_name=_("description"))

    recurrence_type = models.CharField(
        max_length=10,
        choices=RecurrenceType.choices,
        default=RecurrenceType.DAILY,
        verbose_name=_("recurrence type")
    )
    recurrence_days = models.TextField(null=True, blank=True, verbose_name=_("recurrence days"))
    active = models.BooleanField(default=True, verbose_name=_("active"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        abstract = True

    @property
    def weekdays(self):
        return parse_weekdays(self.recurrence_days)

    @weekdays.setter
    def weekdays(self, days):
        self.recurrence_days = serialize_weekdays(days)

    @property
    def recurrence_rule(self):
        return RecurrenceRule(
            type=self.recurrence_type,
            days=self.weekdays,
            active=self.active,
            anchor=self.created_at,
        )


class Habit(RecurringItem):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='habits',
        verbose_name=_("user")
    )
    icon = models.CharField(max_length=16, blank=True, verbose_name=_("icon"))
    order = models.PositiveIntegerField(default=0, verbose_name=_("display order"))

    class Meta:
        verbose_name = _("Habit")
        verbose_name_plural = _("Habits")
        ordering = ['order', '-created_at']

    def __str__(self):
        return f"{self.user}'s Habit: {self.title}"


class HabitCheck(models.Model):
    """One completed day of a habit. ``date`` is a canonical-timezone day."""
    habit = models.ForeignKey(Habit, on_delete=models.CASCADE, related_name='checks', verbose_name=_("habit"))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='habit_checks',
        verbose_name=_("user")
    )
    date = models.DateField(verbose_name=_("date"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        verbose_name = _("Habit check")
        verbose_name_plural = _("Habit checks")
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['habit', 'user', 'date'], name='unique_habit_check_per_day'),
        ]

    def __str__(self):
        return f"{self.habit.title} checked on {self.date}"


class Routine(RecurringItem):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='routines',
        verbose_name=_("user")
    )
    priority = models.CharField(
        max_length=8,
        choices=Task.Priority.choices,
        default=Task.Priority.MID,
        verbose_name=_("priority")
    )
    time_of_day = models.TimeField(null=True, blank=True, verbose_name=_("time of day"))

    class Meta:
        verbose_name = _("Routine")
        verbose_name_plural = _("Routines")
        ordering = ['-active', '-created_at']

    def __str__(self):
        return f"{self.user}'s Routine: {self.title}"


class RoutineCheck(models.Model):
    routine = models.ForeignKey(Routine, on_delete=models.CASCADE, related_name='checks', verbose_name=_("routine"))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='routine_checks',
        verbose_name=_("user")
    )
    date = models.DateField(verbose_name=_("date"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        verbose_name = _("Routine check")
        verbose_name_plural = _("Routine checks")
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['routine', 'user', 'date'], name='unique_routine_check_per_day'),
        ]


class RoutineResult(models.Model):
    """Outcome of a due routine day, written by the nightly results job."""

    class Status(models.TextChoices):
        SUCCESS = 'success', _('Success')
        FAILED = 'failed', _('Failed')

    routine = models.ForeignKey(Routine, on_delete=models.CASCADE, related_name='results', verbose_name=_("routine"))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='routine_results',
        verbose_name=_("user")
    )
    date = models.DateField(verbose_name=_("date"))
    status = models.CharField(max_length=10, choices=Status.choices, verbose_name=_("status"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Routine result")
        verbose_name_plural = _("Routine results")
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['routine', 'user', 'date'], name='unique_routine_result_per_day'),
        ]

    def __str__(self):
        return f"{self.routine.title} on {self.date}: {self.status}"
