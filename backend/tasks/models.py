from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from goals.models import Goal


class Task(models.Model):
    """
    A unit of work owned by a user, optionally contributing to a goal.
    """

    class Priority(models.TextChoices):
        HIGH = 'high', _('High')
        MID = 'mid', _('Mid')
        LOW = 'low', _('Low')

    class Status(models.TextChoices):
        TODO = 'todo', _('To do')
        IN_PROGRESS = 'in_progress', _('In progress')
        COMPLETED = 'completed', _('Completed')
        ARCHIVED_SUCCESS = 'archived_success', _('Archived (on time)')
        ARCHIVED_FAILED = 'archived_failed', _('Archived (late)')

    # Statuses a task can be recommended from
    PENDING_STATUSES = (Status.TODO, Status.IN_PROGRESS)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tasks',
        verbose_name=_("user")
    )

    goal = models.ForeignKey(
        Goal,
        on_delete=models.SET_NULL, # If a Goal is deleted, the task remains (goal=null)
        null=True, blank=True,
        related_name='tasks',
        verbose_name=_("associated goal")
    )

    title = models.CharField(max_length=200, verbose_name=_("title"))
    description = models.TextField(blank=True, verbose_name=_("description"))

    priority = models.CharField(
        max_length=8,
        choices=Priority.choices,
        default=Priority.MID,
        verbose_name=_("priority")
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.TODO,
        verbose_name=_("status")
    )

    # Calendar day in LIFEBOARD_TIME_ZONE, plus an optional wall-clock start
    scheduled_date = models.DateField(null=True, blank=True, verbose_name=_("scheduled date"))
    scheduled_time = models.TimeField(null=True, blank=True, verbose_name=_("scheduled time"))

    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("completed at"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Task")
        verbose_name_plural = _("Tasks")
        ordering = ['scheduled_date', 'scheduled_time', 'created_at']

    def __str__(self):
        return f"Task for {self.user}: {self.title}"

    @property
    def is_pending(self):
        return self.status in self.PENDING_STATUSES


class DecisionLog(models.Model):
    """
    Audit record of one recommendation plus the user's later feedback.

    The recommendation columns are written once at creation. Only the
    feedback columns are ever updated afterwards.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='decision_logs',
        verbose_name=_("user")
    )

    # Plain ids rather than foreign keys: the log must outlive its tasks
    seed_task_a = models.BigIntegerField(verbose_name=_("first seed task"))
    seed_task_b = models.BigIntegerField(verbose_name=_("second seed task"))
    candidate_ids = models.JSONField(default=list, verbose_name=_("candidate task ids"))
    recommended_task = models.BigIntegerField(verbose_name=_("recommended task"))
    scores = models.JSONField(default=list, verbose_name=_("ranked scores"))
    reasons = models.JSONField(default=list, verbose_name=_("reasons"))
    confidence = models.FloatField(
        validators=[MinValueValidator(0.0), MaxValueValidator(1.0)],
        verbose_name=_("confidence")
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    # Feedback section, null until the user reports what they actually did
    user_choice = models.BigIntegerField(null=True, blank=True, verbose_name=_("user choice"))
    user_override = models.BooleanField(null=True, blank=True, verbose_name=_("user override"))
    user_feedback = models.TextField(null=True, blank=True, verbose_name=_("user feedback"))
    feedback_at = models.DateTimeField(null=True, blank=True, verbose_name=_("feedback at"))

    class Meta:
        verbose_name = _("Decision log")
        verbose_name_plural = _("Decision logs")
        ordering = ['-created_at']

    def __str__(self):
        return f"Decision {self.pk}: task {self.recommended_task} ({self.confidence:.2f})"
