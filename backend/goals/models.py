from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _


class Goal(models.Model):
    """
    A longer-term objective that tasks can contribute to.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='goals',
        verbose_name=_("user")
    )

    title = models.CharField(max_length=255, verbose_name=_("title"))

    description = models.TextField(blank=True, verbose_name=_("description"))

    target_date = models.DateField(null=True, blank=True, verbose_name=_("target date"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # Soft delete; archived goals no longer count as goal linkage for tasks
    is_archived = models.BooleanField(default=False, verbose_name=_("is archived"))

    class Meta:
        verbose_name = _("Goal")
        verbose_name_plural = _("Goals")
        ordering = ['is_archived', 'created_at']

    def __str__(self):
        return f"{self.user}'s Goal: {self.title}"

    @property
    def is_active(self):
        return not self.is_archived
