from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Priority(models.TextChoices):
    LOW = 'low', _('Low')
    MEDIUM = 'medium', _('Medium')
    HIGH = 'high', _('High')
    URGENT = 'urgent', _('Urgent')


class Status(models.TextChoices):
    PENDING = 'pending', _('Pending')
    IN_PROGRESS = 'in-progress', _('In progress')
    COMPLETED = 'completed', _('Completed')
    CANCELLED = 'cancelled', _('Cancelled')


TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
CATEGORY_MAX_LENGTH = 50


class Task(models.Model):
    """
    A user-authored unit of work.
    """
    title = models.CharField(max_length=TITLE_MAX_LENGTH, verbose_name=_("title"))
    description = models.CharField(
        max_length=DESCRIPTION_MAX_LENGTH,
        blank=True,
        default='',
        verbose_name=_("description")
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        verbose_name=_("priority")
    )
    status = models.CharField(
        max_length=12,
        choices=Status.choices,
        default=Status.PENDING,
        verbose_name=_("status")
    )
    category = models.CharField(
        max_length=CATEGORY_MAX_LENGTH,
        blank=True,
        default='',
        verbose_name=_("category")
    )
    due_date = models.DateField(
        null=True, blank=True,
        verbose_name=_("due date"),
        help_text=_("The deadline for the task.")
    )

    # Minutes
    estimated_duration = models.PositiveIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1)],
        verbose_name=_("estimated duration"),
        help_text=_("Estimated time to complete, in minutes.")
    )

    # Deduplicated list of free-form labels; order carries no meaning
    tags = models.JSONField(default=list, blank=True, verbose_name=_("tags"))

    # Only stored when the client sends back a suggestion it wants to keep
    ai_suggestions = models.TextField(
        null=True, blank=True,
        verbose_name=_("AI suggestions")
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Task")
        verbose_name_plural = _("Tasks")
        ordering = ['-created_at', 'id']

    def __str__(self):
        return f"Task {self.pk}: {self.title} ({self.status})"


def normalize_tags(items):
    """Strip, drop blanks and deduplicate tags, keeping first-seen order."""
    tags = []
    for item in items:
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags
