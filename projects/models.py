"""
Project Models
"""
import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from contact.models import ContactSubmission


class Project(models.Model):
    """
    A piece of client work tracked by the agency.
    """

    PROJECT_TYPE_CHOICES = [
        ('Website Design', 'Website Design'),
        ('E-commerce', 'E-commerce'),
        ('Mobile App', 'Mobile App'),
        ('Web Application', 'Web Application'),
        ('Consulting', 'Consulting'),
        ('Other', 'Other'),
    ]

    STATUS_CHOICES = [
        ('planning', 'Planning'),
        ('design', 'Design'),
        ('development', 'Development'),
        ('testing', 'Testing'),
        ('review', 'Review'),
        ('completed', 'Completed'),
        ('on-hold', 'On Hold'),
        ('cancelled', 'Cancelled'),
    ]

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]

    ACTIVE_STATUSES = ['planning', 'design', 'development', 'testing', 'review']

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    title = models.CharField(max_length=200)
    description = models.TextField()

    # Client
    client_name = models.CharField(max_length=100)
    client_email = models.EmailField(max_length=100)
    client_company = models.CharField(max_length=200, blank=True, default='')

    project_type = models.CharField(
        max_length=30,
        choices=PROJECT_TYPE_CHOICES,
        default='Other'
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='planning',
        db_index=True
    )

    priority = models.CharField(
        max_length=10,
        choices=PRIORITY_CHOICES,
        default='medium'
    )

    # Money
    budget = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)]
    )
    paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)]
    )

    # Schedule
    start_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField(null=True, blank=True)
    completed_date = models.DateField(null=True, blank=True)

    technologies = models.JSONField(default=list, blank=True)

    notes = models.TextField(blank=True, default='')

    source_submission = models.ForeignKey(
        ContactSubmission,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='projects',
        help_text="Contact submission this project was converted from"
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.client_name})"

    @property
    def balance_due(self):
        return self.budget - self.paid

    @property
    def is_overdue(self):
        return (
            self.due_date is not None
            and self.status not in ('completed', 'cancelled')
            and self.due_date < timezone.localdate()
        )

    def save(self, *args, **kwargs):
        if self.status == 'completed' and self.completed_date is None:
            self.completed_date = timezone.localdate()
        super().save(*args, **kwargs)


class Milestone(models.Model):
    """
    A checkpoint within a project. Milestones are addressed by their
    zero-based position in the project's list.
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='milestones'
    )
    position = models.PositiveIntegerField(default=0)

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    due_date = models.DateField(null=True, blank=True)
    completed = models.BooleanField(default=False)
    completed_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = 'project_milestones'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.project.title}: {self.name}"

    def save(self, *args, **kwargs):
        if self.completed and self.completed_date is None:
            self.completed_date = timezone.localdate()
        super().save(*args, **kwargs)
