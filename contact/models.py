"""
Contact Management Models

Database schema for contact form submissions.
"""
import uuid
from django.db import models
from django.utils import timezone


LOCATION_LOCAL = 'Local'
LOCATION_UNKNOWN = 'Unknown'


class ContactSubmission(models.Model):
    """
    A contact form entry posted from the public website.

    Name, email, subject, message, IP address and location are captured
    once at creation. Operators only change status and notes.
    """

    STATUS_CHOICES = [
        ('new', 'New'),
        ('contacted', 'Contacted'),
        ('quoted', 'Quoted'),
        ('closed', 'Closed'),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Contact Information
    name = models.CharField(
        max_length=100,
        help_text="Name of the person contacting us"
    )

    email = models.EmailField(
        max_length=100,
        help_text="Email address for follow-up"
    )

    subject = models.CharField(
        max_length=200,
        help_text="Subject line of the inquiry"
    )

    message = models.TextField(
        max_length=2000,
        help_text="The actual message content"
    )

    # Status
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='new',
        db_index=True,
        help_text="Current status of the submission"
    )

    # Enrichment
    ip_address = models.CharField(
        max_length=64,
        default='unknown',
        help_text="Client IP address of the submitter"
    )

    user_agent = models.CharField(
        max_length=500,
        blank=True,
        default='',
        help_text="Browser user agent"
    )

    location = models.JSONField(
        default=LOCATION_UNKNOWN,
        help_text="{city, region, country, lat, lng} or the 'Local'/'Unknown' sentinel"
    )

    # Operator notes
    notes = models.TextField(
        max_length=1000,
        blank=True,
        default='',
        help_text="Internal notes from operators"
    )

    replied_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the submitter was first contacted"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        db_index=True,
        help_text="When the submission was received"
    )

    class Meta:
        db_table = 'contact_submissions'
        ordering = ['-created_at']
        verbose_name = 'Contact Submission'
        verbose_name_plural = 'Contact Submissions'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='contact_sub_status_8c1f2e_idx'),
            models.Index(fields=['email'], name='contact_sub_email_4b9d7a_idx'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> - {self.subject} ({self.status})"

    @property
    def is_location_sentinel(self):
        return isinstance(self.location, str)

    def location_parts(self):
        """Return (city, region, country); sentinels fill all three."""
        if self.is_location_sentinel:
            return self.location, self.location, self.location
        location = self.location or {}
        return (
            location.get('city') or LOCATION_UNKNOWN,
            location.get('region') or LOCATION_UNKNOWN,
            location.get('country') or LOCATION_UNKNOWN,
        )

    def set_status(self, status):
        """Change status; the first move to 'contacted' stamps replied_at."""
        self.status = status
        update_fields = ['status']
        if status == 'contacted' and self.replied_at is None:
            self.replied_at = timezone.now()
            update_fields.append('replied_at')
        self.save(update_fields=update_fields)


class ContactFormRateLimit(models.Model):
    """
    Rate limiting tracker for contact form submissions.

    Prevents spam by tracking submissions per IP and email.
    """

    identifier = models.CharField(
        max_length=255,
        db_index=True,
        help_text="IP address or email"
    )

    identifier_type = models.CharField(
        max_length=10,
        choices=[('ip', 'IP Address'), ('email', 'Email')],
        help_text="Type of identifier"
    )

    count = models.IntegerField(
        default=0,
        help_text="Number of submissions"
    )

    window_start = models.DateTimeField(
        help_text="Start of the rate limit window"
    )

    last_submission = models.DateTimeField(
        auto_now=True,
        help_text="Last submission time"
    )

    class Meta:
        db_table = 'contact_form_rate_limits'
        unique_together = [['identifier', 'identifier_type']]
        verbose_name = 'Contact Form Rate Limit'
        verbose_name_plural = 'Contact Form Rate Limits'

    def __str__(self):
        return f"{self.identifier_type}: {self.identifier} ({self.count} submissions)"
