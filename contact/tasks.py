"""
Contact Management Email Tasks

Celery tasks for sending contact-related emails.
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from .models import ContactSubmission

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def send_staff_notification(self, submission_id):
    """
    Send notification email to staff about a new contact submission.

    Args:
        submission_id: UUID of the ContactSubmission
    """
    try:
        submission = ContactSubmission.objects.get(id=submission_id)
    except ContactSubmission.DoesNotExist:
        return f"Contact submission {submission_id} not found"

    city, region, country = submission.location_parts()
    subject = f"New Contact Form Submission - {submission.subject}"

    text_content = f"""New contact form submission received:

From: {submission.name} ({submission.email})
Subject: {submission.subject}
Received: {submission.created_at.strftime('%Y-%m-%d %H:%M:%S')}
IP Address: {submission.ip_address}
Location: {city}, {region}, {country}

Message:
{submission.message}

---

View and respond: {settings.ADMIN_URL}/dashboard?submission={submission.id}
"""

    try:
        send_mail(
            subject=subject,
            message=text_content,
            from_email=settings.CONTACT_EMAIL_FROM,
            recipient_list=[settings.CONTACT_EMAIL_TO],
            fail_silently=False
        )
    except Exception as exc:
        logger.warning(f"Staff notification for {submission_id} failed, retrying: {exc}")
        raise self.retry(exc=exc, countdown=60)

    return f"Staff notification sent for {submission.id}"
