"""
Contact Management Signals

Django signals for contact-related events.
"""
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import ContactSubmission

logger = logging.getLogger(__name__)


@receiver(post_save, sender=ContactSubmission)
def contact_submission_post_save(sender, instance, created, **kwargs):
    """Log new contact submissions."""
    if created:
        logger.info(
            f"New contact submission {instance.id} from {instance.email} "
            f"(ip={instance.ip_address}, location={instance.location})"
        )


@receiver(post_delete, sender=ContactSubmission)
def contact_submission_post_delete(sender, instance, **kwargs):
    logger.info(f"Contact submission {instance.id} deleted")
