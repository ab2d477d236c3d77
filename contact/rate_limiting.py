"""
Rate Limiting Utilities for Contact Form

Prevents spam and abuse of the contact form.
"""
from collections.abc import Mapping
from functools import wraps
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.response import Response
from rest_framework import status

from .enrichment import get_client_ip
from .models import ContactFormRateLimit


def check_rate_limit(identifier, identifier_type, max_count, window_hours):
    """
    Check if identifier has exceeded rate limit.

    Args:
        identifier: IP address or email
        identifier_type: 'ip' or 'email'
        max_count: Maximum allowed submissions
        window_hours: Time window in hours

    Returns:
        tuple: (is_allowed, retry_after_seconds)
    """
    now = timezone.now()
    window_start = now - timedelta(hours=window_hours)

    rate_limit, created = ContactFormRateLimit.objects.get_or_create(
        identifier=identifier,
        identifier_type=identifier_type,
        defaults={'count': 0, 'window_start': now}
    )

    if created:
        return True, 0

    # Window expired: start a new one
    if rate_limit.window_start < window_start:
        rate_limit.count = 0
        rate_limit.window_start = now
        rate_limit.save()

    if rate_limit.count >= max_count:
        window_end = rate_limit.window_start + timedelta(hours=window_hours)
        retry_after = (window_end - now).total_seconds()
        return False, int(retry_after)

    return True, 0


def increment_rate_limit(identifier, identifier_type):
    """Increment the rate limit counter."""
    with transaction.atomic():
        rate_limit, created = ContactFormRateLimit.objects.select_for_update().get_or_create(
            identifier=identifier,
            identifier_type=identifier_type,
            defaults={'count': 0, 'window_start': timezone.now()}
        )
        rate_limit.count += 1
        rate_limit.save()


def _too_many(message, retry_after):
    return Response(
        {
            'success': False,
            'error': message,
            'retry_after': retry_after
        },
        status=status.HTTP_429_TOO_MANY_REQUESTS,
        headers={'Retry-After': str(retry_after)}
    )


def rate_limit_contact_form(max_per_hour=None, max_per_day_email=None):
    """
    Decorator for rate limiting contact form submissions.

    Args:
        max_per_hour: Maximum submissions per IP per hour
        max_per_day_email: Maximum submissions per email per day

    Limits default to CONTACT_FORM_RATE_LIMIT_PER_HOUR and
    CONTACT_FORM_RATE_LIMIT_PER_DAY.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapped_view(self, request, *args, **kwargs):
            per_hour = max_per_hour or settings.CONTACT_FORM_RATE_LIMIT_PER_HOUR
            per_day = max_per_day_email or settings.CONTACT_FORM_RATE_LIMIT_PER_DAY

            ip = get_client_ip(request)
            # Non-object bodies are left for the serializer to reject
            email = request.data.get('email') if isinstance(request.data, Mapping) else None
            if isinstance(email, str):
                email = email.strip().lower() or None
            else:
                email = None

            ip_allowed, ip_retry = check_rate_limit(ip, 'ip', per_hour, 1)
            if not ip_allowed:
                return _too_many('Too many submissions. Please try again later.', ip_retry)

            if email:
                email_allowed, email_retry = check_rate_limit(email, 'email', per_day, 24)
                if not email_allowed:
                    return _too_many(
                        'Too many submissions from this email. Please try again tomorrow.',
                        email_retry
                    )

            response = view_func(self, request, *args, **kwargs)

            # Only successful submissions count against the limits
            if status.is_success(response.status_code):
                increment_rate_limit(ip, 'ip')
                if email:
                    increment_rate_limit(email, 'email')

            return response

        return wrapped_view
    return decorator
