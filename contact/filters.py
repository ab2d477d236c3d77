"""
Contact Submission Filters

Free-text search and status filtering shared by the list and export views.
"""
import django_filters
from django.db.models import Q

from .models import ContactSubmission


class SubmissionFilter(django_filters.FilterSet):
    """
    Query Parameters:
    - query: case-insensitive substring of name, email, subject or message
    - search: alias of query
    - status: exact status, or 'all' for no status filter
    """

    query = django_filters.CharFilter(method='filter_query')
    search = django_filters.CharFilter(method='filter_query')
    status = django_filters.ChoiceFilter(
        choices=ContactSubmission.STATUS_CHOICES + [('all', 'All')],
        method='filter_status'
    )

    class Meta:
        model = ContactSubmission
        fields = ['query', 'search', 'status']

    def filter_query(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(email__icontains=value) |
            Q(subject__icontains=value) |
            Q(message__icontains=value)
        )

    def filter_status(self, queryset, name, value):
        if value == 'all':
            return queryset
        return queryset.filter(status=value)
