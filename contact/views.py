"""
Contact Management Views

API endpoints for contact form submission and dashboard management.
"""
import logging
import uuid
from datetime import timedelta

from django.conf import settings
from django.db.models import Count
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from kombu.exceptions import OperationalError
from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFound, ValidationError
from .enrichment import enrich_request
from .exports import submissions_csv_response
from .filters import SubmissionFilter
from .models import ContactSubmission
from .permissions import IsDashboardOperator
from .rate_limiting import rate_limit_contact_form
from .serializers import (
    BulkDeleteSerializer,
    ContactFormSubmitSerializer,
    ContactSubmissionSerializer,
    NotesUpdateSerializer,
    StatusUpdateSerializer,
    SubmissionStatsSerializer,
)
from .tasks import send_staff_notification

logger = logging.getLogger(__name__)


def get_submission(submission_id):
    try:
        return ContactSubmission.objects.get(id=submission_id)
    except ContactSubmission.DoesNotExist:
        raise NotFound('Submission not found', resource_type='submission')


def status_counts():
    """Number of submissions per status across the whole store."""
    counts = {value: 0 for value, _ in ContactSubmission.STATUS_CHOICES}
    rows = ContactSubmission.objects.values('status').annotate(count=Count('id'))
    for row in rows:
        counts[row['status']] = row['count']
    counts['total'] = sum(counts.values())
    return counts


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact/

    No authentication required. Rate limited to prevent spam.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @rate_limit_contact_form()
    def post(self, request):
        """Submit a contact form."""
        serializer = ContactFormSubmitSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                {
                    'success': False,
                    'error': 'Validation failed',
                    'fields': serializer.errors
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        enrichment = enrich_request(request)

        submission = ContactSubmission.objects.create(
            name=serializer.validated_data['name'],
            email=serializer.validated_data['email'],
            subject=serializer.validated_data['subject'],
            message=serializer.validated_data['message'],
            **enrichment
        )

        try:
            send_staff_notification.delay(str(submission.id))
        except OperationalError as e:
            logger.warning(f"Could not queue staff notification for {submission.id}: {e}")

        return Response(
            {
                'success': True,
                'message': 'Contact form submitted successfully'
            },
            status=status.HTTP_200_OK
        )


class SubmissionPagination(PageNumberPagination):
    page_size_query_param = 'page_size'
    max_page_size = 200

    def get_page_size(self, request):
        self.page_size = settings.SUBMISSIONS_PAGE_SIZE
        return super().get_page_size(request)

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            'count': self.page.paginator.count,
            'pages': self.page.paginator.num_pages,
            'current_page': self.page.number,
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
            'stats': status_counts(),
        })


class SubmissionListView(generics.ListAPIView):
    """
    List contact submissions, newest first.

    GET /api/submissions/

    Query Parameters:
    - query: Search in name, email, subject or message
    - status: Filter by status (new, contacted, quoted, closed, all)
    - page: Page number (default: 1)
    - page_size: Items per page (default: SUBMISSIONS_PAGE_SIZE)
    """

    permission_classes = [IsDashboardOperator]
    serializer_class = ContactSubmissionSerializer
    pagination_class = SubmissionPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = SubmissionFilter

    def get_queryset(self):
        return ContactSubmission.objects.order_by('-created_at')


class SubmissionDetailView(APIView):
    """
    GET    /api/submissions/:id/
    DELETE /api/submissions/:id/
    """

    permission_classes = [IsDashboardOperator]

    def get(self, request, id):
        submission = get_submission(id)
        return Response(ContactSubmissionSerializer(submission).data)

    def delete(self, request, id):
        submission = get_submission(id)
        submission.delete()
        logger.info(f"Submission {id} deleted by {request.user}")
        return Response(status=status.HTTP_204_NO_CONTENT)


class SubmissionStatusView(APIView):
    """
    Update submission status.

    PATCH /api/submissions/:id/status/
    """

    permission_classes = [IsDashboardOperator]

    def patch(self, request, id):
        submission = get_submission(id)

        serializer = StatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(
                'Invalid status',
                detail=f"Status must be one of: {', '.join(v for v, _ in ContactSubmission.STATUS_CHOICES)}",
                fields=serializer.errors,
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
            )

        submission.set_status(serializer.validated_data['status'])
        return Response(ContactSubmissionSerializer(submission).data)


class SubmissionNotesView(APIView):
    """
    Overwrite submission notes.

    PATCH /api/submissions/:id/notes/
    """

    permission_classes = [IsDashboardOperator]

    def patch(self, request, id):
        submission = get_submission(id)

        serializer = NotesUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError('Invalid notes', fields=serializer.errors)

        submission.notes = serializer.validated_data['notes']
        submission.save(update_fields=['notes'])
        return Response(ContactSubmissionSerializer(submission).data)


class SubmissionBulkDeleteView(APIView):
    """
    Delete several submissions at once.

    POST /api/submissions/bulk-delete/

    Deletes whichever of the ids still exist and reports how many were
    actually removed. Not all-or-nothing.
    """

    permission_classes = [IsDashboardOperator]

    def post(self, request):
        serializer = BulkDeleteSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError('A non-empty list of submission ids is required', fields=serializer.errors)

        ids = serializer.validated_data['ids']
        _, per_model = ContactSubmission.objects.filter(id__in=ids).delete()
        deleted_count = per_model.get(ContactSubmission._meta.label, 0)

        logger.info(
            f"Bulk delete by {request.user}: {deleted_count} of {len(ids)} requested submissions removed"
        )

        return Response({
            'success': True,
            'deletedCount': deleted_count
        })


class SubmissionExportView(APIView):
    """
    Export submissions as CSV.

    GET /api/submissions/export/?ids=<id>,<id>
    GET /api/submissions/export/?query=&status=

    With ids, exports those that still exist; otherwise exports everything
    matching the current search and status filter.
    """

    permission_classes = [IsDashboardOperator]

    def _parse_ids(self, request):
        raw = []
        for value in request.query_params.getlist('ids'):
            raw.extend(part.strip() for part in value.split(',') if part.strip())

        ids = []
        for value in raw:
            try:
                ids.append(uuid.UUID(value))
            except ValueError:
                raise ValidationError('Invalid submission id', detail=f"'{value}' is not a valid id")
        return ids

    def get(self, request):
        queryset = ContactSubmission.objects.order_by('-created_at')

        if 'ids' in request.query_params:
            ids = self._parse_ids(request)
            queryset = queryset.filter(id__in=ids)
            prefix = 'selected-submissions'
        else:
            filterset = SubmissionFilter(request.query_params, queryset=queryset)
            if not filterset.is_valid():
                raise ValidationError('Invalid filter', fields=filterset.errors)
            queryset = filterset.qs
            prefix = 'submissions'

        return submissions_csv_response(queryset.iterator(), prefix=prefix)


class SubmissionStatsView(APIView):
    """
    Get submission statistics.

    GET /api/submissions/stats/
    """

    permission_classes = [IsDashboardOperator]

    def get(self, request):
        now = timezone.now()
        start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        stats = status_counts()
        stats['last_7_days'] = ContactSubmission.objects.filter(
            created_at__gte=now - timedelta(days=7)
        ).count()
        stats['this_month'] = ContactSubmission.objects.filter(
            created_at__gte=start_of_month
        ).count()
        stats['recent_submissions'] = ContactSubmission.objects.order_by('-created_at')[:10]

        serializer = SubmissionStatsSerializer(stats)
        return Response(serializer.data)
