"""
Project Views

CRUD for projects plus converting a contact submission into a project.
"""
import logging
from collections.abc import Mapping

from django.db import transaction
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from contact.permissions import IsDashboardOperator
from contact.views import get_submission
from core.exceptions import NotFound, ValidationError
from .models import Project
from .serializers import MilestoneSerializer, ProjectSerializer

logger = logging.getLogger(__name__)


class ProjectObjectMixin:
    def get_object(self):
        try:
            project = Project.objects.get(id=self.kwargs['id'])
        except Project.DoesNotExist:
            raise NotFound('Project not found', resource_type='project')
        self.check_object_permissions(self.request, project)
        return project


class ProjectListCreateView(generics.ListCreateAPIView):
    """
    GET  /api/projects/
    POST /api/projects/

    Query Parameters:
    - search: Search in title, description, client name, email or company
    - status, priority, project_type: exact filters
    - ordering: created_at, due_date, budget (prefix '-' for descending)
    """

    permission_classes = [IsDashboardOperator]
    serializer_class = ProjectSerializer
    queryset = Project.objects.select_related('source_submission').prefetch_related('milestones')
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'priority', 'project_type']
    search_fields = ['title', 'description', 'client_name', 'client_email', 'client_company']
    ordering_fields = ['created_at', 'due_date', 'budget']
    ordering = ['-created_at']


class ProjectDetailView(ProjectObjectMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET    /api/projects/:id/
    PUT    /api/projects/:id/
    PATCH  /api/projects/:id/
    DELETE /api/projects/:id/
    """

    permission_classes = [IsDashboardOperator]
    serializer_class = ProjectSerializer

    def perform_destroy(self, instance):
        logger.info(f"Project {instance.id} deleted by {self.request.user}")
        instance.delete()


class ProjectFromSubmissionView(APIView):
    """
    Convert a contact submission into a project.

    POST /api/projects/from-submission/:id/

    Client details come from the submission; any project field in the body
    overrides the defaults. The submission is marked as quoted.
    """

    permission_classes = [IsDashboardOperator]

    def post(self, request, id):
        submission = get_submission(id)

        data = {
            'title': f"Project for {submission.name}",
            'description': submission.message,
            'client_name': submission.name,
            'client_email': submission.email,
        }
        if not isinstance(request.data, Mapping):
            raise ValidationError(
                'Validation failed',
                fields={'non_field_errors': ['Expected an object of project fields']}
            )
        data.update(request.data)

        serializer = ProjectSerializer(data=data)
        if not serializer.is_valid():
            raise ValidationError('Validation failed', fields=serializer.errors)

        with transaction.atomic():
            project = serializer.save(source_submission=submission)
            submission.set_status('quoted')

        logger.info(f"Project {project.id} created from submission {submission.id}")

        return Response(
            {
                'success': True,
                'message': 'Project created from submission successfully',
                'data': ProjectSerializer(project).data
            },
            status=status.HTTP_201_CREATED
        )


class MilestoneUpdateView(ProjectObjectMixin, APIView):
    """
    Update one milestone of a project.

    PUT /api/projects/:id/milestones/:index/

    `index` is the zero-based position in the project's milestone list.
    Only the fields sent are changed; marking a milestone completed stamps
    its completed date once.
    """

    permission_classes = [IsDashboardOperator]

    def put(self, request, id, index):
        project = self.get_object()

        milestones = list(project.milestones.all())
        if index >= len(milestones):
            raise NotFound('Milestone not found', resource_type='milestone')

        serializer = MilestoneSerializer(milestones[index], data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError('Validation failed', fields=serializer.errors)
        serializer.save()

        logger.info(f"Milestone {index} of project {project.id} updated by {request.user}")

        return Response({
            'success': True,
            'message': 'Milestone updated successfully',
            'data': ProjectSerializer(project).data
        })
