"""
Dashboard Analytics Service

Activity feed and chart aggregates over contact submissions and projects.
"""
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce, TruncDate, TruncMonth
from django.utils import timezone

from contact.models import ContactSubmission
from .models import Project

ZERO = Value(Decimal('0.00'), output_field=DecimalField(max_digits=12, decimal_places=2))


class DashboardAnalyticsService:
    """
    Usage:
        service = DashboardAnalyticsService()
        feed = service.recent_activity(limit=5)
        series = service.chart('contacts', period=30)
    """

    CHART_TYPES = ('contacts', 'projects', 'revenue')

    def recent_activity(self, limit=10):
        """
        Newest submissions and most recently updated projects, merged
        newest first and cut to `limit` entries.
        """
        submissions = ContactSubmission.objects.order_by('-created_at')[:limit]
        projects = Project.objects.order_by('-updated_at')[:limit]

        activity = [
            {
                'id': str(submission.id),
                'type': 'contact',
                'title': f"New contact from {submission.name}",
                'subtitle': submission.subject,
                'status': submission.status,
                'date': submission.created_at,
                'priority': 'medium',
            }
            for submission in submissions
        ] + [
            {
                'id': str(project.id),
                'type': 'project',
                'title': f"Project: {project.title}",
                'subtitle': f"Client: {project.client_name}",
                'status': project.status,
                'date': project.updated_at,
                'priority': project.priority,
            }
            for project in projects
        ]

        activity.sort(key=lambda item: item['date'], reverse=True)
        return activity[:limit]

    def contacts_per_day(self, days=30):
        since = timezone.now() - timedelta(days=days)
        rows = (
            ContactSubmission.objects
            .filter(created_at__gte=since)
            .annotate(day=TruncDate('created_at'))
            .values('day')
            .annotate(count=Count('id'))
            .order_by('day')
        )
        return [{'date': row['day'].isoformat(), 'count': row['count']} for row in rows]

    def project_status_distribution(self):
        rows = Project.objects.values('status').annotate(count=Count('id')).order_by('status')
        return [{'status': row['status'], 'count': row['count']} for row in rows]

    def monthly_revenue(self):
        rows = (
            Project.objects
            .annotate(month=TruncMonth('created_at'))
            .values('month')
            .annotate(
                budget=Coalesce(Sum('budget'), ZERO),
                paid=Coalesce(Sum('paid'), ZERO),
                count=Count('id'),
            )
            .order_by('month')
        )
        return [
            {
                'month': row['month'].strftime('%Y-%m'),
                'budget': str(row['budget']),
                'paid': str(row['paid']),
                'count': row['count'],
            }
            for row in rows
        ]

    def chart(self, chart_type, period=30):
        if chart_type == 'contacts':
            return self.contacts_per_day(days=period)
        if chart_type == 'projects':
            return self.project_status_distribution()
        if chart_type == 'revenue':
            return self.monthly_revenue()
        raise ValueError(f"Unknown chart type: {chart_type}")
