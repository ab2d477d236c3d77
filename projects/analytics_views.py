"""
Dashboard Analytics Views

GET /api/dashboard/activity/
GET /api/dashboard/charts/<type>/
"""
from rest_framework.response import Response
from rest_framework.views import APIView

from contact.permissions import IsDashboardOperator
from core.exceptions import ValidationError
from .analytics import DashboardAnalyticsService


def _int_param(request, name, default, minimum, maximum):
    raw = request.query_params.get(name)
    if raw in (None, ''):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"Invalid {name}", detail=f"'{raw}' is not a number")
    if not minimum <= value <= maximum:
        raise ValidationError(f"Invalid {name}", detail=f"{name} must be between {minimum} and {maximum}")
    return value


class DashboardActivityView(APIView):
    """
    Recent activity feed.

    Query Parameters:
    - limit: number of entries (default 10, max 100)
    """

    permission_classes = [IsDashboardOperator]

    def get(self, request):
        limit = _int_param(request, 'limit', 10, 1, 100)
        service = DashboardAnalyticsService()
        return Response({
            'success': True,
            'data': service.recent_activity(limit=limit)
        })


class DashboardChartView(APIView):
    """
    Chart data.

    Types:
    - contacts: submissions per day over `period` days (default 30)
    - projects: project count per status
    - revenue: budget and paid totals per month
    """

    permission_classes = [IsDashboardOperator]

    def get(self, request, chart_type):
        if chart_type not in DashboardAnalyticsService.CHART_TYPES:
            raise ValidationError(
                'Invalid chart type',
                detail=f"Chart type must be one of: {', '.join(DashboardAnalyticsService.CHART_TYPES)}"
            )

        period = _int_param(request, 'period', 30, 1, 365)
        service = DashboardAnalyticsService()
        return Response({
            'success': True,
            'data': service.chart(chart_type, period=period)
        })
