"""
Dashboard Analytics URL Configuration
"""
from django.urls import path
from .analytics_views import DashboardActivityView, DashboardChartView

app_name = 'dashboard'

urlpatterns = [
    path('activity/', DashboardActivityView.as_view(), name='activity'),
    path('charts/<str:chart_type>/', DashboardChartView.as_view(), name='charts'),
]
