"""
Project URL Configuration
"""
from django.urls import path
from .views import (
    MilestoneUpdateView,
    ProjectDetailView,
    ProjectFromSubmissionView,
    ProjectListCreateView,
)

app_name = 'projects'

urlpatterns = [
    path('', ProjectListCreateView.as_view(), name='list'),
    path('from-submission/<uuid:id>/', ProjectFromSubmissionView.as_view(), name='from-submission'),
    path('<uuid:id>/', ProjectDetailView.as_view(), name='detail'),
    path('<uuid:id>/milestones/<int:index>/', MilestoneUpdateView.as_view(), name='milestone'),
]
