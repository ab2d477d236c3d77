"""
Contact Management URL Configuration
"""
from django.urls import path
from .views import (
    ContactFormSubmitView,
    SubmissionListView,
    SubmissionDetailView,
    SubmissionStatusView,
    SubmissionNotesView,
    SubmissionBulkDeleteView,
    SubmissionExportView,
    SubmissionStatsView,
)

app_name = 'contact'

# Public URLs (no auth required)
public_urlpatterns = [
    path('', ContactFormSubmitView.as_view(), name='submit'),
]

# Dashboard URLs (operator auth required)
admin_urlpatterns = [
    path('', SubmissionListView.as_view(), name='list'),
    path('stats/', SubmissionStatsView.as_view(), name='stats'),
    path('export/', SubmissionExportView.as_view(), name='export'),
    path('bulk-delete/', SubmissionBulkDeleteView.as_view(), name='bulk-delete'),
    path('<uuid:id>/', SubmissionDetailView.as_view(), name='detail'),
    path('<uuid:id>/status/', SubmissionStatusView.as_view(), name='status'),
    path('<uuid:id>/notes/', SubmissionNotesView.as_view(), name='notes'),
]

urlpatterns = public_urlpatterns
