"""
URL configuration for the Panchroma backend.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from contact.urls import public_urlpatterns as contact_public_urls
from contact.urls import admin_urlpatterns as contact_admin_urls

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('api/contact/', include((contact_public_urls, 'contact'))),  # Public contact form (no auth)
    path('api/submissions/', include((contact_admin_urls, 'submissions'))),  # Dashboard submissions management
    path('api/projects/', include('projects.urls')),  # Dashboard projects management
    path('api/dashboard/', include('projects.analytics_urls')),  # Dashboard activity feed and charts
]
