"""
Contact Management Django Admin Configuration
"""
from django.contrib import admin
from .models import ContactSubmission, ContactFormRateLimit


@admin.register(ContactSubmission)
class ContactSubmissionAdmin(admin.ModelAdmin):
    """Admin interface for contact submissions."""

    list_display = [
        'name', 'email', 'subject', 'status', 'ip_address',
        'location_display', 'created_at'
    ]

    list_filter = [
        'status', 'created_at'
    ]

    search_fields = [
        'name', 'email', 'subject', 'message', 'notes'
    ]

    readonly_fields = [
        'id', 'name', 'email', 'subject', 'message', 'ip_address',
        'user_agent', 'location', 'replied_at', 'created_at'
    ]

    fieldsets = (
        ('Contact Information', {
            'fields': ('name', 'email', 'subject', 'message')
        }),
        ('Status & Notes', {
            'fields': ('status', 'notes', 'replied_at')
        }),
        ('Enrichment', {
            'fields': ('ip_address', 'location', 'user_agent'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('id', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def location_display(self, obj):
        return ', '.join(dict.fromkeys(obj.location_parts()))
    location_display.short_description = 'Location'

    def has_add_permission(self, request):
        """Submissions only come from the public form."""
        return False


@admin.register(ContactFormRateLimit)
class ContactFormRateLimitAdmin(admin.ModelAdmin):
    """Admin interface for rate limiting."""

    list_display = [
        'identifier', 'identifier_type', 'count',
        'window_start', 'last_submission'
    ]

    list_filter = [
        'identifier_type', 'window_start'
    ]

    search_fields = [
        'identifier'
    ]

    readonly_fields = [
        'identifier', 'identifier_type', 'count',
        'window_start', 'last_submission'
    ]

    def has_add_permission(self, request):
        """Disable manual creation."""
        return False
