from django.contrib import admin
from .models import Milestone, Project


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0
    fields = ['position', 'name', 'due_date', 'completed', 'completed_date']


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['title', 'client_name', 'project_type', 'status', 'priority', 'budget', 'paid', 'due_date']
    list_filter = ['status', 'priority', 'project_type']
    search_fields = ['title', 'client_name', 'client_email', 'client_company']
    readonly_fields = ['id', 'completed_date', 'created_at', 'updated_at']
    raw_id_fields = ['source_submission']
    inlines = [MilestoneInline]
