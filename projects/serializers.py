"""
Project Serializers
"""
from django.db import transaction
from rest_framework import serializers

from .models import Milestone, Project


class MilestoneSerializer(serializers.ModelSerializer):

    class Meta:
        model = Milestone
        fields = ['position', 'name', 'description', 'due_date', 'completed', 'completed_date']
        read_only_fields = ['position']


class ProjectSerializer(serializers.ModelSerializer):
    """
    Full project record. `milestones` is written as a whole list; sending
    it on update replaces the existing milestones.
    """

    status_display = serializers.CharField(source='get_status_display', read_only=True)
    balance_due = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)
    milestones = MilestoneSerializer(many=True, required=False)

    class Meta:
        model = Project
        fields = [
            'id', 'title', 'description', 'client_name', 'client_email',
            'client_company', 'project_type', 'status', 'status_display',
            'priority', 'budget', 'paid', 'balance_due', 'start_date',
            'due_date', 'completed_date', 'is_overdue', 'technologies',
            'milestones', 'notes', 'source_submission', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'completed_date', 'source_submission', 'created_at', 'updated_at']

    def validate_technologies(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Technologies must be a list of strings")
        return value

    def validate(self, attrs):
        budget = attrs.get('budget', getattr(self.instance, 'budget', None))
        paid = attrs.get('paid', getattr(self.instance, 'paid', None))
        if budget is not None and paid is not None and paid > budget:
            raise serializers.ValidationError({'paid': "Paid amount cannot exceed the budget"})

        start_date = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        due_date = attrs.get('due_date', getattr(self.instance, 'due_date', None))
        if start_date and due_date and due_date < start_date:
            raise serializers.ValidationError({'due_date': "Due date cannot be before the start date"})

        return attrs

    def _write_milestones(self, project, milestones):
        project.milestones.all().delete()
        for position, data in enumerate(milestones):
            Milestone.objects.create(project=project, position=position, **data)

    @transaction.atomic
    def create(self, validated_data):
        milestones = validated_data.pop('milestones', [])
        project = super().create(validated_data)
        self._write_milestones(project, milestones)
        return project

    @transaction.atomic
    def update(self, instance, validated_data):
        milestones = validated_data.pop('milestones', None)
        project = super().update(instance, validated_data)
        if milestones is not None:
            self._write_milestones(project, milestones)
        return project
