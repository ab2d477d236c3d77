"""
Contact Management Serializers

Serializers for contact form submissions and dashboard management.
"""
from rest_framework import serializers
from django.utils.html import strip_tags
from .models import ContactSubmission


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Validates and sanitizes user input from the contact form.
    """

    name = serializers.CharField(
        max_length=100,
        required=True,
        help_text="Name of the person contacting us"
    )

    email = serializers.EmailField(
        max_length=100,
        required=True,
        help_text="Valid email address for follow-up"
    )

    subject = serializers.CharField(
        max_length=200,
        required=True,
        help_text="Subject line of the inquiry"
    )

    message = serializers.CharField(
        max_length=2000,
        required=True,
        help_text="Message content (up to 2000 characters)"
    )

    # Honeypot field for spam prevention (should be empty)
    website = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        help_text="Honeypot field - should be empty"
    )

    def _clean_text(self, value):
        value = strip_tags(value).strip()
        if not value:
            raise serializers.ValidationError("This field may not be blank.")
        return value

    def validate_name(self, value):
        return self._clean_text(value)

    def validate_subject(self, value):
        return self._clean_text(value)

    def validate_message(self, value):
        return self._clean_text(value)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_website(self, value):
        """Honeypot validation - should be empty."""
        if value:
            raise serializers.ValidationError("Spam detected")
        return value


class ContactSubmissionSerializer(serializers.ModelSerializer):
    """
    Full submission record as shown in the dashboard table and detail modal.
    """

    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )

    class Meta:
        model = ContactSubmission
        fields = [
            'id', 'name', 'email', 'subject', 'message',
            'status', 'status_display', 'ip_address', 'user_agent',
            'location', 'notes', 'replied_at', 'created_at'
        ]
        read_only_fields = fields


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ContactSubmission.STATUS_CHOICES)


class NotesUpdateSerializer(serializers.Serializer):
    notes = serializers.CharField(
        max_length=1000,
        allow_blank=True,
        trim_whitespace=False
    )


class BulkDeleteSerializer(serializers.Serializer):
    ids = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=False,
        help_text="Submission ids to delete"
    )


class SubmissionStatsSerializer(serializers.Serializer):
    """
    Serializer for submission statistics.
    """

    total = serializers.IntegerField()
    new = serializers.IntegerField()
    contacted = serializers.IntegerField()
    quoted = serializers.IntegerField()
    closed = serializers.IntegerField()
    last_7_days = serializers.IntegerField()
    this_month = serializers.IntegerField()
    recent_submissions = ContactSubmissionSerializer(many=True)
