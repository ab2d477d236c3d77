"""
Tests for contact submissions: public form, dashboard triage, bulk
delete and CSV export.
"""
import csv
import io
import uuid
from datetime import timedelta
from unittest.mock import patch, Mock

import pytest
from django.core import mail
from django.db import DatabaseError
from django.utils import timezone
from rest_framework import status

from contact.exports import EXPORT_COLUMNS
from contact.models import ContactSubmission, ContactFormRateLimit, LOCATION_LOCAL, LOCATION_UNKNOWN
from contact.tasks import send_staff_notification

pytestmark = pytest.mark.django_db

SUBMIT_URL = '/api/contact/'
LIST_URL = '/api/submissions/'


def valid_form(**overrides):
    data = {
        'name': 'Priya Sharma',
        'email': 'Priya@Example.com',
        'subject': 'E-commerce site',
        'message': 'We need an online store for our handloom business.',
    }
    data.update(overrides)
    return data


def geo_response(**overrides):
    payload = {
        'status': 'success',
        'city': 'Hyderabad',
        'regionName': 'Telangana',
        'country': 'India',
        'lat': 17.38,
        'lon': 78.46,
    }
    payload.update(overrides)
    response = Mock(status_code=200)
    response.json.return_value = payload
    return response


def read_csv(response):
    return list(csv.reader(io.StringIO(response.content.decode())))


class TestContactFormSubmission:
    """Test public contact form submission"""

    def test_submit_valid_contact_form(self, api_client):
        response = api_client.post(SUBMIT_URL, valid_form(), format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'success': True,
            'message': 'Contact form submitted successfully'
        }

        submission = ContactSubmission.objects.get()
        assert submission.name == 'Priya Sharma'
        assert submission.email == 'priya@example.com'
        assert submission.status == 'new'
        assert submission.notes == ''

    def test_loopback_address_is_local(self, api_client):
        with patch('contact.enrichment.requests.get') as mock_get:
            api_client.post(SUBMIT_URL, valid_form(), format='json', REMOTE_ADDR='127.0.0.1')

        mock_get.assert_not_called()
        submission = ContactSubmission.objects.get()
        assert submission.ip_address == '127.0.0.1'
        assert submission.location == LOCATION_LOCAL

    def test_routable_address_is_geolocated(self, api_client):
        with patch('contact.enrichment.requests.get', return_value=geo_response()) as mock_get:
            response = api_client.post(
                SUBMIT_URL, valid_form(), format='json',
                REMOTE_ADDR='10.0.0.2', HTTP_X_FORWARDED_FOR='49.36.1.1, 10.0.0.1'
            )

        assert response.status_code == status.HTTP_200_OK
        mock_get.assert_called_once()
        assert mock_get.call_args[0][0] == 'http://geo.test/json/49.36.1.1'
        assert mock_get.call_args[1]['timeout'] == 2

        submission = ContactSubmission.objects.get()
        assert submission.ip_address == '49.36.1.1'
        assert submission.location == {
            'city': 'Hyderabad',
            'region': 'Telangana',
            'country': 'India',
            'lat': 17.38,
            'lng': 78.46,
        }

    def test_geolocation_failure_stores_unknown(self, api_client):
        import requests

        with patch('contact.enrichment.requests.get', side_effect=requests.exceptions.Timeout):
            response = api_client.post(SUBMIT_URL, valid_form(), format='json', REMOTE_ADDR='8.8.8.8')

        assert response.status_code == status.HTTP_200_OK
        assert ContactSubmission.objects.get().location == LOCATION_UNKNOWN

    def test_malformed_provider_payload_stores_unknown(self, api_client):
        response = Mock(status_code=200)
        response.json.return_value = []

        with patch('contact.enrichment.requests.get', return_value=response):
            result = api_client.post(SUBMIT_URL, valid_form(), format='json', REMOTE_ADDR='8.8.8.8')

        assert result.status_code == status.HTTP_200_OK
        assert ContactSubmission.objects.get().location == LOCATION_UNKNOWN

    def test_user_agent_is_recorded(self, api_client):
        api_client.post(SUBMIT_URL, valid_form(), format='json', HTTP_USER_AGENT='Mozilla/5.0 Test')

        assert ContactSubmission.objects.get().user_agent == 'Mozilla/5.0 Test'

    def test_submit_missing_required_fields(self, api_client):
        response = api_client.post(SUBMIT_URL, {'name': 'Priya'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert response.data['error'] == 'Validation failed'
        assert 'email' in response.data['fields']
        assert 'message' in response.data['fields']
        assert ContactSubmission.objects.count() == 0

    def test_submit_non_object_body(self, api_client):
        response = api_client.post(SUBMIT_URL, [{'name': 'Priya'}], format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Validation failed'
        assert ContactSubmission.objects.count() == 0

    def test_submit_invalid_email(self, api_client):
        response = api_client.post(SUBMIT_URL, valid_form(email='not-an-email'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data['fields']

    def test_submit_message_too_long(self, api_client):
        response = api_client.post(SUBMIT_URL, valid_form(message='x' * 2001), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'message' in response.data['fields']

    def test_html_only_name_is_rejected(self, api_client):
        response = api_client.post(SUBMIT_URL, valid_form(name='<b></b>'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name' in response.data['fields']

    def test_honeypot_spam_detection(self, api_client):
        response = api_client.post(SUBMIT_URL, valid_form(website='http://spam.example'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert ContactSubmission.objects.count() == 0

    def test_staff_notification_sent(self, api_client):
        api_client.post(SUBMIT_URL, valid_form(), format='json')

        assert len(mail.outbox) == 1
        assert mail.outbox[0].subject == 'New Contact Form Submission - E-commerce site'
        assert mail.outbox[0].to == ['hello@panchroma.ca']


class TestRateLimiting:
    """Test rate limiting on contact form"""

    def test_rate_limit_per_hour(self, api_client, settings):
        settings.CONTACT_FORM_RATE_LIMIT_PER_HOUR = 2

        for i in range(2):
            response = api_client.post(SUBMIT_URL, valid_form(email=f'user{i}@example.com'), format='json')
            assert response.status_code == status.HTTP_200_OK

        response = api_client.post(SUBMIT_URL, valid_form(email='user9@example.com'), format='json')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data['success'] is False
        assert int(response['Retry-After']) > 0
        assert ContactSubmission.objects.count() == 2

    def test_rate_limit_per_email(self, api_client, settings):
        settings.CONTACT_FORM_RATE_LIMIT_PER_DAY = 1

        first = api_client.post(SUBMIT_URL, valid_form(), format='json')
        second = api_client.post(SUBMIT_URL, valid_form(), format='json', REMOTE_ADDR='10.1.1.1')

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_failed_submissions_do_not_count(self, api_client, settings):
        settings.CONTACT_FORM_RATE_LIMIT_PER_HOUR = 1

        api_client.post(SUBMIT_URL, valid_form(email='bad'), format='json')
        response = api_client.post(SUBMIT_URL, valid_form(), format='json')

        assert response.status_code == status.HTTP_200_OK

    def test_expired_window_resets(self, api_client, settings):
        settings.CONTACT_FORM_RATE_LIMIT_PER_HOUR = 1
        ContactFormRateLimit.objects.create(
            identifier='127.0.0.1',
            identifier_type='ip',
            count=5,
            window_start=timezone.now() - timedelta(hours=2)
        )

        response = api_client.post(SUBMIT_URL, valid_form(), format='json')

        assert response.status_code == status.HTTP_200_OK


class TestSubmissionAccess:

    def test_unauthenticated_access(self, api_client):
        response = api_client.get(LIST_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['success'] is False

    def test_non_staff_access_denied(self, api_client, regular_user):
        api_client.force_authenticate(user=regular_user)

        response = api_client.get(LIST_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_token_login(self, api_client, operator):
        response = api_client.post(
            '/api/auth/token/',
            {'username': 'operator', 'password': 'testpass123'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        token = response.data['access']

        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        assert api_client.get(LIST_URL).status_code == status.HTTP_200_OK


class TestSubmissionList:

    def test_list_newest_first(self, operator_client, make_submission):
        old = make_submission(name='Old', created_at=timezone.now() - timedelta(days=3))
        new = make_submission(name='New')

        response = operator_client.get(LIST_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['count'] == 2
        assert [row['id'] for row in response.data['results']] == [str(new.id), str(old.id)]

    def test_list_includes_stats(self, operator_client, make_submission):
        make_submission()
        make_submission(status='contacted')

        response = operator_client.get(LIST_URL, {'status': 'contacted'})

        assert response.data['count'] == 1
        assert response.data['stats'] == {
            'new': 1, 'contacted': 1, 'quoted': 0, 'closed': 0, 'total': 2
        }

    def test_filter_by_status(self, operator_client, make_submission):
        make_submission(status='quoted')
        make_submission(status='closed')

        response = operator_client.get(LIST_URL, {'status': 'quoted'})

        assert len(response.data['results']) == 1
        assert response.data['results'][0]['status'] == 'quoted'

    def test_status_all_returns_everything(self, operator_client, make_submission):
        make_submission(status='quoted')
        make_submission(status='closed')

        response = operator_client.get(LIST_URL, {'status': 'all'})

        assert response.data['count'] == 2

    def test_invalid_status_filter(self, operator_client):
        response = operator_client.get(LIST_URL, {'status': 'archived'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search_functionality(self, operator_client, make_submission):
        make_submission(subject='Logo design')
        make_submission(email='shop@bakery.ca', subject='Hello')
        make_submission(message='Need help with SEO')

        assert operator_client.get(LIST_URL, {'query': 'LOGO'}).data['count'] == 1
        assert operator_client.get(LIST_URL, {'query': 'bakery'}).data['count'] == 1
        assert operator_client.get(LIST_URL, {'query': 'seo'}).data['count'] == 1
        assert operator_client.get(LIST_URL, {'query': 'nothing-matches'}).data['count'] == 0

    def test_pagination(self, operator_client, make_submission):
        for i in range(5):
            make_submission(name=f'Client {i}')

        response = operator_client.get(LIST_URL, {'page_size': 2, 'page': 3})

        assert response.data['pages'] == 3
        assert response.data['current_page'] == 3
        assert len(response.data['results']) == 1


class TestSubmissionDetail:

    def test_get_submission(self, operator_client, sample_submission):
        response = operator_client.get(f'{LIST_URL}{sample_submission.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'John Doe'
        assert response.data['location']['city'] == 'Hyderabad'
        assert response.data['status_display'] == 'New'

    def test_get_missing_submission(self, operator_client):
        response = operator_client.get(f'{LIST_URL}{uuid.uuid4()}/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['success'] is False
        assert response.data['error'] == 'Submission not found'

    def test_delete_submission_twice(self, operator_client, sample_submission):
        url = f'{LIST_URL}{sample_submission.id}/'

        first = operator_client.delete(url)
        second = operator_client.delete(url)

        assert first.status_code == status.HTTP_204_NO_CONTENT
        assert second.status_code == status.HTTP_404_NOT_FOUND
        assert ContactSubmission.objects.count() == 0


class TestSubmissionUpdate:

    def test_update_status(self, operator_client, sample_submission):
        response = operator_client.patch(
            f'{LIST_URL}{sample_submission.id}/status/', {'status': 'contacted'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'contacted'
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'contacted'
        assert sample_submission.replied_at is not None

    def test_replied_at_set_once(self, operator_client, sample_submission):
        url = f'{LIST_URL}{sample_submission.id}/status/'
        operator_client.patch(url, {'status': 'contacted'}, format='json')
        sample_submission.refresh_from_db()
        first_reply = sample_submission.replied_at

        operator_client.patch(url, {'status': 'quoted'}, format='json')
        operator_client.patch(url, {'status': 'contacted'}, format='json')

        sample_submission.refresh_from_db()
        assert sample_submission.replied_at == first_reply

    def test_invalid_status(self, operator_client, sample_submission):
        response = operator_client.patch(
            f'{LIST_URL}{sample_submission.id}/status/', {'status': 'archived'}, format='json'
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data['success'] is False
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'new'

    def test_status_of_missing_submission(self, operator_client):
        response = operator_client.patch(
            f'{LIST_URL}{uuid.uuid4()}/status/', {'status': 'archived'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_notes_are_overwritten(self, operator_client, sample_submission):
        url = f'{LIST_URL}{sample_submission.id}/notes/'

        operator_client.patch(url, {'notes': 'Called, left voicemail'}, format='json')
        response = operator_client.patch(url, {'notes': 'Sent quote'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notes'] == 'Sent quote'
        sample_submission.refresh_from_db()
        assert sample_submission.notes == 'Sent quote'

    def test_notes_of_missing_submission(self, operator_client):
        response = operator_client.patch(
            f'{LIST_URL}{uuid.uuid4()}/notes/', {'notes': 'Called back'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Submission not found'

    def test_notes_can_be_cleared(self, operator_client, make_submission):
        submission = make_submission(notes='Old note')

        operator_client.patch(f'{LIST_URL}{submission.id}/notes/', {'notes': ''}, format='json')

        submission.refresh_from_db()
        assert submission.notes == ''

    def test_notes_too_long(self, operator_client, sample_submission):
        response = operator_client.patch(
            f'{LIST_URL}{sample_submission.id}/notes/', {'notes': 'x' * 1001}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestBulkDelete:

    url = f'{LIST_URL}bulk-delete/'

    def test_bulk_delete(self, operator_client, make_submission):
        a, b, c = make_submission(), make_submission(), make_submission()

        response = operator_client.post(self.url, {'ids': [str(a.id), str(b.id)]}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'success': True, 'deletedCount': 2}
        assert list(ContactSubmission.objects.values_list('id', flat=True)) == [c.id]

    def test_repeated_bulk_delete_reports_zero(self, operator_client, make_submission):
        ids = [str(make_submission().id), str(make_submission().id)]

        operator_client.post(self.url, {'ids': ids}, format='json')
        response = operator_client.post(self.url, {'ids': ids}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deletedCount'] == 0

    def test_missing_ids_are_skipped(self, operator_client, make_submission):
        existing = make_submission()

        response = operator_client.post(
            self.url, {'ids': [str(existing.id), str(uuid.uuid4())]}, format='json'
        )

        assert response.data['deletedCount'] == 1

    def test_empty_ids_rejected(self, operator_client):
        response = operator_client.post(self.url, {'ids': []}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False

    def test_requires_operator(self, api_client, sample_submission):
        response = api_client.post(self.url, {'ids': [str(sample_submission.id)]}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert ContactSubmission.objects.count() == 1


class TestExport:

    url = f'{LIST_URL}export/'

    def test_export_selected(self, operator_client, make_submission):
        a = make_submission(name='Alpha')
        b = make_submission(name='Beta', location=LOCATION_LOCAL, ip_address='127.0.0.1')
        make_submission(name='Gamma')

        response = operator_client.get(self.url, {'ids': f'{a.id},{b.id}'})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'text/csv'
        assert 'attachment; filename="selected-submissions_' in response['Content-Disposition']

        rows = read_csv(response)
        assert rows[0] == EXPORT_COLUMNS
        assert len(rows) == 3
        by_name = {row[0]: row for row in rows[1:]}
        assert by_name['Alpha'][6:9] == ['Hyderabad', 'Telangana', 'India']
        assert by_name['Beta'][5:9] == ['127.0.0.1', 'Local', 'Local', 'Local']

    def test_export_skips_deleted_ids(self, operator_client, make_submission):
        existing = make_submission()

        response = operator_client.get(self.url, {'ids': f'{existing.id},{uuid.uuid4()}'})

        assert len(read_csv(response)) == 2

    def test_export_invalid_id(self, operator_client):
        response = operator_client.get(self.url, {'ids': 'not-a-uuid'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_export_by_filter(self, operator_client, make_submission):
        make_submission(status='closed')
        make_submission(status='new')

        response = operator_client.get(self.url, {'status': 'closed'})

        rows = read_csv(response)
        assert len(rows) == 2
        assert rows[1][4] == 'closed'
        assert 'filename="submissions_' in response['Content-Disposition']

    def test_export_empty_has_header(self, operator_client):
        rows = read_csv(operator_client.get(self.url))

        assert rows == [EXPORT_COLUMNS]


class TestSubmissionStats:

    def test_get_stats(self, operator_client, make_submission):
        make_submission()
        make_submission(status='quoted')
        make_submission(created_at=timezone.now() - timedelta(days=40))

        response = operator_client.get(f'{LIST_URL}stats/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == 3
        assert response.data['new'] == 2
        assert response.data['quoted'] == 1
        assert response.data['last_7_days'] == 2
        assert len(response.data['recent_submissions']) == 3

    def test_database_failure(self, operator_client):
        with patch('contact.views.status_counts', side_effect=DatabaseError('connection lost')):
            response = operator_client.get(f'{LIST_URL}stats/')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'success': False, 'error': 'Internal server error'}


class TestContactModels:

    def test_location_parts(self, make_submission):
        assert make_submission().location_parts() == ('Hyderabad', 'Telangana', 'India')
        assert make_submission(location=LOCATION_UNKNOWN).location_parts() == ('Unknown',) * 3
        assert make_submission(location={'country': 'Canada'}).location_parts() == (
            'Unknown', 'Unknown', 'Canada'
        )

    def test_default_location_is_unknown(self, db):
        submission = ContactSubmission.objects.create(
            name='A', email='a@example.com', subject='S', message='M'
        )

        submission.refresh_from_db()
        assert submission.location == LOCATION_UNKNOWN
        assert submission.ip_address == 'unknown'


class TestStaffNotificationTask:

    def test_missing_submission(self, db):
        result = send_staff_notification.apply(args=[str(uuid.uuid4())]).get()

        assert 'not found' in result
        assert len(mail.outbox) == 0

    def test_sends_email(self, sample_submission):
        send_staff_notification.apply(args=[str(sample_submission.id)]).get()

        assert len(mail.outbox) == 1
        assert 'Hyderabad, Telangana, India' in mail.outbox[0].body


class TestCreateDashboardAdminCommand:

    def test_creates_staff_operator(self, db):
        from django.contrib.auth import get_user_model
        from django.core.management import call_command

        call_command('create_dashboard_admin', username='ops', email='Ops@Panchroma.ca', password='s3cret-pass')

        user = get_user_model().objects.get(username='ops')
        assert user.is_staff is True
        assert user.email == 'ops@panchroma.ca'
        assert user.check_password('s3cret-pass')

    def test_existing_user_is_promoted(self, regular_user):
        from django.core.management import call_command

        call_command('create_dashboard_admin', username='visitor', password='new-pass-123')

        regular_user.refresh_from_db()
        assert regular_user.is_staff is True
        assert regular_user.check_password('new-pass-123')
