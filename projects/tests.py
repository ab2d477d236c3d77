"""
Tests for projects and submission-to-project conversion
"""
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework import status

from projects.models import Milestone, Project

pytestmark = pytest.mark.django_db

LIST_URL = '/api/projects/'


@pytest.fixture
def sample_project(db):
    return Project.objects.create(
        title='Bakery website',
        description='Five page brochure site',
        client_name='Jane Baker',
        client_email='jane@bakery.ca',
        project_type='Website Design',
        budget=Decimal('5000.00'),
        paid=Decimal('1500.00'),
    )


class TestProjectModel:

    def test_balance_due(self, sample_project):
        assert sample_project.balance_due == Decimal('3500.00')

    def test_completed_date_stamped(self, sample_project):
        sample_project.status = 'completed'
        sample_project.save()

        assert sample_project.completed_date == timezone.localdate()

    def test_is_overdue(self, sample_project):
        sample_project.due_date = timezone.localdate() - timedelta(days=1)
        assert sample_project.is_overdue is True

        sample_project.status = 'completed'
        assert sample_project.is_overdue is False


class TestProjectAPI:

    def test_requires_operator(self, api_client):
        assert api_client.get(LIST_URL).status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_project(self, operator_client):
        response = operator_client.post(LIST_URL, {
            'title': 'Storefront',
            'description': 'Shopify build',
            'client_name': 'Raj',
            'client_email': 'raj@example.com',
            'project_type': 'E-commerce',
            'budget': '8000.00',
            'technologies': ['Shopify', 'Liquid'],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'planning'
        assert response.data['balance_due'] == '8000.00'
        assert Project.objects.get().technologies == ['Shopify', 'Liquid']

    def test_paid_cannot_exceed_budget(self, operator_client):
        response = operator_client.post(LIST_URL, {
            'title': 'Logo',
            'description': 'Logo refresh',
            'client_name': 'Raj',
            'client_email': 'raj@example.com',
            'budget': '100.00',
            'paid': '200.00',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'paid' in response.data['fields']

    def test_due_date_before_start(self, operator_client):
        response = operator_client.post(LIST_URL, {
            'title': 'Logo',
            'description': 'Logo refresh',
            'client_name': 'Raj',
            'client_email': 'raj@example.com',
            'start_date': '2026-05-10',
            'due_date': '2026-05-01',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'due_date' in response.data['fields']

    def test_technologies_must_be_strings(self, operator_client):
        response = operator_client.post(LIST_URL, {
            'title': 'Logo',
            'description': 'Logo refresh',
            'client_name': 'Raj',
            'client_email': 'raj@example.com',
            'technologies': [1, 2],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_and_search(self, operator_client, sample_project):
        response = operator_client.get(LIST_URL, {'search': 'bakery'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['title'] == 'Bakery website'

    def test_filter_by_status(self, operator_client, sample_project):
        response = operator_client.get(LIST_URL, {'status': 'completed'})

        assert response.data['count'] == 0

    def test_update_project(self, operator_client, sample_project):
        response = operator_client.patch(
            f'{LIST_URL}{sample_project.id}/', {'status': 'development'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        sample_project.refresh_from_db()
        assert sample_project.status == 'development'

    def test_missing_project(self, operator_client):
        response = operator_client.get(f'{LIST_URL}{uuid.uuid4()}/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Project not found'

    def test_delete_project(self, operator_client, sample_project):
        response = operator_client.delete(f'{LIST_URL}{sample_project.id}/')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Project.objects.count() == 0


class TestMilestones:

    def test_create_with_milestones(self, operator_client):
        response = operator_client.post(LIST_URL, {
            'title': 'Storefront',
            'description': 'Shopify build',
            'client_name': 'Raj',
            'client_email': 'raj@example.com',
            'notes': 'Client prefers email',
            'milestones': [
                {'name': 'Wireframes', 'due_date': '2026-11-01'},
                {'name': 'Launch'},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert [m['name'] for m in response.data['milestones']] == ['Wireframes', 'Launch']
        assert response.data['notes'] == 'Client prefers email'
        assert list(Milestone.objects.values_list('position', flat=True)) == [0, 1]

    def test_update_replaces_milestones(self, operator_client, sample_project):
        Milestone.objects.create(project=sample_project, position=0, name='Old')

        operator_client.patch(
            f'{LIST_URL}{sample_project.id}/', {'milestones': [{'name': 'New'}]}, format='json'
        )

        assert list(sample_project.milestones.values_list('name', flat=True)) == ['New']

    def test_complete_milestone_stamps_date(self, operator_client, sample_project):
        Milestone.objects.create(project=sample_project, position=0, name='Design')
        Milestone.objects.create(project=sample_project, position=1, name='Build')

        response = operator_client.put(
            f'{LIST_URL}{sample_project.id}/milestones/1/', {'completed': True}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        build = sample_project.milestones.get(name='Build')
        assert build.completed is True
        assert build.completed_date == timezone.localdate()
        assert response.data['data']['milestones'][1]['completed'] is True
        assert sample_project.milestones.get(name='Design').completed is False

    def test_completed_date_kept_on_repeat(self, operator_client, sample_project):
        earlier = timezone.localdate() - timedelta(days=5)
        Milestone.objects.create(
            project=sample_project, position=0, name='Design', completed=True, completed_date=earlier
        )

        operator_client.put(
            f'{LIST_URL}{sample_project.id}/milestones/0/', {'completed': True}, format='json'
        )

        assert sample_project.milestones.get().completed_date == earlier

    def test_missing_milestone(self, operator_client, sample_project):
        response = operator_client.put(
            f'{LIST_URL}{sample_project.id}/milestones/3/', {'completed': True}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Milestone not found'

    def test_milestone_of_missing_project(self, operator_client):
        response = operator_client.put(
            f'{LIST_URL}{uuid.uuid4()}/milestones/0/', {'completed': True}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestProjectFromSubmission:

    def test_convert_submission(self, operator_client, sample_submission):
        response = operator_client.post(
            f'{LIST_URL}from-submission/{sample_submission.id}/',
            {'budget': '2500.00', 'project_type': 'Website Design'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.data['data']
        assert data['client_name'] == 'John Doe'
        assert data['client_email'] == 'john@example.com'
        assert data['budget'] == '2500.00'
        assert data['source_submission'] == sample_submission.id

        sample_submission.refresh_from_db()
        assert sample_submission.status == 'quoted'

    def test_convert_missing_submission(self, operator_client):
        response = operator_client.post(f'{LIST_URL}from-submission/{uuid.uuid4()}/', {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_deleting_submission_keeps_project(self, operator_client, sample_submission):
        operator_client.post(f'{LIST_URL}from-submission/{sample_submission.id}/', {}, format='json')

        response = operator_client.post(
            '/api/submissions/bulk-delete/', {'ids': [str(sample_submission.id)]}, format='json'
        )

        assert response.data['deletedCount'] == 1
        project = Project.objects.get()
        assert project.source_submission is None

    def test_convert_with_non_object_body(self, operator_client, sample_submission):
        response = operator_client.post(
            f'{LIST_URL}from-submission/{sample_submission.id}/', [{'title': 'x'}], format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Validation failed'
        assert Project.objects.count() == 0
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'new'


class TestDashboardAnalytics:

    def test_activity_feed(self, operator_client, make_submission, sample_project):
        make_submission(name='Old', created_at=timezone.now() - timedelta(days=3))
        make_submission(name='Recent')

        response = operator_client.get('/api/dashboard/activity/', {'limit': 2})

        assert response.status_code == status.HTTP_200_OK
        data = response.data['data']
        assert len(data) == 2
        assert {item['type'] for item in data} == {'contact', 'project'}
        assert data[0]['date'] >= data[1]['date']
        assert 'Old' not in ' '.join(item['title'] for item in data)

    def test_activity_invalid_limit(self, operator_client):
        response = operator_client.get('/api/dashboard/activity/', {'limit': 'ten'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_contacts_chart(self, operator_client, make_submission):
        make_submission()
        make_submission()
        make_submission(created_at=timezone.now() - timedelta(days=60))

        response = operator_client.get('/api/dashboard/charts/contacts/', {'period': 30})

        assert response.status_code == status.HTTP_200_OK
        assert sum(row['count'] for row in response.data['data']) == 2

    def test_projects_chart(self, operator_client, sample_project):
        Project.objects.create(
            title='App', description='iOS app', client_name='Raj',
            client_email='raj@example.com', status='development'
        )

        response = operator_client.get('/api/dashboard/charts/projects/')

        assert response.data['data'] == [
            {'status': 'development', 'count': 1},
            {'status': 'planning', 'count': 1},
        ]

    def test_revenue_chart(self, operator_client, sample_project):
        response = operator_client.get('/api/dashboard/charts/revenue/')

        row = response.data['data'][0]
        assert Decimal(row['budget']) == Decimal('5000.00')
        assert Decimal(row['paid']) == Decimal('1500.00')
        assert row['count'] == 1

    def test_unknown_chart_type(self, operator_client):
        response = operator_client.get('/api/dashboard/charts/sources/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid chart type'

    def test_requires_operator(self, api_client):
        assert api_client.get('/api/dashboard/activity/').status_code == status.HTTP_401_UNAUTHORIZED
