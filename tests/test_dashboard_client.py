"""
Tests for the dashboard client: selection, bulk actions, form state and
the HTTP wrapper.
"""
from unittest.mock import Mock

import pytest
import requests

from dashboard_client import (
    APIError,
    BulkActionController,
    ContactFormState,
    FULL,
    PARTIAL,
    SelectionState,
    SubmissionsAPI,
    UNSELECTED,
)


def rows(*ids):
    return [{'id': row_id, 'name': f'Client {row_id}'} for row_id in ids]


class FakeAPI:
    """Records calls; fails when told to."""

    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.calls = []

    def bulk_delete(self, ids):
        self.calls.append(('bulk_delete', list(ids)))
        if self.fail_with:
            raise self.fail_with
        return len(ids)

    def export_csv(self, ids=None, query='', status=None):
        self.calls.append(('export_csv', list(ids)))
        if self.fail_with:
            raise self.fail_with
        return 'name,email\r\n'

    def list_submissions(self, query='', status=None, page=1):
        self.calls.append(('list_submissions', query, status, page))
        return {'results': rows('x', 'y')}

    def submit_contact(self, data):
        self.calls.append(('submit_contact', data))
        if self.fail_with:
            raise self.fail_with
        return {'success': True}


@pytest.fixture
def selection():
    return SelectionState(rows('a', 'b', 'c', 'd', 'e'))


def controller(api, selection, confirm=True):
    notify = Mock()
    download = Mock()
    ctl = BulkActionController(
        api, selection,
        confirm=Mock(return_value=confirm),
        notify=notify,
        download=download
    )
    return ctl


class TestSelectionState:

    def test_initially_unselected(self, selection):
        assert selection.mode == UNSELECTED
        assert selection.count == 0
        assert selection.action_bar_visible is False
        assert selection.header_checked is False

    def test_partial_selection(self, selection):
        selection.toggle('b')
        selection.toggle('d')

        assert selection.mode == PARTIAL
        assert selection.selected_ids == ['b', 'd']
        assert selection.action_bar_label == '2 items selected'
        assert [row['selected'] for row in selection.rows] == [False, True, False, True, False]

    def test_single_item_label(self, selection):
        selection.toggle('a')
        assert selection.action_bar_label == '1 item selected'

    def test_toggle_twice_deselects(self, selection):
        selection.toggle('a')
        selection.toggle('a')

        assert selection.mode == UNSELECTED

    def test_toggle_hidden_row(self, selection):
        with pytest.raises(KeyError):
            selection.toggle('zz')

    def test_toggle_all_from_partial_selects_everything(self, selection):
        selection.toggle('a')
        selection.toggle_all()

        assert selection.mode == FULL
        assert selection.header_checked is True
        assert selection.count == 5

    def test_toggle_all_from_full_clears(self, selection):
        selection.toggle_all()
        selection.toggle_all()

        assert selection.mode == UNSELECTED

    def test_deselect_one_after_select_all(self, selection):
        selection.toggle_all()
        selection.toggle('c')

        assert selection.mode == PARTIAL
        assert selection.count == 4
        assert selection.header_checked is False
        assert selection.action_bar_label == '4 items selected'

        selection.toggle('c')

        assert selection.mode == FULL
        assert selection.count == 5

    def test_cancel(self, selection):
        selection.toggle_all()
        selection.cancel()

        assert selection.count == 0
        assert selection.action_bar_visible is False

    def test_selection_survives_new_rows(self, selection):
        selection.toggle('a')
        selection.set_rows(rows('b', 'c'))

        assert selection.is_selected('a')
        assert selection.mode == PARTIAL
        assert selection.selected_ids == ['a']

        selection.toggle_all()
        assert selection.selected_ids == ['b', 'c', 'a']

    def test_empty_table(self):
        selection = SelectionState()

        selection.toggle_all()

        assert selection.mode == UNSELECTED

    def test_incoming_selected_flag_ignored(self):
        selection = SelectionState([{'id': 'a', 'selected': True}])

        assert selection.count == 0


class TestBulkDelete:

    def test_delete_two_of_five(self, selection):
        api = FakeAPI()
        ctl = controller(api, selection)
        selection.toggle('a')
        selection.toggle('c')

        deleted = ctl.delete_selected()

        assert deleted == 2
        assert api.calls == [('bulk_delete', ['a', 'c'])]
        assert selection.visible_ids == ['b', 'd', 'e']
        assert selection.count == 0
        ctl.confirm.assert_called_once_with('Are you sure you want to delete 2 submissions?')
        ctl.notify.assert_called_once_with('success', 'Successfully deleted 2 submissions')

    def test_confirmation_declined(self, selection):
        api = FakeAPI()
        ctl = controller(api, selection, confirm=False)
        selection.toggle('a')

        assert ctl.delete_selected() is None
        assert api.calls == []
        assert selection.selected_ids == ['a']

    def test_failure_keeps_selection(self, selection):
        api = FakeAPI(fail_with=APIError('Internal server error', status_code=500))
        ctl = controller(api, selection)
        selection.toggle('a')
        selection.toggle('b')

        assert ctl.delete_selected() is None
        assert selection.selected_ids == ['a', 'b']
        assert len(selection.visible_ids) == 5
        ctl.notify.assert_called_once_with('error', 'Failed to delete submissions: Internal server error')
        assert ctl.is_busy() is False

    def test_disabled_without_selection(self, selection):
        api = FakeAPI()
        ctl = controller(api, selection)

        assert ctl.delete_selected() is None
        ctl.confirm.assert_not_called()

    def test_reentrant_call_ignored(self, selection):
        selection.toggle('a')
        api = FakeAPI()
        ctl = controller(api, selection)

        def bulk_delete(ids):
            assert ctl.is_busy('delete')
            assert ctl.delete_selected() is None
            return 1

        api.bulk_delete = bulk_delete

        assert ctl.delete_selected() == 1


class TestBulkExport:

    def test_export_selected(self, selection):
        api = FakeAPI()
        ctl = controller(api, selection)
        selection.toggle('b')
        selection.toggle('e')

        assert ctl.export_selected() is True

        assert api.calls == [('export_csv', ['b', 'e'])]
        filename, content = ctl.download.call_args[0]
        assert filename.startswith('selected-submissions-')
        assert filename.endswith('.csv')
        assert content == 'name,email\r\n'
        assert selection.selected_ids == ['b', 'e']

    def test_export_failure(self, selection):
        api = FakeAPI(fail_with=APIError('Forbidden', status_code=403))
        ctl = controller(api, selection)
        selection.toggle('a')

        assert ctl.export_selected() is False
        ctl.download.assert_not_called()
        ctl.notify.assert_called_once_with('error', 'Failed to export submissions')
        assert selection.selected_ids == ['a']

    def test_load_keeps_selection(self, selection):
        api = FakeAPI()
        ctl = controller(api, selection)
        selection.toggle('a')

        ctl.load(query='web', status='new')

        assert api.calls == [('list_submissions', 'web', 'new', 1)]
        assert selection.visible_ids == ['x', 'y']
        assert selection.selected_ids == ['a']


class TestContactFormState:

    def fill(self, form, **values):
        defaults = {
            'name': 'Priya',
            'email': 'priya@example.com',
            'subject': 'Website',
            'message': 'Hello there',
        }
        defaults.update(values)
        for name, value in defaults.items():
            form.field_accessors(name).set_value(value)

    def test_accessors_are_per_field(self):
        form = ContactFormState()
        name = form.field_accessors('name')
        email = form.field_accessors('email')

        name.set_value('Priya')
        email.mark_touched()

        assert name.get_value() == 'Priya'
        assert email.get_value() == ''
        assert email.is_touched() is True
        assert name.is_touched() is False

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            ContactFormState().field_accessors('phone')

    def test_live_validation(self):
        form = ContactFormState()
        email = form.field_accessors('email')

        email.set_value('nope')
        assert email.get_errors() == ['Please enter a valid email address']

        email.set_value('ok@example.com')
        assert email.get_errors() == []

    def test_validate_marks_all_touched(self):
        form = ContactFormState()

        assert form.validate() is False
        assert all(form.touched.values())
        assert form.first_invalid_field == 'name'
        assert form.errors['message'] == ['Message is required']

    def test_length_limits(self):
        form = ContactFormState()
        self.fill(form, message='x' * 2001)

        assert form.validate() is False
        assert form.errors['message'] == ['Must be 2000 characters or fewer']

    def test_submit_success(self):
        form = ContactFormState()
        self.fill(form, name='  Priya  ')
        api = FakeAPI()

        assert form.submit(api) is True
        assert api.calls[0][1]['name'] == 'Priya'
        assert form.submitting is False

    def test_submit_maps_server_errors(self):
        form = ContactFormState()
        self.fill(form)
        api = FakeAPI(fail_with=APIError(
            'Validation failed',
            status_code=400,
            payload={'fields': {'email': ['Enter a valid email address.']}}
        ))

        assert form.submit(api) is False
        assert form.errors['email'] == ['Enter a valid email address.']

    def test_submit_rate_limited_propagates(self):
        form = ContactFormState()
        self.fill(form)
        api = FakeAPI(fail_with=APIError('Too many submissions', status_code=429))

        with pytest.raises(APIError):
            form.submit(api)
        assert form.submitting is False

    def test_invalid_form_not_sent(self):
        api = FakeAPI()

        assert ContactFormState().submit(api) is False
        assert api.calls == []


class TestSubmissionsAPI:

    def response(self, status_code=200, payload=None, text=''):
        response = Mock(status_code=status_code, ok=status_code < 400, text=text)
        response.json.return_value = payload or {}
        return response

    def test_token_header(self):
        api = SubmissionsAPI('https://api.test/', token='abc')
        assert api.session.headers['Authorization'] == 'Bearer abc'

        api.token = None
        assert 'Authorization' not in api.session.headers

    def test_bulk_delete(self):
        session = Mock(headers={})
        session.request.return_value = self.response(payload={'success': True, 'deletedCount': 2})
        api = SubmissionsAPI('https://api.test', session=session)

        assert api.bulk_delete(['a', 'b']) == 2
        session.request.assert_called_once_with(
            'POST', 'https://api.test/api/submissions/bulk-delete/',
            json={'ids': ['a', 'b']}, timeout=10
        )

    def test_export_with_ids(self):
        session = Mock(headers={})
        session.request.return_value = self.response(text='csv-body')
        api = SubmissionsAPI('https://api.test', session=session)

        assert api.export_csv(ids=['a', 'b']) == 'csv-body'
        assert session.request.call_args[1]['params'] == {'ids': 'a,b'}

    def test_list_drops_all_status(self):
        session = Mock(headers={})
        session.request.return_value = self.response(payload={'results': []})
        api = SubmissionsAPI('https://api.test', session=session)

        api.list_submissions(query='logo', status='all')

        assert session.request.call_args[1]['params'] == {'page': 1, 'query': 'logo'}

    def test_error_response(self):
        session = Mock(headers={})
        session.request.return_value = self.response(
            status_code=422, payload={'success': False, 'error': 'Invalid status'}
        )
        api = SubmissionsAPI('https://api.test', session=session)

        with pytest.raises(APIError) as exc_info:
            api.update_status('a', 'archived')

        assert exc_info.value.status_code == 422
        assert exc_info.value.message == 'Invalid status'

    def test_transport_error(self):
        session = Mock(headers={})
        session.request.side_effect = requests.exceptions.ConnectionError('refused')
        api = SubmissionsAPI('https://api.test', session=session)

        with pytest.raises(APIError):
            api.stats()
