"""
Tests for client IP detection and geolocation.
"""
from unittest.mock import Mock, patch

import pytest
import requests

from contact.enrichment import (
    GeoLocationService,
    enrich_request,
    get_client_ip,
    is_local_address,
    resolve_location,
)
from contact.models import LOCATION_LOCAL, LOCATION_UNKNOWN
from core.exceptions import EnrichmentFailure


def provider_response(status_code=200, payload=None):
    response = Mock(status_code=status_code)
    response.json.return_value = payload if payload is not None else {
        'status': 'success',
        'city': 'Toronto',
        'regionName': 'Ontario',
        'country': 'Canada',
        'lat': 43.65,
        'lon': -79.38,
    }
    return response


class TestGetClientIp:

    def test_remote_addr(self, rf):
        request = rf.get('/', REMOTE_ADDR='203.0.113.7')
        assert get_client_ip(request) == '203.0.113.7'

    def test_forwarded_for_first_hop(self, rf):
        request = rf.get('/', HTTP_X_FORWARDED_FOR='49.36.1.1, 10.0.0.1', REMOTE_ADDR='10.0.0.1')
        assert get_client_ip(request) == '49.36.1.1'

    def test_real_ip_takes_precedence(self, rf):
        request = rf.get('/', HTTP_X_REAL_IP='198.51.100.4', HTTP_X_FORWARDED_FOR='49.36.1.1')
        assert get_client_ip(request) == '198.51.100.4'

    def test_rfc7239_forwarded(self, rf):
        request = rf.get('/', HTTP_FORWARDED='for=192.0.2.60;proto=http', REMOTE_ADDR='')
        assert get_client_ip(request) == '192.0.2.60'

    def test_unknown_header_value_is_skipped(self, rf):
        request = rf.get('/', HTTP_X_FORWARDED_FOR='unknown', REMOTE_ADDR='203.0.113.9')
        assert get_client_ip(request) == '203.0.113.9'

    def test_nothing_available(self, rf):
        request = rf.get('/', REMOTE_ADDR='')
        assert get_client_ip(request) == 'unknown'


class TestIsLocalAddress:

    @pytest.mark.parametrize('ip', [
        '127.0.0.1', '::1', '10.1.2.3', '192.168.0.10', '172.16.5.4',
        '169.254.1.1', '0.0.0.0', '::ffff:127.0.0.1', 'unknown', '',
    ])
    def test_local(self, ip):
        assert is_local_address(ip) is True

    @pytest.mark.parametrize('ip', ['8.8.8.8', '49.36.1.1', '2606:4700:4700::1111'])
    def test_routable(self, ip):
        assert is_local_address(ip) is False


class TestGeoLocationService:

    def service(self):
        return GeoLocationService(api_url='http://geo.test/json/{ip}', timeout=2, api_key='')

    def test_lookup_success(self):
        with patch('contact.enrichment.requests.get', return_value=provider_response()) as mock_get:
            location = self.service().lookup('8.8.8.8')

        mock_get.assert_called_once_with('http://geo.test/json/8.8.8.8', params=None, timeout=2)
        assert location == {
            'city': 'Toronto',
            'region': 'Ontario',
            'country': 'Canada',
            'lat': 43.65,
            'lng': -79.38,
        }

    def test_api_key_is_sent(self):
        service = GeoLocationService(api_url='http://geo.test/json/{ip}', timeout=2, api_key='abc')
        with patch('contact.enrichment.requests.get', return_value=provider_response()) as mock_get:
            service.lookup('8.8.8.8')

        assert mock_get.call_args[1]['params'] == {'key': 'abc'}

    def test_missing_fields_default_to_unknown(self):
        response = provider_response(payload={'status': 'success', 'country': 'India'})
        with patch('contact.enrichment.requests.get', return_value=response):
            location = self.service().lookup('49.36.1.1')

        assert location['city'] == LOCATION_UNKNOWN
        assert location['region'] == LOCATION_UNKNOWN
        assert location['country'] == 'India'

    @pytest.mark.parametrize('side_effect', [
        requests.exceptions.Timeout,
        requests.exceptions.ConnectionError,
    ])
    def test_transport_errors(self, side_effect):
        with patch('contact.enrichment.requests.get', side_effect=side_effect):
            with pytest.raises(EnrichmentFailure):
                self.service().lookup('8.8.8.8')

    def test_bad_status_code(self):
        with patch('contact.enrichment.requests.get', return_value=provider_response(status_code=503)):
            with pytest.raises(EnrichmentFailure):
                self.service().lookup('8.8.8.8')

    def test_provider_reports_failure(self):
        response = provider_response(payload={'status': 'fail', 'message': 'reserved range'})
        with patch('contact.enrichment.requests.get', return_value=response):
            with pytest.raises(EnrichmentFailure, match='reserved range'):
                self.service().lookup('8.8.8.8')

    @pytest.mark.parametrize('payload', [[], 'success', None])
    def test_non_object_payload(self, payload):
        response = Mock(status_code=200)
        response.json.return_value = payload
        with patch('contact.enrichment.requests.get', return_value=response):
            with pytest.raises(EnrichmentFailure, match='unexpected payload'):
                self.service().lookup('8.8.8.8')

    def test_invalid_json(self):
        response = Mock(status_code=200)
        response.json.side_effect = ValueError('not json')
        with patch('contact.enrichment.requests.get', return_value=response):
            with pytest.raises(EnrichmentFailure):
                self.service().lookup('8.8.8.8')


class TestResolveLocation:

    def test_local_address_skips_lookup(self):
        service = Mock()
        assert resolve_location('192.168.1.1', service=service) == LOCATION_LOCAL
        service.lookup.assert_not_called()

    def test_failure_degrades_to_unknown(self):
        service = Mock()
        service.lookup.side_effect = EnrichmentFailure('timed out')
        assert resolve_location('8.8.8.8', service=service) == LOCATION_UNKNOWN

    def test_success(self):
        service = Mock()
        service.lookup.return_value = {'city': 'Toronto'}
        assert resolve_location('8.8.8.8', service=service) == {'city': 'Toronto'}


def test_enrich_request_truncates_user_agent(rf):
    request = rf.get('/', REMOTE_ADDR='127.0.0.1', HTTP_USER_AGENT='A' * 600)

    data = enrich_request(request)

    assert data['ip_address'] == '127.0.0.1'
    assert data['location'] == LOCATION_LOCAL
    assert len(data['user_agent']) == 500
