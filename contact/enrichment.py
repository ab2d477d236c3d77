"""
Submission Enrichment

Derives the client IP address and a coarse location for a contact
submission before it is stored.

- Private, loopback and unparsable addresses get the 'Local' sentinel
  without any network call.
- Routable addresses get one lookup against the configured geolocation
  provider (ip-api.com compatible JSON).
- Any lookup failure degrades to the 'Unknown' sentinel. Enrichment never
  fails a submission.
"""

import ipaddress
import logging
from typing import Dict, Optional, Union

import requests
from django.conf import settings

from core.exceptions import EnrichmentFailure
from .models import LOCATION_LOCAL, LOCATION_UNKNOWN

logger = logging.getLogger(__name__)


# Checked in order; the first usable value wins.
CLIENT_IP_HEADERS = (
    'HTTP_X_REAL_IP',
    'HTTP_X_FORWARDED_FOR',
    'HTTP_CF_CONNECTING_IP',
    'HTTP_FASTLY_CLIENT_IP',
    'HTTP_TRUE_CLIENT_IP',
    'HTTP_X_CLUSTER_CLIENT_IP',
    'HTTP_X_FORWARDED',
    'HTTP_FORWARDED_FOR',
    'HTTP_FORWARDED',
)

UNKNOWN_IP = 'unknown'


def _first_address(value: str) -> str:
    """First entry of a comma-separated header, without an RFC 7239 'for=' prefix."""
    ip = value.split(',')[0].split(';')[0].strip()
    if ip.lower().startswith('for='):
        ip = ip[4:].strip('"')
    return ip


def get_client_ip(request) -> str:
    """
    Get client IP address from request.

    Proxy headers are checked first, then the socket address.
    """
    for header in CLIENT_IP_HEADERS:
        value = request.META.get(header)
        if not value:
            continue
        ip = _first_address(value)
        if ip and ip.lower() != UNKNOWN_IP:
            return ip

    return request.META.get('REMOTE_ADDR') or UNKNOWN_IP


def is_local_address(ip: str) -> bool:
    """True for private, loopback, link-local or unparsable addresses."""
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return True

    mapped = getattr(address, 'ipv4_mapped', None)
    if mapped is not None:
        address = mapped

    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_unspecified
        or address.is_reserved
    )


class GeoLocationService:
    """
    Client for the IP geolocation provider.

    Usage:
        service = GeoLocationService()
        location = service.lookup('49.36.1.1')
    """

    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None,
                 api_key: Optional[str] = None):
        self.api_url = api_url or settings.GEOLOCATION_API_URL
        self.timeout = timeout if timeout is not None else settings.GEOLOCATION_TIMEOUT
        self.api_key = api_key if api_key is not None else settings.GEOLOCATION_API_KEY

    def lookup(self, ip: str) -> Dict[str, object]:
        """
        Look up one address.

        Returns:
            dict with keys: city, region, country, lat, lng

        Raises:
            EnrichmentFailure: transport error, timeout, bad status or
            provider-reported failure
        """
        params = {'key': self.api_key} if self.api_key else None

        try:
            response = requests.get(
                self.api_url.format(ip=ip),
                params=params,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise EnrichmentFailure(f"Geolocation lookup timed out for {ip}") from e
        except requests.exceptions.RequestException as e:
            raise EnrichmentFailure(f"Geolocation network error for {ip}: {e}") from e

        if response.status_code != 200:
            raise EnrichmentFailure(
                f"Geolocation provider returned status {response.status_code} for {ip}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EnrichmentFailure(f"Geolocation provider returned invalid JSON for {ip}") from e

        if not isinstance(data, dict):
            raise EnrichmentFailure(
                f"Geolocation provider returned an unexpected payload for {ip}: {type(data).__name__}"
            )

        if data.get('status') != 'success':
            raise EnrichmentFailure(
                f"Geolocation lookup failed for {ip}: {data.get('message', 'unknown reason')}"
            )

        return {
            'city': data.get('city') or LOCATION_UNKNOWN,
            'region': data.get('regionName') or LOCATION_UNKNOWN,
            'country': data.get('country') or LOCATION_UNKNOWN,
            'lat': data.get('lat'),
            'lng': data.get('lon'),
        }


def resolve_location(ip: str, service: Optional[GeoLocationService] = None) -> Union[str, Dict[str, object]]:
    """
    Location for a submission coming from `ip`.

    Returns the 'Local' sentinel for local addresses, the provider's
    location for routable ones, and the 'Unknown' sentinel when the
    lookup fails.
    """
    if is_local_address(ip):
        return LOCATION_LOCAL

    service = service or GeoLocationService()
    try:
        return service.lookup(ip)
    except EnrichmentFailure as e:
        logger.warning(f"Could not resolve location, storing '{LOCATION_UNKNOWN}': {e}")
        return LOCATION_UNKNOWN


def enrich_request(request) -> Dict[str, object]:
    """
    Enrichment fields for a submission created from `request`.

    Returns:
        dict with keys: ip_address, user_agent, location
    """
    ip = get_client_ip(request)
    return {
        'ip_address': ip,
        'user_agent': request.META.get('HTTP_USER_AGENT', '')[:500],
        'location': resolve_location(ip),
    }
