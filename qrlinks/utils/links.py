"""Link validation and classification.

Functions:
    is_valid_slug(slug) -> bool
        Slugs may only contain letters, digits, hyphens and underscores.
    is_valid_destination(destination) -> bool
        Destinations must be absolute URLs with a non-executable scheme.
    link_type(destination) -> LinkType
        Classify a destination as phone, sms, location or plain url.

Example:
    >>> is_valid_slug('ok-slug_2')
    True
    >>> is_valid_slug('bad slug!')
    False
    >>> is_valid_destination('https://example.com/sale')
    True
    >>> is_valid_destination('not a url')
    False
    >>> link_type('tel:+15551234567')
    <LinkType.PHONE: 'phone'>
"""

import re
from urllib.parse import urlsplit

from qrlinks.constants import LinkType


SLUG_PATTERN = re.compile(r'[A-Za-z0-9_-]+')

# Schemes which need an authority component (scheme://host/...)
HIERARCHICAL_SCHEMES = frozenset({'http', 'https', 'ftp', 'ws', 'wss'})

# Schemes that execute or embed content in the browser instead of navigating
BLOCKED_SCHEMES = frozenset({'javascript', 'data', 'vbscript'})

MAPS_HOSTS = ('google.com/maps', 'maps.google.com', 'goo.gl/maps', 'maps.app.goo.gl')


def is_valid_slug(slug: object) -> bool:
    return isinstance(slug, str) and SLUG_PATTERN.fullmatch(slug) is not None


def is_valid_destination(destination: object) -> bool:
    """Return True if `destination` parses as an absolute URL

    Mirrors WHATWG URL parsing closely enough for redirect targets:
    a scheme is required, web schemes need a host, whitespace is not allowed.
    """
    if not isinstance(destination, str):
        return False

    candidate = destination.strip()
    if not candidate or any(char.isspace() for char in candidate):
        return False

    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
    except ValueError:
        return False

    scheme = parts.scheme.lower()
    if not scheme or scheme in BLOCKED_SCHEMES:
        return False
    if scheme in HIERARCHICAL_SCHEMES:
        return bool(hostname)
    return len(candidate) > len(scheme) + 1


def link_type(destination: str) -> LinkType:
    lowered = destination.lower()
    if lowered.startswith('tel:'):
        return LinkType.PHONE
    if lowered.startswith(('sms:', 'smsto:')):
        return LinkType.SMS
    if any(host in lowered for host in MAPS_HOSTS):
        return LinkType.LOCATION
    return LinkType.URL
