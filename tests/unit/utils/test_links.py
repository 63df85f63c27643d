"""Unit tests for link validation and classification in links.py

Test coverage includes:
    1. Slug validation
    2. Destination validation (absolute URLs, blocked schemes)
    3. Link type classification
"""

import pytest

from qrlinks.constants import LinkType
from qrlinks.utils.links import is_valid_destination, is_valid_slug, link_type


# -------------------------------
# 1. Slug validation
# -------------------------------


@pytest.mark.parametrize("slug", ['promo', 'Summer-Sale_2025', 'a', '___', '0'])
def test_valid_slugs(slug):
    assert is_valid_slug(slug) is True


@pytest.mark.parametrize("slug", ['', 'bad slug', 'bad/slug', 'promo!', 'ünïcode', 'promo\n', None, 42])
def test_invalid_slugs(slug):
    assert is_valid_slug(slug) is False


# -------------------------------
# 2. Destination validation
# -------------------------------


@pytest.mark.parametrize(
    "destination",
    [
        'https://example.com',
        'http://localhost:3000/path?q=1#frag',
        'https://example.com/sale',
        'tel:+15551234567',
        'sms:+15551234567?body=hi',
        'mailto:someone@example.com',
        'ftp://files.example.com/file.txt',
    ],
)
def test_valid_destinations(destination):
    assert is_valid_destination(destination) is True


@pytest.mark.parametrize(
    "destination",
    [
        '',
        'not a url',
        'example.com',
        '/relative/path',
        'https://',
        'http:///path-only',
        'javascript:alert(1)',
        'JavaScript:alert(1)',
        'data:text/html;base64,PHNjcmlwdD4=',
        'vbscript:msgbox',
        'tel:',
        'https://exa mple.com',
        None,
    ],
)
def test_invalid_destinations(destination):
    assert is_valid_destination(destination) is False


# -------------------------------
# 3. Link type classification
# -------------------------------


@pytest.mark.parametrize(
    "destination, expected",
    [
        ('tel:+15551234567', LinkType.PHONE),
        ('TEL:+15551234567', LinkType.PHONE),
        ('sms:+15551234567', LinkType.SMS),
        ('smsto:+15551234567:hello', LinkType.SMS),
        ('https://www.google.com/maps/place/Eiffel+Tower', LinkType.LOCATION),
        ('https://maps.google.com/?q=48.8584,2.2945', LinkType.LOCATION),
        ('https://maps.app.goo.gl/abc123', LinkType.LOCATION),
        ('https://example.com', LinkType.URL),
    ],
)
def test_link_type(destination, expected):
    assert link_type(destination) is expected
