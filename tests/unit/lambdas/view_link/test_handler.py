"""Unit tests for the /r/{slug}/view lambda handler"""

import json
from typing import cast

import pytest

from qrlinks.lambdas.view_link import app
from qrlinks.services import LinkRegistry
from qrlinks.types import LambdaEvent


def view_event(slug: str | None) -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/r/{slug}/view',
        'httpMethod': 'GET',
        'pathParameters': {'slug': slug} if slug is not None else None,
        'requestContext': {'domainName': 'qr.example.com', 'stage': 'Prod'},
    })


class TestViewLinkHandler:

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch, store):
        monkeypatch.setattr(app, 'kv_store', lambda: store)

    @pytest.fixture
    def registry(self, store) -> LinkRegistry:
        return LinkRegistry(store)

    def test_view(self, context, registry):
        registry.create('note', 'sms:+15551234567?body=See%20you%20at%208')

        response = app.lambda_handler(view_event('note'), context)

        assert response['statusCode'] == 200
        assert json.loads(response['body']) == {
            'slug': 'note',
            'destination': 'sms:+15551234567?body=See%20you%20at%208',
            'type': 'sms',
        }

    def test_view_does_not_count_clicks(self, context, registry):
        registry.create('promo', 'https://example.com')

        app.lambda_handler(view_event('promo'), context)

        assert registry.get('promo').clicks == 0

    def test_view_unknown_slug(self, context):
        response = app.lambda_handler(view_event('missing'), context)

        assert response['statusCode'] == 404
        assert json.loads(response['body'])['error'] == 'Link not found'

    def test_view_missing_slug(self, context):
        assert app.lambda_handler(view_event(None), context)['statusCode'] == 400
